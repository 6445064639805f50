from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ProfileRepository(Protocol):
    """String-keyed storage holding JSON-serialized values."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...
