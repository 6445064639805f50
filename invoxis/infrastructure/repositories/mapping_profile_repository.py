from __future__ import annotations

from typing import MutableMapping, Optional

from invoxis.domain.repositories.profile_repository import ProfileRepository


class MappingProfileRepository(ProfileRepository):
    """Profile repository backed by any mutable mapping.

    A plain dict keeps everything in memory; NiceGUI's
    ``app.storage.user`` gives per-browser persistence.
    """

    def __init__(self, backing: Optional[MutableMapping[str, str]] = None) -> None:
        self._items: MutableMapping[str, str] = backing if backing is not None else {}

    def get(self, key: str) -> Optional[str]:
        value = self._items.get(key)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Profile values must be serialized strings, got {type(value).__name__}")
        self._items[key] = value

    def delete(self, key: str) -> bool:
        if key in self._items:
            del self._items[key]
            return True
        return False
