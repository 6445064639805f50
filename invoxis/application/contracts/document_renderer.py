from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class RenderOptions:
    scale: int = 2
    allow_cross_origin: bool = True
    capture_width: int = 800
    capture_height: int = 1000
    background: str = "#ffffff"
    page_format: str = "A4"
    orientation: str = "portrait"
    margin_mm: float = 5.0


@runtime_checkable
class CaptureSurface(Protocol):
    """A mounted invoice preview that can be captured as an image."""

    @property
    def mounted(self) -> bool:
        ...

    def prepare_for_capture(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def capture(self, snapshot: Any, options: RenderOptions) -> Any:
        ...


@runtime_checkable
class DocumentRenderer(Protocol):
    def render(self, image: Any, options: RenderOptions) -> bytes:
        ...
