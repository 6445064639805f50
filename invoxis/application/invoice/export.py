from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from invoxis.application.contracts.document_renderer import (
    CaptureSurface,
    DocumentRenderer,
    RenderOptions,
)
from invoxis.application.errors import (
    ExportInProgressError,
    PreviewSurfaceMissingError,
    RenderFailedError,
)
from invoxis.application.invoice.engine import InvoiceEngine, InvoiceSnapshot
from invoxis.domain.numbering import build_invoice_filename


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    filename: str
    path: Optional[Path]
    content: bytes


class InvoiceExporter:
    """Turns the mounted preview into ``Invoice_<number>_<YYYYMMDD>.pdf``.

    The bytes are always returned for download. A copy is kept on disk
    only when ``export_dir`` is given; nothing prunes that directory.

    Only one export runs at a time; a request arriving while another is
    in flight is rejected rather than queued. The engine is not locked,
    edits made during an export simply miss the captured snapshot.
    """

    def __init__(
        self,
        engine: InvoiceEngine,
        renderer: DocumentRenderer,
        export_dir: Optional[Path] = None,
        options: RenderOptions | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._engine = engine
        self._renderer = renderer
        self._export_dir = Path(export_dir) if export_dir is not None else None
        self._options = options or RenderOptions()
        self._clock = clock
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def filename_for_today(self) -> str:
        return build_invoice_filename(self._engine.settings.invoice_number, self._clock())

    async def export(self, surface: Optional[CaptureSurface]) -> ExportResult:
        if surface is None or not surface.mounted:
            logger.warning("PDF export requested without a mounted preview")
            raise PreviewSurfaceMissingError()
        if self._in_flight:
            logger.info("PDF export ignored, another export is still running")
            raise ExportInProgressError()

        self._in_flight = True
        filename = self.filename_for_today()
        snapshot = self._engine.snapshot()
        try:
            try:
                surface.prepare_for_capture()
                content = await asyncio.to_thread(self._capture_and_render, surface, snapshot)
            finally:
                surface.restore()
            path = None
            if self._export_dir is not None:
                path = await asyncio.to_thread(self._write, filename, content)
        except Exception as exc:
            logger.exception("Error generating PDF filename=%s", filename)
            raise RenderFailedError() from exc
        finally:
            self._in_flight = False

        logger.info("Invoice exported filename=%s size=%s", filename, len(content))
        return ExportResult(filename=filename, path=path, content=content)

    def _capture_and_render(self, surface: CaptureSurface, snapshot: InvoiceSnapshot) -> bytes:
        image = surface.capture(snapshot, self._options)
        content = self._renderer.render(image, self._options)
        if isinstance(content, bytearray):
            content = bytes(content)
        if not isinstance(content, bytes) or not content:
            raise ValueError("renderer returned no PDF output")
        return content

    def _write(self, filename: str, content: bytes) -> Path:
        self._export_dir.mkdir(parents=True, exist_ok=True)
        path = self._export_dir / filename
        path.write_bytes(content)
        return path
