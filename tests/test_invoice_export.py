from __future__ import annotations

import asyncio
import re
import threading
from pathlib import Path

import pytest
from PIL import Image

from invoxis.application.contracts.document_renderer import RenderOptions
from invoxis.application.errors import (
    ExportInProgressError,
    PreviewSurfaceMissingError,
    RenderFailedError,
)
from invoxis.application.invoice.engine import InvoiceEngine
from invoxis.application.invoice.export import InvoiceExporter
from invoxis.infrastructure.rendering.pdf_renderer import ImagePdfRenderer, fit_on_page, page_size
from invoxis.infrastructure.rendering.preview_surface import PreviewSurface

from conftest import TODAY


class StubRenderer:
    def __init__(self, content: bytes = b"%PDF-1.4 stub", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls = 0

    def render(self, image, options: RenderOptions) -> bytes:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.content


class BlockingRenderer(StubRenderer):
    def __init__(self) -> None:
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def render(self, image, options: RenderOptions) -> bytes:
        self.started.set()
        self.release.wait(timeout=5)
        return super().render(image, options)


def _mounted_surface() -> PreviewSurface:
    surface = PreviewSurface()
    surface.mount()
    return surface


def _exporter(engine: InvoiceEngine, renderer, tmp_path: Path) -> InvoiceExporter:
    return InvoiceExporter(engine, renderer, tmp_path, clock=lambda: TODAY)


def test_filename_uses_invoice_number_and_date(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    exporter = _exporter(filled_engine, StubRenderer(), tmp_path)
    number = filled_engine.settings.invoice_number

    assert exporter.filename_for_today() == f"Invoice_{number}_20240315.pdf"
    assert re.fullmatch(r"Invoice_INV-\d{6}-\d{3}_20240315\.pdf", exporter.filename_for_today())


def test_export_writes_pdf(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    exporter = _exporter(filled_engine, StubRenderer(), tmp_path)

    result = asyncio.run(exporter.export(_mounted_surface()))

    assert result.path == tmp_path / result.filename
    assert result.path.read_bytes() == b"%PDF-1.4 stub"
    assert result.content == b"%PDF-1.4 stub"
    assert exporter.in_flight is False


def test_export_without_directory_keeps_pdf_in_memory(
    filled_engine: InvoiceEngine, tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.chdir(tmp_path)
    exporter = InvoiceExporter(filled_engine, StubRenderer(), clock=lambda: TODAY)

    result = asyncio.run(exporter.export(_mounted_surface()))

    assert result.path is None
    assert result.content == b"%PDF-1.4 stub"
    assert result.filename.endswith("_20240315.pdf")
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("mounted", [None, False])
def test_export_requires_mounted_preview(filled_engine: InvoiceEngine, tmp_path: Path, mounted) -> None:
    renderer = StubRenderer()
    exporter = _exporter(filled_engine, renderer, tmp_path)
    surface = None if mounted is None else PreviewSurface()

    with pytest.raises(PreviewSurfaceMissingError) as excinfo:
        asyncio.run(exporter.export(surface))

    assert "Preview tab" in excinfo.value.user_message
    assert renderer.calls == 0
    assert list(tmp_path.iterdir()) == []


def test_second_export_is_rejected_while_first_runs(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    renderer = BlockingRenderer()
    exporter = _exporter(filled_engine, renderer, tmp_path)
    surface = _mounted_surface()

    async def scenario():
        first = asyncio.create_task(exporter.export(surface))
        while not renderer.started.is_set():
            await asyncio.sleep(0.01)
        assert exporter.in_flight is True
        with pytest.raises(ExportInProgressError):
            await exporter.export(surface)
        renderer.release.set()
        return await first

    result = asyncio.run(scenario())

    assert renderer.calls == 1
    assert result.path.exists()
    assert exporter.in_flight is False


def test_failed_render_restores_preview(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    exporter = _exporter(filled_engine, StubRenderer(error=RuntimeError("canvas exploded")), tmp_path)
    visibility: list[bool] = []
    surface = PreviewSurface(on_actions_visibility=visibility.append)
    surface.mount()

    with pytest.raises(RenderFailedError) as excinfo:
        asyncio.run(exporter.export(surface))

    assert excinfo.value.user_message == "Error generating PDF. Please try again."
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert visibility == [False, True]
    assert surface.actions_visible is True
    assert surface.compact is False
    assert exporter.in_flight is False
    assert list(tmp_path.iterdir()) == []


def test_empty_render_output_is_a_failure(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    exporter = _exporter(filled_engine, StubRenderer(content=b""), tmp_path)

    with pytest.raises(RenderFailedError):
        asyncio.run(exporter.export(_mounted_surface()))


def test_real_capture_produces_pdf(filled_engine: InvoiceEngine, tmp_path: Path) -> None:
    filled_engine.set_logo(_png_bytes(), "image/png")
    exporter = _exporter(filled_engine, ImagePdfRenderer(), tmp_path)

    result = asyncio.run(exporter.export(_mounted_surface()))

    assert result.content.startswith(b"%PDF")
    assert result.path.stat().st_size == len(result.content)


def test_capture_uses_scale_and_dimensions(filled_engine: InvoiceEngine) -> None:
    surface = _mounted_surface()
    image = surface.capture(filled_engine.snapshot(), RenderOptions(scale=1, capture_width=400, capture_height=500))
    assert image.size == (400, 500)

    image = surface.capture(filled_engine.snapshot(), RenderOptions())
    assert image.size == (1600, 2000)


def test_capture_survives_broken_logo(engine: InvoiceEngine) -> None:
    engine.set_logo(b"not really an image", "image/png")
    image = _mounted_surface().capture(engine.snapshot(), RenderOptions(scale=1))
    assert image.size == (800, 1000)


def test_fit_on_page_uses_full_width_when_it_fits() -> None:
    placement = fit_on_page(800, 1000, 210, 297, 5)
    assert placement.width == pytest.approx(200)
    assert placement.height == pytest.approx(250)
    assert placement.x == pytest.approx(5)
    assert placement.top == pytest.approx(5)


def test_fit_on_page_shrinks_tall_images_and_centres() -> None:
    placement = fit_on_page(800, 2000, 210, 297, 5)
    assert placement.height == pytest.approx(287)
    assert placement.width == pytest.approx(114.8)
    assert placement.x == pytest.approx(5 + (200 - 114.8) / 2)
    assert placement.top == pytest.approx(5)


def test_page_size_orientation() -> None:
    width, height = page_size(RenderOptions())
    assert width < height
    width, height = page_size(RenderOptions(orientation="landscape"))
    assert width > height
    with pytest.raises(ValueError):
        page_size(RenderOptions(page_format="A7"))


def _png_bytes() -> bytes:
    from io import BytesIO

    buf = BytesIO()
    Image.new("RGB", (40, 20), (30, 60, 90)).save(buf, format="PNG")
    return buf.getvalue()
