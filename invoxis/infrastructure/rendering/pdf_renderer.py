from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image
from reportlab.lib.pagesizes import A4, LETTER, landscape, portrait
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from invoxis.application.contracts.document_renderer import DocumentRenderer, RenderOptions


_PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
}


@dataclass(frozen=True)
class Placement:
    x: float
    top: float
    width: float
    height: float


def fit_on_page(image_w: float, image_h: float, page_w: float, page_h: float, margin: float) -> Placement:
    """Fit an image onto one page: full usable width unless that overflows
    the usable height, in which case shrink and centre horizontally."""
    usable_w = page_w - 2 * margin
    usable_h = page_h - 2 * margin
    scaled_h = image_h * usable_w / image_w
    height = min(scaled_h, usable_h)
    width = image_w * height / image_h
    return Placement(
        x=margin + (usable_w - width) / 2,
        top=margin,
        width=width,
        height=height,
    )


def page_size(options: RenderOptions) -> tuple[float, float]:
    size = _PAGE_SIZES.get(options.page_format.upper())
    if size is None:
        raise ValueError(f"Unsupported page format: {options.page_format}")
    if options.orientation == "landscape":
        return landscape(size)
    return portrait(size)


class ImagePdfRenderer(DocumentRenderer):
    """Places a captured preview image on a single PDF page."""

    def render(self, image: Image.Image, options: RenderOptions) -> bytes:
        if image.width <= 0 or image.height <= 0:
            raise ValueError("Captured image is empty")

        page_w, page_h = page_size(options)
        placement = fit_on_page(image.width, image.height, page_w, page_h, options.margin_mm * mm)

        buf = BytesIO()
        c = Canvas(buf, pagesize=(page_w, page_h))
        c.drawImage(
            ImageReader(image.convert("RGB")),
            placement.x,
            # reportlab measures y from the bottom edge
            page_h - placement.top - placement.height,
            width=placement.width,
            height=placement.height,
        )
        c.showPage()
        c.save()
        return buf.getvalue()
