from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from invoxis.application.contracts.document_renderer import RenderOptions
from invoxis.application.invoice.engine import InvoiceSnapshot
from invoxis.domain.party import Party
from invoxis.domain.totals import format_amount


logger = logging.getLogger(__name__)

_TEXT = (15, 23, 42)
_MUTED = (100, 116, 139)
_RULE = (226, 232, 240)
_HEADER_BG = (241, 245, 249)


def decode_data_url(data_url: str | None) -> Image.Image | None:
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    header, payload = data_url.split(",", 1)
    if ";base64" not in header:
        return None
    try:
        image = Image.open(BytesIO(base64.b64decode(payload)))
        image.load()
    except (binascii.Error, UnidentifiedImageError, OSError):
        logger.warning("Logo could not be decoded, rendering without it")
        return None
    return image.convert("RGBA")


def _party_lines(party: Party) -> list[str]:
    lines = [party.address, party.email, party.phone]
    location = party.country.value
    if party.pin_code:
        location = f"{location} - {party.pin_code}"
    lines.append(location)
    return [ln for ln in lines if ln]


class PreviewSurface:
    """Server-side stand-in for the mounted invoice preview.

    ``prepare_for_capture`` hides the action buttons and switches to the
    compact print style; ``restore`` undoes both. ``capture`` draws the
    snapshot with Pillow at ``options.scale``.
    """

    def __init__(self, on_actions_visibility: Optional[Callable[[bool], None]] = None) -> None:
        self._mounted = False
        self._on_actions_visibility = on_actions_visibility
        self.actions_visible = True
        self.compact = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def bind_actions(self, on_actions_visibility: Callable[[bool], None]) -> None:
        self._on_actions_visibility = on_actions_visibility

    def mount(self) -> None:
        self._mounted = True

    def unmount(self) -> None:
        self._mounted = False

    def _set_actions_visible(self, visible: bool) -> None:
        self.actions_visible = visible
        if self._on_actions_visibility is not None:
            self._on_actions_visibility(visible)

    def prepare_for_capture(self) -> None:
        self._set_actions_visible(False)
        self.compact = True

    def restore(self) -> None:
        self.compact = False
        self._set_actions_visible(True)

    def capture(self, snapshot: InvoiceSnapshot, options: RenderOptions) -> Image.Image:
        return _InvoiceCanvas(snapshot, options, compact=self.compact).draw()


class _InvoiceCanvas:
    def __init__(self, snapshot: InvoiceSnapshot, options: RenderOptions, compact: bool) -> None:
        self.snapshot = snapshot
        self.scale = max(int(options.scale), 1)
        self.width = options.capture_width * self.scale
        self.height = options.capture_height * self.scale
        base = 12 if compact else 14
        self.padding = (10 if compact else 20) * self.scale
        self.font = ImageFont.load_default(size=base * self.scale)
        self.small = ImageFont.load_default(size=(base - 2) * self.scale)
        self.title = ImageFont.load_default(size=(base + 12) * self.scale)
        self.heading = ImageFont.load_default(size=(base + 4) * self.scale)
        self.image = Image.new("RGB", (self.width, self.height), options.background)
        self.canvas = ImageDraw.Draw(self.image)
        self.line_h = int(base * 1.6 * self.scale)

    def _text(self, x: float, y: float, s: str, font=None, fill=_TEXT, bold: bool = False, anchor: str = "la") -> None:
        self.canvas.text(
            (x, y),
            s,
            font=font or self.font,
            fill=fill,
            anchor=anchor,
            stroke_width=1 if bold else 0,
            stroke_fill=fill,
        )

    def _wrap(self, text: str, font, max_width: float) -> list[str]:
        words = (text or "").replace("\n", " ").split()
        lines: list[str] = []
        cur = ""
        for w in words:
            cand = f"{cur} {w}".strip()
            if self.canvas.textlength(cand, font=font) <= max_width:
                cur = cand
            else:
                if cur:
                    lines.append(cur)
                cur = w
        if cur:
            lines.append(cur)
        return lines or [""]

    def draw(self) -> Image.Image:
        y = self._draw_header(self.padding)
        y = self._draw_bill_to(y + self.line_h)
        y = self._draw_items(y + self.line_h)
        y = self._draw_totals(y + self.line_h)
        self._text(
            self.width / 2,
            max(y + 2 * self.line_h, self.height - self.padding - self.line_h),
            "Thank you for your business!",
            font=self.small,
            fill=_MUTED,
            anchor="ma",
        )
        return self.image

    def _draw_header(self, top: int) -> int:
        issuer = self.snapshot.issuer
        settings = self.snapshot.settings
        x = self.padding
        y = top

        logo = decode_data_url(issuer.logo)
        if logo is not None:
            logo.thumbnail((160 * self.scale, 80 * self.scale))
            self.image.paste(logo, (x, y), logo)
            y += logo.height + self.line_h // 2

        self._text(x, y, issuer.name or "Your Company", font=self.heading, bold=True)
        y += self.line_h + self.scale * 4
        for ln in _party_lines(issuer):
            for wrapped in self._wrap(ln, self.font, self.width * 0.5):
                self._text(x, y, wrapped, fill=_MUTED)
                y += self.line_h

        right = self.width - self.padding
        ry = top
        self._text(right, ry, "INVOICE", font=self.title, bold=True, anchor="ra")
        ry += self.line_h * 2
        for label, value in (
            ("Invoice #", settings.invoice_number),
            ("Date", settings.invoice_date.strftime("%B %d, %Y").replace(" 0", " ")),
            ("Due Date", settings.due_date.strftime("%B %d, %Y").replace(" 0", " ")),
        ):
            self._text(right, ry, f"{label}: {value}", anchor="ra")
            ry += self.line_h
        return max(y, ry)

    def _draw_bill_to(self, top: int) -> int:
        recipient = self.snapshot.recipient
        x = self.padding
        y = top
        self.canvas.line((x, y, self.width - self.padding, y), fill=_RULE, width=self.scale)
        y += self.line_h // 2
        self._text(x, y, "Bill To", font=self.small, fill=_MUTED, bold=True)
        y += self.line_h
        self._text(x, y, recipient.name or "-", bold=True)
        y += self.line_h
        for ln in _party_lines(recipient):
            for wrapped in self._wrap(ln, self.font, self.width * 0.6):
                self._text(x, y, wrapped, fill=_MUTED)
                y += self.line_h
        return y

    def _draw_items(self, top: int) -> int:
        left = self.padding
        right = self.width - self.padding
        table_w = right - left
        # description, qty, price, discount, amount
        widths = [0.44, 0.1, 0.15, 0.15, 0.16]
        edges = [left]
        for w in widths:
            edges.append(edges[-1] + table_w * w)
        cell_pad = 6 * self.scale
        currency = self.snapshot.settings.currency

        y = top
        self.canvas.rectangle((left, y, right, y + self.line_h + cell_pad), fill=_HEADER_BG)
        headers = ["Description", "Qty", f"Price ({currency})", "Discount", "Amount"]
        for i, title in enumerate(headers):
            if i == 0:
                self._text(edges[0] + cell_pad, y + cell_pad // 2, title, font=self.small, bold=True)
            else:
                self._text(edges[i + 1] - cell_pad, y + cell_pad // 2, title, font=self.small, bold=True, anchor="ra")
        y += self.line_h + cell_pad

        if not self.snapshot.items:
            self._text(left + cell_pad, y + cell_pad, "No items added", fill=_MUTED)
            return y + self.line_h + cell_pad

        for item in self.snapshot.items:
            desc_lines = self._wrap(item.description or "-", self.font, edges[1] - edges[0] - 2 * cell_pad)
            row_h = len(desc_lines) * self.line_h + cell_pad
            for n, ln in enumerate(desc_lines):
                self._text(edges[0] + cell_pad, y + cell_pad // 2 + n * self.line_h, ln)
            values = [
                f"{item.quantity:g}",
                format_amount(item.price),
                format_amount(item.discount) if item.discount else "-",
                format_amount(item.amount),
            ]
            for i, value in enumerate(values, start=1):
                self._text(edges[i + 1] - cell_pad, y + cell_pad // 2, value, anchor="ra")
            y += row_h
            self.canvas.line((left, y, right, y), fill=_RULE, width=self.scale)
        return y

    def _draw_totals(self, top: int) -> int:
        totals = self.snapshot.totals
        settings = self.snapshot.settings
        label_x = self.width * 0.6
        value_x = self.width - self.padding
        y = top
        rows = [
            ("Subtotal", totals.subtotal),
            (f"Tax ({settings.tax_rate:g}%)", totals.tax_amount),
        ]
        if totals.discount_amount:
            label = "Discount"
            if settings.discount_type.value == "percentage":
                label = f"Discount ({settings.discount:g}%)"
            rows.append((label, -totals.discount_amount))
        for label, value in rows:
            self._text(label_x, y, label, fill=_MUTED)
            self._text(value_x, y, format_amount(value), anchor="ra")
            y += self.line_h
        self.canvas.line((label_x, y, value_x, y), fill=_TEXT, width=self.scale)
        y += self.line_h // 2
        self._text(label_x, y, "Total", font=self.heading, bold=True)
        self._text(value_x, y, f"{settings.currency} {format_amount(totals.total)}", font=self.heading, bold=True, anchor="ra")
        return y + self.line_h
