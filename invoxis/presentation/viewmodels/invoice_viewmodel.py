from __future__ import annotations

from html import escape
from typing import Iterable

from invoxis.application.invoice.engine import InvoiceSnapshot
from invoxis.domain.invoice_settings import DiscountType
from invoxis.domain.party import Country, Party
from invoxis.domain.totals import Totals, format_amount


def country_options() -> list[str]:
    return [c.value for c in Country]


def recent_recipient_options(recipients: Iterable[Party]) -> dict[str, str]:
    return {r.email: f"{r.name} ({r.email})" for r in recipients if r.email}


def totals_to_viewmodel(totals: Totals, currency: str) -> dict[str, str]:
    return {
        "subtotal": f"{currency} {format_amount(totals.subtotal)}",
        "tax": f"{currency} {format_amount(totals.tax_amount)}",
        "discount": f"-{currency} {format_amount(totals.discount_amount)}",
        "total": f"{currency} {format_amount(totals.total)}",
    }


def _party_html(party: Party) -> str:
    lines = [party.address, party.email, party.phone]
    location = party.country.value
    if party.pin_code:
        location = f"{location} - {party.pin_code}"
    lines.append(location)
    return "<br>".join(escape(ln) for ln in lines if ln.strip())


def build_invoice_preview_html(snapshot: InvoiceSnapshot) -> str:
    issuer = snapshot.issuer
    recipient = snapshot.recipient
    settings = snapshot.settings
    totals = snapshot.totals
    currency = escape(settings.currency)

    logo_html = ""
    if issuer.logo:
        logo_html = f"<img src='{escape(issuer.logo, quote=True)}' alt='Company Logo' class='max-h-20 mb-2'>"

    rows_html = ""
    for item in snapshot.items:
        rows_html += (
            "<tr class='border-b'>"
            f"<td class='text-left py-1'>{escape(item.description)}</td>"
            f"<td class='text-right'>{item.quantity:g}</td>"
            f"<td class='text-right'>{format_amount(item.price)}</td>"
            f"<td class='text-right'>{format_amount(item.discount) if item.discount else '-'}</td>"
            f"<td class='text-right'>{format_amount(item.amount)}</td>"
            "</tr>"
        )
    if not rows_html:
        rows_html = "<tr><td colspan='5' class='text-center py-2 text-gray-500'>No items added</td></tr>"

    discount_label = "Discount"
    if settings.discount_type == DiscountType.PERCENTAGE:
        discount_label = f"Discount ({settings.discount:g}%)"
    discount_row = ""
    if totals.discount_amount:
        discount_row = (
            "<tr>"
            f"<td colspan='4' class='text-right'>{discount_label}</td>"
            f"<td class='text-right'>-{format_amount(totals.discount_amount)}</td>"
            "</tr>"
        )

    return (
        "<div class='invoice-preview space-y-4 text-sm'>"
        "<div class='flex justify-between'>"
        "<div>"
        f"{logo_html}"
        f"<div class='font-semibold text-lg'>{escape(issuer.name or 'Your Company')}</div>"
        f"<div class='text-gray-600'>{_party_html(issuer)}</div>"
        "</div>"
        "<div class='text-right'>"
        "<div class='text-2xl font-bold'>INVOICE</div>"
        f"<div>Invoice #: {escape(settings.invoice_number)}</div>"
        f"<div>Date: {settings.invoice_date.isoformat()}</div>"
        f"<div>Due Date: {settings.due_date.isoformat()}</div>"
        "</div>"
        "</div>"
        "<div>"
        "<div class='text-xs uppercase text-gray-500'>Bill To</div>"
        f"<div class='font-semibold'>{escape(recipient.name or '-')}</div>"
        f"<div class='text-gray-600'>{_party_html(recipient)}</div>"
        "</div>"
        "<table class='w-full text-sm border-collapse'>"
        "<thead>"
        "<tr class='border-b'>"
        "<th class='text-left py-2'>Description</th>"
        "<th class='text-right py-2'>Qty</th>"
        f"<th class='text-right py-2'>Price ({currency})</th>"
        "<th class='text-right py-2'>Discount</th>"
        "<th class='text-right py-2'>Amount</th>"
        "</tr>"
        "</thead>"
        f"<tbody>{rows_html}</tbody>"
        "<tfoot>"
        "<tr>"
        "<td colspan='4' class='text-right'>Subtotal</td>"
        f"<td class='text-right'>{format_amount(totals.subtotal)}</td>"
        "</tr>"
        "<tr>"
        f"<td colspan='4' class='text-right'>Tax ({settings.tax_rate:g}%)</td>"
        f"<td class='text-right'>{format_amount(totals.tax_amount)}</td>"
        "</tr>"
        f"{discount_row}"
        "<tr class='font-semibold'>"
        "<td colspan='4' class='text-right'>Total</td>"
        f"<td class='text-right'>{currency} {format_amount(totals.total)}</td>"
        "</tr>"
        "</tfoot>"
        "</table>"
        "<div class='text-center text-gray-500'>Thank you for your business!</div>"
        "</div>"
    )
