from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from invoxis.domain.invoice_settings import DiscountType, InvoiceSettings
from invoxis.domain.line_item import LineItem


_DECIMAL_PLACES = Decimal("0.01")
_HUNDRED = Decimal("100")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(_DECIMAL_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


def calculate_subtotal(items: Iterable[LineItem]) -> Decimal:
    return sum((item.amount for item in items), Decimal("0"))


def calculate_tax(items: Iterable[LineItem], settings: InvoiceSettings) -> Decimal:
    taxable = calculate_subtotal(item for item in items if item.taxable)
    return taxable * (settings.tax_rate / _HUNDRED)


def calculate_discount(items: Iterable[LineItem], settings: InvoiceSettings) -> Decimal:
    if settings.discount_type == DiscountType.PERCENTAGE:
        return calculate_subtotal(items) * (settings.discount / _HUNDRED)
    return settings.discount


def calculate_totals(items: Iterable[LineItem], settings: InvoiceSettings) -> Totals:
    items = list(items)
    subtotal = calculate_subtotal(items)
    tax = calculate_tax(items, settings)
    discount = calculate_discount(items, settings)
    return Totals(
        subtotal=subtotal,
        tax_amount=tax,
        discount_amount=discount,
        # no clamping, a large fixed discount may push the total below zero
        total=subtotal + tax - discount,
    )


def format_amount(value: Decimal) -> str:
    return f"{quantize(value):,.2f}"
