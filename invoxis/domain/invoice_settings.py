from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from invoxis.domain.line_item import to_decimal
from invoxis.domain.numbering import generate_invoice_number


DEFAULT_TAX_RATE = Decimal("18")
DEFAULT_CURRENCY = "INR"
PAYMENT_TERM_DAYS = 30

NUMERIC_SETTINGS = frozenset({"tax_rate", "discount"})
DATE_SETTINGS = frozenset({"invoice_date", "due_date"})
SETTINGS_FIELDS = frozenset(
    {"tax_rate", "discount_type", "discount", "currency", "invoice_number", "invoice_date", "due_date"}
)


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class InvoiceSettings(BaseModel):
    tax_rate: Decimal = DEFAULT_TAX_RATE
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount: Decimal = Decimal("0")
    currency: str = DEFAULT_CURRENCY
    invoice_number: str = ""
    invoice_date: date
    due_date: date

    @classmethod
    def new(cls, today: date | None = None) -> "InvoiceSettings":
        issued = today or date.today()
        return cls(
            invoice_number=generate_invoice_number(),
            invoice_date=issued,
            due_date=issued + timedelta(days=PAYMENT_TERM_DAYS),
        )

    def set_field(self, field: str, value: Any) -> None:
        if field not in SETTINGS_FIELDS:
            raise ValueError(f"Unknown settings field: {field}")
        if field in NUMERIC_SETTINGS:
            value = to_decimal(value)
        elif field == "discount_type":
            value = DiscountType(value)
        elif field in DATE_SETTINGS:
            if not isinstance(value, date):
                value = date.fromisoformat(str(value).strip())
        else:
            value = "" if value is None else str(value)
        setattr(self, field, value)
