from __future__ import annotations

import threading
import time
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field


NUMERIC_FIELDS = frozenset({"quantity", "price", "discount"})
LINE_ITEM_FIELDS = frozenset({"description", "quantity", "price", "discount", "taxable"})

_ID_LOCK = threading.Lock()
_LAST_ID = 0


def next_line_item_id() -> str:
    """Millisecond timestamp token, bumped so two calls never collide."""
    global _LAST_ID
    with _ID_LOCK:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _LAST_ID:
            candidate = _LAST_ID + 1
        _LAST_ID = candidate
        return str(candidate)


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return Decimal("0")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return number


class LineItem(BaseModel):
    id: str = Field(default_factory=next_line_item_id)
    description: str = ""
    quantity: Decimal = Decimal("1")
    price: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    taxable: bool = True

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.price - self.discount

    def set_field(self, field: str, value: Any) -> None:
        if field not in LINE_ITEM_FIELDS:
            raise ValueError(f"Unknown line item field: {field}")
        if field in NUMERIC_FIELDS:
            value = to_decimal(value)
        elif field == "taxable":
            value = bool(value)
        else:
            value = "" if value is None else str(value)
        setattr(self, field, value)
