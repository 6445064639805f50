from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Callable

from invoxis.domain.invoice_settings import InvoiceSettings
from invoxis.domain.line_item import LineItem
from invoxis.domain.party import Party
from invoxis.domain.totals import (
    Totals,
    calculate_discount,
    calculate_subtotal,
    calculate_tax,
    calculate_totals,
)
from invoxis.domain.validation import (
    ValidationErrors,
    line_items_valid,
    validate_line_items,
    validate_party,
)


logger = logging.getLogger(__name__)


class Change(str, Enum):
    ISSUER = "issuer"
    RECIPIENT = "recipient"
    LINE_ITEMS = "line_items"
    SETTINGS = "settings"


Listener = Callable[["InvoiceEngine", Change], None]


@dataclass(frozen=True)
class InvoiceSnapshot:
    issuer: Party
    recipient: Party
    items: tuple[LineItem, ...]
    settings: InvoiceSettings
    totals: Totals


class InvoiceEngine:
    """Single owner of the invoice being edited.

    Readers get copies and subscribe for change notifications; every
    mutation goes through a method on this class. The cached ``totals``
    snapshot is recomputed before listeners run, so it never lags behind
    the ``calculate_*`` methods.
    """

    def __init__(self, issuer: Party | None = None, today: date | None = None) -> None:
        self._issuer = issuer.model_copy(deep=True) if issuer else Party()
        self._recipient = Party()
        self._items: list[LineItem] = []
        self._settings = InvoiceSettings.new(today)
        self._errors = ValidationErrors()
        self._listeners: list[Listener] = []
        self._totals = calculate_totals(self._items, self._settings)

    # --- reads -----------------------------------------------------------

    @property
    def issuer(self) -> Party:
        return self._issuer.model_copy(deep=True)

    @property
    def recipient(self) -> Party:
        return self._recipient.model_copy(deep=True)

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(item.model_copy() for item in self._items)

    @property
    def settings(self) -> InvoiceSettings:
        return self._settings.model_copy()

    @property
    def totals(self) -> Totals:
        return self._totals

    @property
    def errors(self) -> ValidationErrors:
        return self._errors

    def snapshot(self) -> InvoiceSnapshot:
        return InvoiceSnapshot(
            issuer=self.issuer,
            recipient=self.recipient,
            items=self.items,
            settings=self.settings,
            totals=self._totals,
        )

    # --- subscriptions ---------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: Change) -> None:
        if change in (Change.LINE_ITEMS, Change.SETTINGS):
            self._totals = calculate_totals(self._items, self._settings)
        for listener in list(self._listeners):
            try:
                listener(self, change)
            except Exception:
                logger.exception("Invoice listener failed change=%s", change.value)

    # --- parties ---------------------------------------------------------

    def set_issuer(self, **fields: Any) -> None:
        self._issuer = self._issuer.merged(**fields)
        self._notify(Change.ISSUER)

    def set_recipient(self, **fields: Any) -> None:
        self._recipient = self._recipient.merged(**fields)
        self._notify(Change.RECIPIENT)

    def replace_recipient(self, party: Party) -> None:
        self._recipient = Party().merged(**party.model_dump(exclude={"logo"}))
        self._notify(Change.RECIPIENT)

    def set_logo(self, content: bytes, mime_type: str | None) -> bool:
        mime = (mime_type or "").strip().lower()
        if not content or not mime.startswith("image/"):
            logger.info("Rejected logo upload mime=%s size=%s", mime or "-", len(content or b""))
            return False
        encoded = base64.b64encode(content).decode("ascii")
        self._issuer = self._issuer.merged(logo=f"data:{mime};base64,{encoded}")
        self._notify(Change.ISSUER)
        return True

    def remove_logo(self) -> None:
        self._issuer = self._issuer.merged(logo=None)
        self._notify(Change.ISSUER)

    # --- line items ------------------------------------------------------

    def add_line_item(self) -> None:
        self._items.append(LineItem())
        self._notify(Change.LINE_ITEMS)

    def _find(self, item_id: str) -> LineItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    def update_line_item(self, item_id: str, field: str, value: Any) -> None:
        item = self._find(item_id)
        if item is None:
            logger.debug("update_line_item ignored unknown id=%s", item_id)
            return
        item.set_field(field, value)
        self._notify(Change.LINE_ITEMS)

    def remove_line_item(self, item_id: str) -> None:
        item = self._find(item_id)
        if item is None:
            return
        self._items.remove(item)
        self._notify(Change.LINE_ITEMS)

    # --- settings --------------------------------------------------------

    def update_settings(self, field: str, value: Any) -> None:
        self._settings.set_field(field, value)
        self._notify(Change.SETTINGS)

    def reset(self, today: date | None = None) -> None:
        """Start a new invoice for the same issuer."""
        self._recipient = Party()
        self._items = []
        self._settings = InvoiceSettings.new(today)
        self._errors = ValidationErrors()
        # totals must be current before the first notification
        self._totals = calculate_totals(self._items, self._settings)
        self._notify(Change.RECIPIENT)
        self._notify(Change.LINE_ITEMS)
        self._notify(Change.SETTINGS)

    # --- calculations ----------------------------------------------------

    def calculate_subtotal(self) -> Decimal:
        return calculate_subtotal(self._items)

    def calculate_tax(self) -> Decimal:
        return calculate_tax(self._items, self._settings)

    def calculate_discount(self) -> Decimal:
        return calculate_discount(self._items, self._settings)

    def calculate_total(self) -> Decimal:
        return self.calculate_subtotal() + self.calculate_tax() - self.calculate_discount()

    # --- validation ------------------------------------------------------

    def validate_issuer(self) -> bool:
        self._errors.issuer = validate_party(self._issuer, "Company")
        return not self._errors.issuer

    def validate_recipient(self) -> bool:
        self._errors.recipient = validate_party(self._recipient, "Client")
        return not self._errors.recipient

    def validate_line_items(self) -> bool:
        self._errors.line_items = validate_line_items(self._items)
        return line_items_valid(self._errors.line_items)

    def validate_all(self) -> bool:
        # all three run so every message can be shown at once
        results = [self.validate_issuer(), self.validate_recipient(), self.validate_line_items()]
        return all(results)
