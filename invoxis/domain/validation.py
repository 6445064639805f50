from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from invoxis.domain.line_item import LineItem
from invoxis.domain.party import Party


_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_PHONE_RE = re.compile(r"\d{10}")

GENERAL_ITEMS_ERROR = "At least one invoice item is required"


@dataclass
class ValidationErrors:
    issuer: dict[str, str] = field(default_factory=dict)
    recipient: dict[str, str] = field(default_factory=dict)
    line_items: list[dict[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.issuer and not self.recipient and not any(self.line_items)

    def for_item(self, index: int) -> dict[str, str]:
        if 0 <= index < len(self.line_items):
            return self.line_items[index]
        return {}

    @property
    def general_items_error(self) -> str | None:
        if len(self.line_items) == 1:
            return self.line_items[0].get("general")
        return None


def _is_blank(value: str | None) -> bool:
    return not (value or "").strip()


def validate_party(party: Party, name_label: str) -> dict[str, str]:
    """Collect one message per failing field.

    Every field is checked independently; within a field the first
    failing rule wins (e.g. a missing email is never also "invalid").
    """
    errors: dict[str, str] = {}
    if _is_blank(party.name):
        errors["name"] = f"{name_label} name is required"
    if _is_blank(party.address):
        errors["address"] = "Address is required"
    if _is_blank(party.email):
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.search(party.email):
        errors["email"] = "Email is invalid"
    if _is_blank(party.phone):
        errors["phone"] = "Phone number is required"
    elif not _PHONE_RE.fullmatch(party.phone):
        errors["phone"] = "Phone number must be 10 digits"
    if party.requires_pin_code and _is_blank(party.pin_code):
        errors["pin_code"] = "PIN code is required"
    return errors


def validate_line_items(items: Sequence[LineItem]) -> list[dict[str, str]]:
    if not items:
        return [{"general": GENERAL_ITEMS_ERROR}]

    result: list[dict[str, str]] = []
    for item in items:
        errors: dict[str, str] = {}
        if _is_blank(item.description):
            errors["description"] = "Description is required"
        if item.quantity <= 0:
            errors["quantity"] = "Quantity must be greater than 0"
        if item.price < 0:
            errors["price"] = "Price cannot be negative"
        result.append(errors)
    return result


def line_items_valid(errors: Sequence[dict[str, str]]) -> bool:
    return not any(errors)
