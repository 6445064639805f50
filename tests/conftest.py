from __future__ import annotations

from datetime import date
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoxis.application.invoice.engine import InvoiceEngine
from invoxis.application.profile.store import ProfileStore
from invoxis.infrastructure.repositories.mapping_profile_repository import (
    MappingProfileRepository,
)

TODAY = date(2024, 3, 15)


@pytest.fixture()
def engine() -> InvoiceEngine:
    return InvoiceEngine(today=TODAY)


@pytest.fixture()
def storage() -> dict[str, str]:
    return {}


@pytest.fixture()
def profile_store(storage: dict[str, str]) -> ProfileStore:
    return ProfileStore(MappingProfileRepository(storage))


def fill_party(engine: InvoiceEngine, role: str = "issuer", **overrides) -> None:
    fields = {
        "name": "Acme Traders",
        "address": "12 MG Road, Bengaluru",
        "email": "billing@acme.in",
        "phone": "9876543210",
        "country": "India",
        "pin_code": "560001",
    }
    fields.update(overrides)
    setter = engine.set_issuer if role == "issuer" else engine.set_recipient
    setter(**fields)


@pytest.fixture()
def filled_engine(engine: InvoiceEngine) -> InvoiceEngine:
    fill_party(engine, "issuer")
    fill_party(engine, "recipient", name="Globex Retail", email="accounts@globex.in", phone="9123456780")
    engine.add_line_item()
    item_id = engine.items[0].id
    engine.update_line_item(item_id, "description", "Consulting")
    engine.update_line_item(item_id, "quantity", 2)
    engine.update_line_item(item_id, "price", 50)
    return engine


@pytest.fixture(name="fill_party")
def fill_party_fixture():
    return fill_party
