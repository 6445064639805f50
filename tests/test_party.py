from __future__ import annotations

import base64

import pytest

from invoxis.application.invoice.engine import Change, InvoiceEngine
from invoxis.domain.party import Country, Party


def test_default_party_is_indian() -> None:
    party = Party()
    assert party.country == Country.INDIA
    assert party.requires_pin_code


def test_leaving_india_clears_pin(engine: InvoiceEngine) -> None:
    engine.set_recipient(pin_code="400001")
    engine.set_recipient(country="Canada")
    assert engine.recipient.pin_code == ""


def test_returning_to_india_does_not_restore_pin(engine: InvoiceEngine) -> None:
    engine.set_issuer(pin_code="110001")
    engine.set_issuer(country="France")
    engine.set_issuer(country="India")
    assert engine.issuer.country == Country.INDIA
    assert engine.issuer.pin_code == ""


def test_pin_survives_other_field_edits(engine: InvoiceEngine) -> None:
    engine.set_issuer(pin_code="110001")
    engine.set_issuer(name="Acme")
    assert engine.issuer.pin_code == "110001"


def test_pin_given_with_foreign_country_is_dropped(engine: InvoiceEngine) -> None:
    engine.set_issuer(country="Japan", pin_code="123")
    assert engine.issuer.pin_code == ""


def test_unknown_party_field_is_rejected(engine: InvoiceEngine) -> None:
    with pytest.raises(ValueError):
        engine.set_issuer(fax="123")


def test_unknown_country_is_rejected(engine: InvoiceEngine) -> None:
    with pytest.raises(ValueError):
        engine.set_issuer(country="Atlantis")


def test_set_issuer_notifies_issuer_change(engine: InvoiceEngine) -> None:
    changes: list[Change] = []
    engine.subscribe(lambda _source, change: changes.append(change))
    engine.set_issuer(name="Acme")
    engine.set_recipient(name="Globex")
    assert changes == [Change.ISSUER, Change.RECIPIENT]


def test_set_logo_stores_data_url(engine: InvoiceEngine) -> None:
    content = b"\x89PNG\r\n\x1a\nfake"
    assert engine.set_logo(content, "image/png") is True
    logo = engine.issuer.logo
    assert logo is not None
    assert logo.startswith("data:image/png;base64,")
    assert base64.b64decode(logo.split(",", 1)[1]) == content


def test_set_logo_rejects_non_images(engine: InvoiceEngine) -> None:
    assert engine.set_logo(b"%PDF-1.4", "application/pdf") is False
    assert engine.set_logo(b"", "image/png") is False
    assert engine.issuer.logo is None


def test_remove_logo(engine: InvoiceEngine) -> None:
    engine.set_logo(b"img", "image/jpeg")
    engine.remove_logo()
    assert engine.issuer.logo is None


def test_replace_recipient_copies_fields(engine: InvoiceEngine) -> None:
    saved = Party(name="Globex", email="a@globex.com", country=Country.GERMANY)
    engine.replace_recipient(saved)
    assert engine.recipient.name == "Globex"
    assert engine.recipient.country == Country.GERMANY
    assert engine.recipient.pin_code == ""
