from datetime import date
import re

from invoxis.domain.invoice_settings import InvoiceSettings
from invoxis.domain.numbering import build_invoice_filename, generate_invoice_number


def test_invoice_number_format() -> None:
    for _ in range(20):
        assert re.fullmatch(r"INV-\d{6}-\d{3}", generate_invoice_number())


def test_invoice_number_uses_last_six_timestamp_digits() -> None:
    assert generate_invoice_number(now_ms=1710489600123, random_part=7) == "INV-600123-007"


def test_short_timestamps_are_padded() -> None:
    assert generate_invoice_number(now_ms=42, random_part=999) == "INV-000042-999"


def test_filename_format() -> None:
    assert build_invoice_filename("INV-600123-007", date(2024, 3, 5)) == "Invoice_INV-600123-007_20240305.pdf"


def test_filename_replaces_unsafe_characters() -> None:
    assert build_invoice_filename("INV/1 2", date(2024, 1, 1)) == "Invoice_INV-1_2_20240101.pdf"


def test_new_settings_defaults() -> None:
    settings = InvoiceSettings.new(date(2024, 1, 31))
    assert re.fullmatch(r"INV-\d{6}-\d{3}", settings.invoice_number)
    assert settings.invoice_date == date(2024, 1, 31)
    assert settings.due_date == date(2024, 3, 1)
    assert settings.currency == "INR"
    assert settings.tax_rate == 18
