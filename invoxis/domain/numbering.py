from __future__ import annotations

import os
import re
import secrets
import time
from datetime import date


_INVOICE_PREFIX = "INV"


def generate_invoice_number(now_ms: int | None = None, random_part: int | None = None) -> str:
    timestamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    suffix = str(timestamp)[-6:].rjust(6, "0")
    rnd = random_part if random_part is not None else secrets.randbelow(1000)
    return f"{_INVOICE_PREFIX}-{suffix}-{rnd:03d}"


def _sanitize_filename(value: str) -> str:
    cleaned = value.strip().replace(os.sep, "-")
    cleaned = re.sub(r"[^\w.\-]+", "_", cleaned, flags=re.UNICODE)
    return cleaned or "invoice"


def build_invoice_filename(invoice_number: str, on: date) -> str:
    return _sanitize_filename(f"Invoice_{invoice_number}_{on:%Y%m%d}") + ".pdf"
