from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Country(str, Enum):
    INDIA = "India"
    UNITED_STATES = "United States"
    UNITED_KINGDOM = "United Kingdom"
    CANADA = "Canada"
    AUSTRALIA = "Australia"
    GERMANY = "Germany"
    FRANCE = "France"
    JAPAN = "Japan"
    CHINA = "China"
    OTHER = "Other"


PARTY_FIELDS = ("name", "address", "email", "phone", "country", "pin_code", "logo")


class Party(BaseModel):
    """Issuer or recipient of an invoice. Both roles share this shape."""

    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    country: Country = Country.INDIA
    pin_code: str = ""
    # data URL, only used for the issuer
    logo: Optional[str] = None

    @property
    def requires_pin_code(self) -> bool:
        return self.country == Country.INDIA

    def merged(self, **fields) -> "Party":
        unknown = set(fields) - set(PARTY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown party fields: {', '.join(sorted(unknown))}")
        data = self.model_dump()
        data.update(fields)
        party = Party.model_validate(data)
        if "country" in fields:
            on_country_changed(party)
        return party


def on_country_changed(party: Party) -> None:
    # PIN codes only exist for Indian addresses; switching back never restores one.
    if party.country != Country.INDIA:
        party.pin_code = ""
