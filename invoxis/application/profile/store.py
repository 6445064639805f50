from __future__ import annotations

import json
import logging
from typing import Any, Callable

from pydantic import ValidationError

from invoxis.application.invoice.engine import Change, InvoiceEngine
from invoxis.domain.party import Party
from invoxis.domain.repositories.profile_repository import ProfileRepository


logger = logging.getLogger(__name__)

ISSUER_PROFILE_KEY = "issuer_profile"
RECENT_RECIPIENTS_KEY = "recent_recipients"
DISPLAY_THEME_KEY = "display_theme"
DISPLAY_NAME_KEY = "display_name"

MAX_RECENT_RECIPIENTS = 5


def _is_rememberable(party: Party) -> bool:
    return bool(party.name.strip() and party.email.strip())


class ProfileStore:
    """Typed access to the per-browser convenience data."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    def _read(self, key: str, default: Any = None) -> Any:
        raw = self._repository.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring unreadable profile value key=%s", key)
            return default

    def _write(self, key: str, value: Any) -> None:
        self._repository.set(key, json.dumps(value))

    # issuer

    def load_issuer(self) -> Party | None:
        data = self._read(ISSUER_PROFILE_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return Party.model_validate(data)
        except ValidationError:
            logger.warning("Ignoring invalid issuer profile")
            return None

    def save_issuer(self, party: Party) -> None:
        self._write(ISSUER_PROFILE_KEY, party.model_dump(mode="json"))

    # recent recipients

    def recent_recipients(self) -> list[Party]:
        data = self._read(RECENT_RECIPIENTS_KEY, default=[])
        if not isinstance(data, list):
            return []
        recipients: list[Party] = []
        for entry in data:
            try:
                recipients.append(Party.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping invalid recent recipient entry")
        return recipients

    def remember_recipient(self, party: Party) -> list[Party]:
        recipients = self.recent_recipients()
        stored = party.model_copy(update={"logo": None})
        index = next((i for i, r in enumerate(recipients) if r.email == party.email), None)
        if index is not None:
            recipients[index] = stored
        else:
            recipients.insert(0, stored)
            del recipients[MAX_RECENT_RECIPIENTS:]
        self._write(RECENT_RECIPIENTS_KEY, [r.model_dump(mode="json") for r in recipients])
        return recipients

    def find_recent_recipient(self, email: str) -> Party | None:
        return next((r for r in self.recent_recipients() if r.email == email), None)

    # display preferences

    def load_light_mode(self) -> bool:
        return bool(self._read(DISPLAY_THEME_KEY, default=False))

    def save_light_mode(self, light_mode: bool) -> None:
        self._write(DISPLAY_THEME_KEY, bool(light_mode))

    def load_display_name(self) -> str:
        value = self._read(DISPLAY_NAME_KEY, default="")
        return value if isinstance(value, str) else ""

    def save_display_name(self, name: str) -> None:
        self._write(DISPLAY_NAME_KEY, (name or "").strip())

    # engine wiring

    def attach(self, engine: InvoiceEngine) -> Callable[[], None]:
        """Mirror issuer and recipient edits into storage."""

        def _on_change(source: InvoiceEngine, change: Change) -> None:
            if change == Change.ISSUER:
                issuer = source.issuer
                if _is_rememberable(issuer):
                    self.save_issuer(issuer)
            elif change == Change.RECIPIENT:
                recipient = source.recipient
                if _is_rememberable(recipient):
                    self.remember_recipient(recipient)

        return engine.subscribe(_on_change)
