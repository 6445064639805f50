from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, MutableMapping, Optional

from invoxis.application.contracts.document_renderer import DocumentRenderer
from invoxis.application.invoice.engine import InvoiceEngine
from invoxis.application.invoice.export import InvoiceExporter
from invoxis.application.profile.store import ProfileStore
from invoxis.infrastructure.rendering.pdf_renderer import ImagePdfRenderer
from invoxis.infrastructure.repositories.mapping_profile_repository import (
    MappingProfileRepository,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    engine: InvoiceEngine
    profile_store: ProfileStore
    exporter: InvoiceExporter
    detach_profile_sync: Callable[[], None]


def create_app_container(
    storage: Optional[MutableMapping[str, str]] = None,
    export_dir: Optional[Path] = None,
    renderer: DocumentRenderer | None = None,
    today: date | None = None,
) -> AppContainer:
    """Wire one invoice session.

    The saved issuer profile is applied before the profile sync is
    attached, so loading it does not write it straight back.
    """
    profile_store = ProfileStore(MappingProfileRepository(storage))

    issuer = profile_store.load_issuer()
    if issuer is not None:
        logger.debug("Restored issuer profile for %s", issuer.email)
    engine = InvoiceEngine(issuer=issuer, today=today)

    detach = profile_store.attach(engine)
    exporter = InvoiceExporter(
        engine,
        renderer or ImagePdfRenderer(),
        export_dir,
        clock=(lambda: today) if today else date.today,
    )
    return AppContainer(
        engine=engine,
        profile_store=profile_store,
        exporter=exporter,
        detach_profile_sync=detach,
    )
