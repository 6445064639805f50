from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


_DEFAULT_PORT = 8000


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _port(value: str | None) -> int:
    raw = (value or "").strip()
    if not raw:
        return _DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"INVOXIS_PORT must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"INVOXIS_PORT out of range: {port}")
    return port


@dataclass(frozen=True)
class AppConfig:
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = _DEFAULT_PORT
    storage_secret: str = "invoxis-dev-secret"
    data_dir: Path = Path("./data")
    # unset keeps exported PDFs in the browser download only
    export_dir: Optional[Path] = None

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        data_dir = Path(env.get("INVOXIS_DATA_DIR") or "./data")
        raw_export_dir = (env.get("INVOXIS_EXPORT_DIR") or "").strip()
        export_dir = Path(raw_export_dir) if raw_export_dir else None
        return cls(
            debug=_flag(env.get("INVOXIS_DEBUG")),
            host=(env.get("INVOXIS_HOST") or "0.0.0.0").strip(),
            port=_port(env.get("INVOXIS_PORT")),
            storage_secret=env.get("INVOXIS_STORAGE_SECRET") or cls.storage_secret,
            data_dir=data_dir,
            export_dir=export_dir,
        )
