import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_FILE_NAME = "invoxis.log"
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 5
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Pillow and reportlab log every decoded chunk at DEBUG.
_NOISY_LOGGERS = ("PIL", "reportlab")


def _handlers(log_file: Path, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            log_file,
            maxBytes=_MAX_LOG_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_dir: Path, debug: bool = False) -> Path:
    """Log to stdout and a rotating file under ``log_dir``.

    Calling it again only adjusts the level.
    """
    level = logging.DEBUG if debug else logging.INFO
    log_file = Path(log_dir) / LOG_FILE_NAME
    root = logging.getLogger()

    if getattr(root, "_invoxis_logging_configured", False):
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        return log_file

    log_file.parent.mkdir(parents=True, exist_ok=True)
    root.handlers.clear()
    root.setLevel(level)
    for handler in _handlers(log_file, level):
        root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    root._invoxis_logging_configured = True
    return log_file
