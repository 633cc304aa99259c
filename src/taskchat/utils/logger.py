"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "taskchat"
_LOG_FILE = "taskchat.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    target = str(log_path.resolve())
    return any(
        isinstance(h, logging.handlers.RotatingFileHandler)
        and str(Path(h.baseFilename).resolve()) == target
        for h in logger.handlers
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the singleton application logger, initialising it on first call.

    With *name*, return a child logger (``taskchat.<name>``) that writes
    through the same handler.
    """
    global _logger
    if _logger is None:
        log_dir = Path(user_log_dir(_APP_NAME))
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / _LOG_FILE

        logger = logging.getLogger(_APP_NAME)
        logger.setLevel(logging.DEBUG)
        # Other handlers (e.g. test capture) may already be attached.
        if not _has_file_handler(logger, log_path):
            handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
            handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                    datefmt="%Y-%m-%dT%H:%M:%S",
                )
            )
            logger.addHandler(handler)
        logger.propagate = False

        _logger = logger

    if name:
        return _logger.getChild(name)
    return _logger
