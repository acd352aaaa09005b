from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from appfs.config import Settings

LOGGER_NAME = "appfs"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 10

_FILE_HANDLER = "appfs-file"
_STDERR_HANDLER = "appfs-stderr"


def _open_log_file(log_file: Path) -> logging.Handler | None:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        sys.stderr.write(f"Failed to open appfs log file at {log_file}: {exc}\n")
        return None
    handler.set_name(_FILE_HANDLER)
    return handler


def configure_appfs_logging(settings: Settings) -> Path:
    """Route the ``appfs`` logger to ``settings.log_file`` and stderr.

    Only the package logger is touched, and never with a stdout handler: stdout
    carries the MCP stdio transport. Calling this again just updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    if any(handler.get_name() in {_FILE_HANDLER, _STDERR_HANDLER} for handler in logger.handlers):
        return settings.log_file

    formatter = logging.Formatter(LOG_FORMAT)
    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.set_name(_STDERR_HANDLER)
    for handler in (_open_log_file(settings.log_file), stderr_handler):
        if handler is None:
            continue
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    logging.captureWarnings(True)
    return settings.log_file


__all__ = ["LOGGER_NAME", "configure_appfs_logging"]
