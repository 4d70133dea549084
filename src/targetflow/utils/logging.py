"""Logging configuration for hosts embedding targetflow.

Library modules only call ``logging.getLogger(__name__)``. Handlers are
installed on the ``targetflow`` package logger, never on the root logger, so a
host application keeps control of its own logging tree.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any

__all__ = ["LOG_FILE_NAME", "PACKAGE_LOGGER", "configure_from_settings", "resolve_level", "setup_logging"]

PACKAGE_LOGGER = "targetflow"
LOG_FILE_NAME = "targetflow.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_DEFAULT_LOG_DIR = Path.home() / ".targetflow" / "logs"
_HANDLER_TAG = "_targetflow_owned"
_LOG_PATH: Path | None = None


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Attach a rotating file handler (and optionally stderr) to the package logger.

    Repeated calls are no-ops returning the existing log path unless ``force``
    is set, in which case handlers from the previous call are replaced.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    resolved = resolve_level(level)
    log_path = _resolve_log_dir(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_owned_handlers(logger)
    for handler in _build_handlers(log_path, resolved, console, max_bytes, backup_count):
        logger.addHandler(handler)
    logger.setLevel(resolved)

    _LOG_PATH = log_path
    logger.debug("Logging to %s at %s", log_path, logging.getLevelName(resolved))
    return log_path


def configure_from_settings(settings: Any, **options: Any) -> Path:
    """Call :func:`setup_logging` with ``settings.effective_log_level``."""

    return setup_logging(settings.effective_log_level, **options)


def resolve_level(level: int | str) -> int:
    """Translate level names such as ``"debug"`` into ``logging`` constants."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level {level!r}")
    return resolved


def _build_handlers(
    log_path: Path,
    level: int,
    console: bool,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
    return handlers


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    env_override = os.environ.get("TARGETFLOW_LOG_DIR")
    return Path(log_dir or env_override or _DEFAULT_LOG_DIR).expanduser()
