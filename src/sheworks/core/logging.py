"""Logging configuration for the SheWorks service."""

from __future__ import annotations

import logging

from sheworks.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger.

    Args:
        level: Optional level name overriding ``LOG_LEVEL``.
    """
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    root.setLevel(resolved)

    if not any(getattr(handler, "_sheworks", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._sheworks = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # httpx logs every request at INFO; keep provider chatter out of the service log.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, root.level))
