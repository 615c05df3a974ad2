"""Logging setup shared by the API server, CLI, and dashboard."""
from __future__ import annotations

import logging
import os

# Transport libraries that log every Sheets and HTTP request at DEBUG/INFO.
CHATTY_LOGGERS = ("urllib3", "google.auth", "httpx")


def configure_logging(level: str | None = None) -> None:
    """Initialize basic logging with a shared format and log level.

    The level can be provided directly or via ``LOG_LEVEL`` (default
    ``INFO``). Unless the level is ``DEBUG``, request-level chatter from the
    Sheets and HTTP transports is held at ``WARNING``.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    transport_level = logging.DEBUG if resolved_level == "DEBUG" else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
