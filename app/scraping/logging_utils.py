"""
Structured logging helpers for scraping workflows.

Every event is one JSON object per line so scrape runs can be grepped by
`event`, `scraper` or `url`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(default_level: str = "WARNING") -> None:
    """
    Configure root logging from LOG_LEVEL for CLI runs.
    """

    log_level = os.getenv("LOG_LEVEL", default_level).strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format=LOG_FORMAT,
    )


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.

    Values that are not JSON types (dates, exceptions) are logged via str().
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
