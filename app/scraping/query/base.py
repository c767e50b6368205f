"""
Capability shared by every document query backend.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol
from urllib.parse import urljoin

from app.scraping.errors import ScrapeError
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


class MappedQuery(Protocol):
    """
    Evaluates selectors against one fetched document.
    """

    url: str

    def evaluate(self, selector: str) -> list[str]:
        """
        Return matched values in document order, or an empty list on a miss.
        """

    def sub_scrape(self, value: str) -> MappedQuery | None:
        """
        Fetch the document linked by `value` and return a query over it.
        """


# Fetches a URL and wraps it in a fresh query; raises ScrapeError on failure.
DocumentLoader = Callable[[str], MappedQuery]


def load_sub_document(
    *,
    loader: DocumentLoader,
    base_url: str,
    value: str,
) -> MappedQuery | None:
    """
    Resolve `value` against the parent document URL and load it.

    Blank values and failures are reported as a missing sub-document, so
    the parent record assembly can continue. Failures are logged.
    """

    target = value.strip()
    if not target:
        return None
    if base_url:
        target = urljoin(base_url, target)

    log_event(logger, logging.DEBUG, "sub_scrape_started", url=target)
    try:
        return loader(target)
    except ScrapeError as exc:
        log_event(
            logger,
            logging.WARNING,
            "sub_scrape_failed",
            url=target,
            error=str(exc),
        )
        return None
