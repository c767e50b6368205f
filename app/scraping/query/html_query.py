"""
BeautifulSoup-backed CSS selector query over HTML documents.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from app.scraping.errors import ScraperConfigurationError
from app.scraping.logging_utils import log_event
from app.scraping.query.base import DocumentLoader, MappedQuery, load_sub_document

logger = logging.getLogger(__name__)

# Optional trailing "::text" or "::attr(name)" picks what to read from each node.
SELECTOR_TARGET_REGEX = re.compile(r"::(?:text|attr\(\s*([^)\s]+)\s*\))\s*$")


class HTMLQuery:
    """
    Evaluates CSS selectors against one parsed HTML document.
    """

    def __init__(self, *, soup: BeautifulSoup, url: str, loader: DocumentLoader) -> None:
        self._soup = soup
        self._loader = loader
        self.url = url

    @classmethod
    def from_payload(
        cls,
        payload: bytes | str,
        *,
        url: str,
        loader: DocumentLoader,
    ) -> HTMLQuery:
        return cls(soup=BeautifulSoup(payload, "html.parser"), url=url, loader=loader)

    def evaluate(self, selector: str) -> list[str]:
        css, attribute = split_selector(selector)
        try:
            nodes = self._soup.select(css)
        except SelectorSyntaxError as exc:
            raise ScraperConfigurationError(f"Invalid css selector '{selector}': {exc}") from exc

        values: list[str] = []
        for node in nodes:
            if attribute is None:
                values.append(_clean_text(node.get_text(" ", strip=True)))
                continue
            raw = _node_attribute(node, attribute)
            if raw is not None:
                values.append(_clean_text(raw))

        # no matching nodes, or none carrying the attribute
        if not values:
            log_event(
                logger,
                logging.WARNING,
                "selector_not_found",
                backend="html",
                selector=selector,
                url=self.url,
            )
        return values

    def sub_scrape(self, value: str) -> MappedQuery | None:
        return load_sub_document(loader=self._loader, base_url=self.url, value=value)


def split_selector(selector: str) -> tuple[str, str | None]:
    """
    Split a selector into its CSS part and the attribute to read (None for text).
    """

    match = SELECTOR_TARGET_REGEX.search(selector)
    if match is None:
        return selector.strip(), None
    return selector[: match.start()].strip(), match.group(1)


def _node_attribute(node: Tag, attribute: str) -> str | None:
    raw = node.get(attribute)
    if raw is None:
        return None
    if isinstance(raw, list):
        return " ".join(raw)
    return str(raw)


def _clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()
