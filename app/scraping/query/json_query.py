"""
JMESPath-backed query over JSON and JSONP documents.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import jmespath
from jmespath.exceptions import JMESPathError

from app.scraping.errors import DocumentInvalidError, ScraperConfigurationError
from app.scraping.logging_utils import log_event
from app.scraping.query.base import DocumentLoader, MappedQuery, load_sub_document

logger = logging.getLogger(__name__)

# callback({...}); -> {...}
JSONP_PATTERN = re.compile(r"^[^{\[]+\((.+)\);?$", flags=re.DOTALL)


def parse_json_document(payload: bytes | str) -> Any:
    """
    Parse a JSON payload, unwrapping a JSONP callback when needed.
    """

    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    try:
        return json.loads(text)
    except ValueError:
        pass

    match = JSONP_PATTERN.match(text.strip())
    if match is not None:
        try:
            return json.loads(match.group(1))
        except ValueError:
            pass
    raise DocumentInvalidError("not valid json")


class JSONQuery:
    """
    Evaluates JMESPath selectors against one parsed JSON document.
    """

    def __init__(self, *, document: Any, url: str, loader: DocumentLoader) -> None:
        self._document = document
        self._loader = loader
        self.url = url

    @classmethod
    def from_payload(
        cls,
        payload: bytes | str,
        *,
        url: str,
        loader: DocumentLoader,
    ) -> JSONQuery:
        return cls(document=parse_json_document(payload), url=url, loader=loader)

    def evaluate(self, selector: str) -> list[str]:
        try:
            expression = jmespath.compile(selector)
        except JMESPathError as exc:
            raise ScraperConfigurationError(f"Invalid json selector '{selector}': {exc}") from exc

        value = expression.search(self._document)
        if value is None:
            log_event(
                logger,
                logging.WARNING,
                "selector_not_found",
                backend="json",
                selector=selector,
                url=self.url,
            )
            return []

        if isinstance(value, list):
            return [_stringify(item) for item in value]
        return [_stringify(value)]

    def sub_scrape(self, value: str) -> MappedQuery | None:
        return load_sub_document(loader=self._loader, base_url=self.url, value=value)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
