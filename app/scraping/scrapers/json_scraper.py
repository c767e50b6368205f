"""
Mapped scraper over JSON and JSONP documents.
"""

from __future__ import annotations

from app.scraping.base import ScraperBase
from app.scraping.query.json_query import JSONQuery


class JSONScraper(ScraperBase):
    """
    Scraper whose selectors are JMESPath expressions.
    """

    backend = "json"

    def build_query(self, payload: bytes, *, url: str) -> JSONQuery:
        return JSONQuery.from_payload(payload, url=url, loader=self.load_query)
