"""
Mapped scraper over HTML documents.
"""

from __future__ import annotations

from app.scraping.base import ScraperBase
from app.scraping.query.html_query import HTMLQuery


class HTMLScraper(ScraperBase):
    """
    Scraper whose selectors are CSS selectors with optional `::attr(name)`.
    """

    backend = "html"

    def build_query(self, payload: bytes, *, url: str) -> HTMLQuery:
        return HTMLQuery.from_payload(payload, url=url, loader=self.load_query)
