"""
Exception taxonomy for mapped-content scraping.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base exception for scrape failures surfaced to callers."""


class ScraperConfigurationError(ScrapeError):
    """Raised when a scraper definition or named mapping is missing or malformed."""


class UnsupportedOperationError(ScrapeError):
    """Raised when a lookup mode has no implementation for a record kind or backend."""


class FetchError(ScrapeError):
    """Raised when a document cannot be retrieved."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DocumentInvalidError(ScrapeError):
    """Raised when a fetched payload cannot be parsed by the query backend."""


class EntityNotFoundError(ScrapeError):
    """Raised when a fragment lookup references no stored entity."""
