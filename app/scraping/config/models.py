"""
Scraping configuration models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from app.scraping.mapping.models import MappedScraperConfig
from app.scraping.replacements import ReplacementRule

ACTION_SCRAPE_JSON = "scrape_json"
ACTION_SCRAPE_HTML = "scrape_html"

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True)
class ScraperTypeConfig:
    """
    One lookup entry point of a scraper (e.g. scene by fragment).
    """

    action: str
    scraper: str
    query_url: str | None = None
    query_url_replace: tuple[ReplacementRule, ...] = ()
    url_replace: tuple[ReplacementRule, ...] = ()
    url: tuple[str, ...] = ()

    def matches_url(self, url: str) -> bool:
        return any(pattern in url for pattern in self.url)


@dataclass(frozen=True)
class RequestOptions:
    """
    Per-scraper request options handed to the fetcher.
    """

    headers: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    cookies: Mapping[str, str] = field(default_factory=lambda: _EMPTY)


@dataclass(frozen=True)
class DebugOptions:
    print_html: bool = False


@dataclass(frozen=True)
class ScraperDefinition:
    """
    One named scraper: its lookup entry points and named field mappings.
    """

    id: str
    name: str
    performer_by_name: ScraperTypeConfig | None = None
    performer_by_fragment: ScraperTypeConfig | None = None
    performer_by_url: tuple[ScraperTypeConfig, ...] = ()
    scene_by_fragment: ScraperTypeConfig | None = None
    scene_by_url: tuple[ScraperTypeConfig, ...] = ()
    gallery_by_fragment: ScraperTypeConfig | None = None
    gallery_by_url: tuple[ScraperTypeConfig, ...] = ()
    movie_by_url: tuple[ScraperTypeConfig, ...] = ()
    json_scrapers: Mapping[str, MappedScraperConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )
    html_scrapers: Mapping[str, MappedScraperConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )
    request: RequestOptions = field(default_factory=RequestOptions)
    debug: DebugOptions = field(default_factory=DebugOptions)

    def mapped_scrapers_for(self, action: str) -> Mapping[str, MappedScraperConfig]:
        if action == ACTION_SCRAPE_HTML:
            return self.html_scrapers
        return self.json_scrapers


@dataclass(frozen=True)
class ScrapingSettings:
    """
    Runtime settings for mapped scraping.
    """

    config_path: str
    user_agent: str
    timeout_seconds: float
    max_retries: int
    backoff_initial_seconds: float
    backoff_multiplier: float
    proxy_url: str | None = None
