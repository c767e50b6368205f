"""
Config helpers for mapped scraping.
"""

from app.scraping.config.loader import (
    get_scraping_settings,
    load_scraper_definitions,
    parse_scraper_definition,
)
from app.scraping.config.models import (
    ACTION_SCRAPE_HTML,
    ACTION_SCRAPE_JSON,
    DebugOptions,
    RequestOptions,
    ScraperDefinition,
    ScraperTypeConfig,
    ScrapingSettings,
)

__all__ = [
    "ACTION_SCRAPE_HTML",
    "ACTION_SCRAPE_JSON",
    "DebugOptions",
    "RequestOptions",
    "ScraperDefinition",
    "ScraperTypeConfig",
    "ScrapingSettings",
    "get_scraping_settings",
    "load_scraper_definitions",
    "parse_scraper_definition",
]
