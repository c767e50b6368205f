"""
Scraper backend registry and factory.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping

from app.scraping.base import ScraperBase
from app.scraping.config.models import (
    ACTION_SCRAPE_HTML,
    ACTION_SCRAPE_JSON,
    ScraperDefinition,
    ScraperTypeConfig,
)
from app.scraping.errors import ScraperConfigurationError
from app.scraping.fetcher import Fetcher
from app.scraping.scrapers import HTMLScraper, JSONScraper
from app.scraping.storage.base import EntityStore


class ScraperRegistry:
    """
    Maps scraper actions to backend classes, supporting dynamic import paths.
    """

    def __init__(self, registrations: Mapping[str, type[ScraperBase]] | None = None) -> None:
        builtins: dict[str, type[ScraperBase]] = {
            ACTION_SCRAPE_JSON: JSONScraper,
            ACTION_SCRAPE_HTML: HTMLScraper,
        }
        if registrations:
            builtins.update(registrations)
        self._registrations = builtins

    def register(self, *, action: str, scraper_class: type[ScraperBase] | str) -> None:
        if isinstance(scraper_class, str):
            scraper_class = self._load_dynamic_class(scraper_class)
        self._registrations[action.strip().lower()] = scraper_class

    def create_scraper(
        self,
        *,
        definition: ScraperDefinition,
        type_config: ScraperTypeConfig,
        fetcher: Fetcher,
        store: EntityStore | None = None,
    ) -> ScraperBase:
        scraper_class = self._registrations.get(type_config.action)
        if scraper_class is None:
            allowed = ", ".join(sorted(self._registrations.keys()))
            raise ScraperConfigurationError(
                f"Unknown action='{type_config.action}' for scraper='{definition.id}'. "
                f"Allowed actions: {allowed}."
            )
        return scraper_class(
            definition=definition,
            type_config=type_config,
            fetcher=fetcher,
            store=store,
        )

    @staticmethod
    def _load_dynamic_class(path: str) -> type[ScraperBase]:
        if ":" not in path:
            raise ScraperConfigurationError(
                f"Invalid scraper_class '{path}'. Use 'module.path:ClassName'."
            )

        module_path, class_name = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, class_name, None)
        if loaded is None:
            raise ScraperConfigurationError(f"Unable to resolve scraper class '{path}'.")
        if not isinstance(loaded, type) or not issubclass(loaded, ScraperBase):
            raise ScraperConfigurationError(f"Class '{path}' must inherit from ScraperBase.")
        return loaded
