"""
app/services/scraping_service.py

Service facade that picks scraper definitions and entry points per lookup.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from app.domain.scraping import GalleryUpdateInput, PerformerFragmentInput, SceneUpdateInput
from app.schemas.scraped import ScrapedGallery, ScrapedPerformer, ScrapedRecord, ScrapedScene
from app.scraping.base import ScraperBase
from app.scraping.config import (
    ScraperDefinition,
    ScraperTypeConfig,
    ScrapingSettings,
    get_scraping_settings,
    load_scraper_definitions,
)
from app.scraping.errors import ScraperConfigurationError, UnsupportedOperationError
from app.scraping.fetcher import Fetcher, HTTPFetcher
from app.scraping.registry import ScraperRegistry
from app.scraping.storage.base import EntityStore

URL_KINDS = ("performer", "scene", "gallery", "movie")


class ScrapingService:
    """
    Resolves which scraper entry point serves a lookup and runs it.
    """

    def __init__(
        self,
        *,
        settings: ScrapingSettings | None = None,
        definitions: Sequence[ScraperDefinition] | None = None,
        fetcher: Fetcher | None = None,
        registry: ScraperRegistry | None = None,
    ) -> None:
        self._settings = settings or get_scraping_settings()
        if definitions is None:
            definitions = load_scraper_definitions(config_path=self._settings.config_path)
        self._definitions = {definition.id: definition for definition in definitions}
        self._fetcher = fetcher or HTTPFetcher(settings=self._settings)
        self._registry = registry or ScraperRegistry()

    @property
    def definitions(self) -> list[ScraperDefinition]:
        return list(self._definitions.values())

    def definition(self, scraper_id: str) -> ScraperDefinition:
        definition = self._definitions.get(scraper_id)
        if definition is None:
            raise ScraperConfigurationError(f"scraper with id {scraper_id} not found")
        return definition

    def scrape_url(
        self,
        *,
        kind: str,
        url: str,
        scraper_id: str | None = None,
    ) -> ScrapedRecord | None:
        """
        Scrape `url` with the first scraper whose by-URL patterns match it.
        """

        if kind not in URL_KINDS:
            raise UnsupportedOperationError(f"scraping {kind} by url is not supported")

        candidates = [self.definition(scraper_id)] if scraper_id else self.definitions
        for definition in candidates:
            for type_config in getattr(definition, f"{kind}_by_url"):
                if type_config.matches_url(url):
                    scraper = self._scraper(definition, type_config)
                    return getattr(scraper, f"scrape_{kind}_by_url")(url)
        raise UnsupportedOperationError(f"no {kind} scraper matches url {url}")

    def search_performers(self, *, scraper_id: str, name: str) -> list[ScrapedPerformer]:
        definition = self.definition(scraper_id)
        type_config = self._entry_point(definition, "performer_by_name")
        return self._scraper(definition, type_config).scrape_performers_by_name(name)

    def scrape_performer_fragment(
        self,
        *,
        scraper_id: str,
        fragment: PerformerFragmentInput,
    ) -> ScrapedPerformer | None:
        definition = self.definition(scraper_id)
        type_config = self._entry_point(definition, "performer_by_fragment")
        return self._scraper(definition, type_config).scrape_performer_by_fragment(fragment)

    def scrape_scene_fragment(
        self,
        *,
        scraper_id: str,
        update: SceneUpdateInput,
        store: EntityStore,
    ) -> ScrapedScene | None:
        definition = self.definition(scraper_id)
        type_config = self._entry_point(definition, "scene_by_fragment")
        return self._scraper(definition, type_config, store=store).scrape_scene_by_fragment(update)

    def scrape_gallery_fragment(
        self,
        *,
        scraper_id: str,
        update: GalleryUpdateInput,
        store: EntityStore,
    ) -> ScrapedGallery | None:
        definition = self.definition(scraper_id)
        type_config = self._entry_point(definition, "gallery_by_fragment")
        return self._scraper(definition, type_config, store=store).scrape_gallery_by_fragment(update)

    def _scraper(
        self,
        definition: ScraperDefinition,
        type_config: ScraperTypeConfig,
        *,
        store: EntityStore | None = None,
    ) -> ScraperBase:
        return self._registry.create_scraper(
            definition=definition,
            type_config=type_config,
            fetcher=self._fetcher,
            store=store,
        )

    @staticmethod
    def _entry_point(definition: ScraperDefinition, lookup: str) -> ScraperTypeConfig:
        type_config = getattr(definition, lookup)
        if type_config is None:
            raise UnsupportedOperationError(f"scraper {definition.id} does not support {lookup}")
        return type_config


@lru_cache(maxsize=1)
def get_scraping_service() -> ScrapingService:
    """
    Build and cache the scraping service.
    """

    return ScrapingService()
