"""
Base scraper abstraction for mapped-content scraping.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from app.domain.scraping import GalleryUpdateInput, PerformerFragmentInput, SceneUpdateInput
from app.schemas.scraped import ScrapedGallery, ScrapedMovie, ScrapedPerformer, ScrapedScene
from app.scraping.config.models import ScraperDefinition, ScraperTypeConfig
from app.scraping.errors import (
    EntityNotFoundError,
    ScraperConfigurationError,
    UnsupportedOperationError,
)
from app.scraping.fetcher import Fetcher
from app.scraping.logging_utils import log_event
from app.scraping.mapping.engine import MappedScraper
from app.scraping.query.base import MappedQuery
from app.scraping.storage.base import (
    EntityStore,
    gallery_from_update_fragment,
    scene_from_update_fragment,
)
from app.scraping.url_template import (
    construct_search_url,
    construct_url,
    query_url_parameters_from_gallery,
    query_url_parameters_from_scene,
    rewrite_url,
)

logger = logging.getLogger(__name__)


class ScraperBase(ABC):
    """
    Base class implementing the fetch -> query -> assemble pipeline.

    One instance serves one lookup entry point of a scraper definition.
    Every operation is a one-shot call with no state kept between calls.
    """

    backend: str = ""

    def __init__(
        self,
        *,
        definition: ScraperDefinition,
        type_config: ScraperTypeConfig,
        fetcher: Fetcher,
        store: EntityStore | None = None,
    ) -> None:
        self.definition = definition
        self.type_config = type_config
        self.fetcher = fetcher
        self.store = store

    @abstractmethod
    def build_query(self, payload: bytes, *, url: str) -> MappedQuery:
        """
        Wrap one fetched payload in a backend query.
        """

    def mapped_scraper(self) -> MappedScraper:
        """
        Resolve the named mapping this entry point uses.
        """

        name = self.type_config.scraper
        config = self.definition.mapped_scrapers_for(self.type_config.action).get(name)
        if config is None:
            raise ScraperConfigurationError(
                f"{self.backend} scraper with name {name} not found in config"
            )
        return MappedScraper(name=name, config=config)

    def load_query(self, url: str) -> MappedQuery:
        """
        Fetch `url` and wrap the payload; also used for sub-scrapes.
        """

        payload = self.fetcher.fetch(url, self.definition.request)
        if self.definition.debug.print_html:
            log_event(
                logger,
                logging.INFO,
                "document_payload",
                scraper=self.definition.id,
                url=url,
                payload=payload.decode("utf-8", errors="replace"),
            )
        return self.build_query(payload, url=url)

    def scrape_performer_by_url(self, url: str) -> ScrapedPerformer | None:
        scraper, query = self._scrape_url(url)
        return scraper.scrape_performer(query)

    def scrape_scene_by_url(self, url: str) -> ScrapedScene | None:
        scraper, query = self._scrape_url(url)
        return scraper.scrape_scene(query)

    def scrape_gallery_by_url(self, url: str) -> ScrapedGallery | None:
        scraper, query = self._scrape_url(url)
        return scraper.scrape_gallery(query)

    def scrape_movie_by_url(self, url: str) -> ScrapedMovie | None:
        scraper, query = self._scrape_url(url)
        return scraper.scrape_movie(query)

    def scrape_performers_by_name(self, name: str) -> list[ScrapedPerformer]:
        scraper = self.mapped_scraper()
        url = construct_search_url(
            self._require_query_url(),
            name,
            self.type_config.query_url_replace,
        )
        return scraper.scrape_performers(self.load_query(url))

    def scrape_performer_by_fragment(self, fragment: PerformerFragmentInput) -> ScrapedPerformer | None:
        raise UnsupportedOperationError(
            f"scrape_performer_by_fragment not supported for {self.backend} scraper"
        )

    def scrape_scene_by_fragment(self, update: SceneUpdateInput) -> ScrapedScene | None:
        scraper = self.mapped_scraper()
        stored = scene_from_update_fragment(update, self._require_store())
        if stored is None:
            raise EntityNotFoundError(f"no scene found with id {update.id}")

        url = construct_url(
            self._require_query_url(),
            query_url_parameters_from_scene(stored),
            self.type_config.query_url_replace,
        )
        return scraper.scrape_scene(self.load_query(url))

    def scrape_gallery_by_fragment(self, update: GalleryUpdateInput) -> ScrapedGallery | None:
        scraper = self.mapped_scraper()
        stored = gallery_from_update_fragment(update, self._require_store())
        if stored is None:
            raise EntityNotFoundError(f"no gallery found with id {update.id}")

        url = construct_url(
            self._require_query_url(),
            query_url_parameters_from_gallery(stored),
            self.type_config.query_url_replace,
        )
        return scraper.scrape_gallery(self.load_query(url))

    def _scrape_url(self, url: str) -> tuple[MappedScraper, MappedQuery]:
        scraper = self.mapped_scraper()
        target = rewrite_url(
            url,
            url_rules=self.type_config.url_replace,
            query_url=self.type_config.query_url,
        )
        return scraper, self.load_query(target)

    def _require_query_url(self) -> str:
        if not self.type_config.query_url:
            raise ScraperConfigurationError(
                f"scraper {self.definition.id} has no query_url for {self.type_config.scraper}"
            )
        return self.type_config.query_url

    def _require_store(self) -> EntityStore:
        if self.store is None:
            raise ScraperConfigurationError(
                f"scraper {self.definition.id} needs an entity store for fragment lookups"
            )
        return self.store
