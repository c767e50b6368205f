"""
Record assembly from mapped scraper configs.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from app.schemas.scraped import (
    ScrapedGallery,
    ScrapedMovie,
    ScrapedPerformer,
    ScrapedRecord,
    ScrapedScene,
    ScrapedStudio,
    ScrapedTag,
)
from app.scraping.logging_utils import log_event
from app.scraping.mapping.models import MappedRecordConfig, MappedScraperConfig
from app.scraping.query.base import MappedQuery

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=ScrapedRecord)

# Fields holding nested records; they are only filled from nested mappings.
NESTED_RECORD_FIELDS = frozenset({"tags", "performers", "studio", "movies"})


class MappedScraper:
    """
    Assembles scraped records by walking one named mapping over a query.

    Assembly never raises for missing data: fields that resolve to nothing
    are left unset and an all-empty record is returned as-is.
    """

    def __init__(self, *, name: str, config: MappedScraperConfig) -> None:
        self.name = name
        self._config = config

    def scrape_performer(self, query: MappedQuery) -> ScrapedPerformer | None:
        record_config = self._record_config("performer", self._config.performer)
        if record_config is None:
            return None

        values = self._first_row(record_config, query, ScrapedPerformer)
        tags = self._rows(record_config.tags, query, ScrapedTag)
        if tags:
            values["tags"] = tags
        return _build(ScrapedPerformer, values)

    def scrape_performers(self, query: MappedQuery) -> list[ScrapedPerformer]:
        record_config = self._record_config("performer", self._config.performer)
        if record_config is None:
            return []
        return [
            _build(ScrapedPerformer, row)
            for row in self._rows(record_config, query, ScrapedPerformer)
        ]

    def scrape_scene(self, query: MappedQuery) -> ScrapedScene | None:
        record_config = self._record_config("scene", self._config.scene)
        if record_config is None:
            return None

        values = self._first_row(record_config, query, ScrapedScene)
        self._apply_shared_nested(values, record_config, query)
        movies = self._movie_rows(record_config.movies, query)
        if movies:
            values["movies"] = movies
        return _build(ScrapedScene, values)

    def scrape_gallery(self, query: MappedQuery) -> ScrapedGallery | None:
        record_config = self._record_config("gallery", self._config.gallery)
        if record_config is None:
            return None

        values = self._first_row(record_config, query, ScrapedGallery)
        self._apply_shared_nested(values, record_config, query)
        return _build(ScrapedGallery, values)

    def scrape_movie(self, query: MappedQuery) -> ScrapedMovie | None:
        record_config = self._record_config("movie", self._config.movie)
        if record_config is None:
            return None

        values = self._first_row(record_config, query, ScrapedMovie)
        studio = self._rows(record_config.studio, query, ScrapedStudio)
        if studio:
            values["studio"] = studio[0]
        return _build(ScrapedMovie, values)

    def _apply_shared_nested(
        self,
        values: dict[str, Any],
        record_config: MappedRecordConfig,
        query: MappedQuery,
    ) -> None:
        performers = self._rows(record_config.performers, query, ScrapedPerformer)
        if performers:
            performer_tags = []
            if record_config.performers is not None:
                performer_tags = self._rows(record_config.performers.tags, query, ScrapedTag)
            if performer_tags:
                performers = [{**row, "tags": performer_tags} for row in performers]
            values["performers"] = performers

        tags = self._rows(record_config.tags, query, ScrapedTag)
        if tags:
            values["tags"] = tags

        studio = self._rows(record_config.studio, query, ScrapedStudio)
        if studio:
            values["studio"] = studio[0]

    def _movie_rows(
        self,
        movie_config: MappedRecordConfig | None,
        query: MappedQuery,
    ) -> list[dict[str, Any]]:
        movies = self._rows(movie_config, query, ScrapedMovie)
        if not movies or movie_config is None:
            return movies

        # movie i takes studio row i, falling back to the first studio
        studios = self._rows(movie_config.studio, query, ScrapedStudio)
        if not studios:
            return movies
        return [
            {**row, "studio": studios[index] if index < len(studios) else studios[0]}
            for index, row in enumerate(movies)
        ]

    def _record_config(
        self,
        kind: str,
        record_config: MappedRecordConfig | None,
    ) -> MappedRecordConfig | None:
        if record_config is None:
            log_event(
                logger,
                logging.WARNING,
                "record_mapping_missing",
                scraper=self.name,
                kind=kind,
            )
        return record_config

    def _first_row(
        self,
        record_config: MappedRecordConfig,
        query: MappedQuery,
        model: type[ScrapedRecord],
    ) -> dict[str, Any]:
        rows = record_config.process(query, self._config.common)
        if not rows:
            return {}
        return _known_fields(model, rows[0], self.name)

    def _rows(
        self,
        record_config: MappedRecordConfig | None,
        query: MappedQuery,
        model: type[ScrapedRecord],
    ) -> list[dict[str, Any]]:
        if record_config is None:
            return []
        return [
            _known_fields(model, row, self.name)
            for row in record_config.process(query, self._config.common)
        ]


def _known_fields(
    model: type[ScrapedRecord],
    row: dict[str, str],
    scraper_name: str,
) -> dict[str, Any]:
    known: dict[str, Any] = {}
    for key, value in row.items():
        if key in NESTED_RECORD_FIELDS and key in model.model_fields:
            log_event(
                logger,
                logging.WARNING,
                "nested_field_ignored",
                scraper=scraper_name,
                record=model.__name__,
                field=key,
            )
        elif key in model.model_fields:
            known[key] = value
        else:
            log_event(
                logger,
                logging.WARNING,
                "unknown_field_ignored",
                scraper=scraper_name,
                record=model.__name__,
                field=key,
            )
    return known


def _build(model: type[RecordT], values: dict[str, Any]) -> RecordT:
    return model.model_validate(values)
