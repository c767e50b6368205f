"""
Declarative field mapping model.

An attribute mapping turns one selector into an ordered list of values:
evaluate, optionally join, run the post-process steps, optionally split,
then drop empty values. Record configs line the resulting lists up into
rows, so value ``i`` of every attribute lands in row ``i``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from app.scraping.logging_utils import log_event
from app.scraping.query.base import MappedQuery
from app.scraping.replacements import ReplacementRule, apply_replacements

logger = logging.getLogger(__name__)

FEET_INCHES_REGEX = re.compile(r"(\d+)\s*'\s*(\d+(?:\.\d+)?)?")
NUMBER_REGEX = re.compile(r"\d+(?:\.\d+)?")

CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54
KG_PER_POUND = 0.45359237


class PostProcessStep(ABC):
    """
    One stage of an attribute's post-processing pipeline.
    """

    @abstractmethod
    def apply(self, values: list[str], query: MappedQuery) -> list[str]:
        """
        Map an ordered list of values to a new ordered list.
        """


class ValueStep(PostProcessStep):
    """
    Step that transforms each value on its own and drops emptied values.
    """

    def apply(self, values: list[str], query: MappedQuery) -> list[str]:
        results: list[str] = []
        for value in values:
            transformed = self.transform(value, query)
            if transformed:
                results.append(transformed)
        return results

    @abstractmethod
    def transform(self, value: str, query: MappedQuery) -> str:
        """
        Return the transformed value, or an empty string to drop it.
        """


@dataclass(frozen=True)
class ReplaceStep(ValueStep):
    rules: tuple[ReplacementRule, ...]

    def transform(self, value: str, query: MappedQuery) -> str:
        return apply_replacements(value, self.rules).strip()


@dataclass(frozen=True)
class SubScrapeStep(ValueStep):
    """
    Treat the value as a link and resolve a nested attribute on the linked document.
    """

    attribute: AttributeMapping

    def transform(self, value: str, query: MappedQuery) -> str:
        sub_query = query.sub_scrape(value)
        if sub_query is None:
            return ""
        found = self.attribute.resolve(sub_query)
        return found[0] if found else ""


@dataclass(frozen=True)
class ParseDateStep(ValueStep):
    date_format: str

    def transform(self, value: str, query: MappedQuery) -> str:
        try:
            return datetime.strptime(value.strip(), self.date_format).date().isoformat()
        except ValueError:
            log_event(
                logger,
                logging.WARNING,
                "date_parse_failed",
                value=value,
                date_format=self.date_format,
            )
            return value


@dataclass(frozen=True)
class MapStep(ValueStep):
    mapping: Mapping[str, str]

    def transform(self, value: str, query: MappedQuery) -> str:
        return self.mapping.get(value, value)


@dataclass(frozen=True)
class FeetToCmStep(ValueStep):
    def transform(self, value: str, query: MappedQuery) -> str:
        match = FEET_INCHES_REGEX.search(value)
        if match is None:
            return value
        feet = int(match.group(1))
        inches = float(match.group(2) or 0)
        return str(round(feet * CM_PER_FOOT + inches * CM_PER_INCH))


@dataclass(frozen=True)
class LbToKgStep(ValueStep):
    def transform(self, value: str, query: MappedQuery) -> str:
        match = NUMBER_REGEX.search(value)
        if match is None:
            return value
        return str(round(float(match.group(0)) * KG_PER_POUND))


@dataclass(frozen=True)
class AttributeMapping:
    """
    How one output field is read from a document.
    """

    name: str
    selector: str = ""
    fixed: str | None = None
    concat: str | None = None
    split: str | None = None
    post_process: tuple[PostProcessStep, ...] = ()

    def resolve(
        self,
        query: MappedQuery,
        common: Mapping[str, str] | None = None,
    ) -> list[str]:
        if self.fixed is not None:
            return [self.fixed]

        selector = apply_common(self.selector, common)
        if not selector:
            return []

        values = query.evaluate(selector)
        if not values:
            return []
        if self.concat is not None:
            values = [self.concat.join(values)]
        for step in self.post_process:
            values = step.apply(values, query)
        if self.split is not None:
            values = [part for value in values for part in value.split(self.split)]
        return [value.strip() for value in values if value.strip()]


@dataclass(frozen=True)
class MappedRecordConfig:
    """
    Ordered attribute mappings for one record kind plus its nested records.
    """

    attributes: tuple[AttributeMapping, ...] = ()
    tags: MappedRecordConfig | None = None
    performers: MappedRecordConfig | None = None
    studio: MappedRecordConfig | None = None
    movies: MappedRecordConfig | None = None

    def process(
        self,
        query: MappedQuery,
        common: Mapping[str, str] | None = None,
    ) -> list[dict[str, str]]:
        rows: list[dict[str, str]] = []
        for attribute in self.attributes:
            for index, value in enumerate(attribute.resolve(query, common)):
                while len(rows) <= index:
                    rows.append({})
                rows[index][attribute.name] = value
        return rows


@dataclass(frozen=True)
class MappedScraperConfig:
    """
    One named mapping: shared selector fragments and a record config per kind.
    """

    common: Mapping[str, str] = field(default_factory=dict)
    performer: MappedRecordConfig | None = None
    scene: MappedRecordConfig | None = None
    gallery: MappedRecordConfig | None = None
    movie: MappedRecordConfig | None = None


def apply_common(selector: str, common: Mapping[str, str] | None) -> str:
    """
    Expand shared `$key` fragments in a selector, longest key first.
    """

    if not common:
        return selector
    for key in sorted(common, key=len, reverse=True):
        selector = selector.replace(key, common[key])
    return selector
