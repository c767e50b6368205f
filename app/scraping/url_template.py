"""
Query URL construction from templates and stored entity attributes.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import quote_plus

from app.domain.scraping import StoredGallery, StoredScene
from app.scraping.replacements import ReplacementRule, apply_replacements

SEARCH_PLACEHOLDER = "{}"


class QueryURLParameters(Mapping[str, str]):
    """
    Ordered placeholder name -> value pairs substituted into `{name}` tokens.
    """

    def __init__(self, values: Iterable[tuple[str, str | None]] = ()) -> None:
        self._values: dict[str, str] = {
            key: value for key, value in values if value is not None
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def construct_url(self, template: str) -> str:
        """
        Replace every known placeholder; unknown placeholders stay verbatim.
        """

        url = template
        for key, value in self._values.items():
            url = url.replace("{" + key + "}", value)
        return url


def construct_url(
    template: str,
    params: QueryURLParameters,
    rules: Iterable[ReplacementRule] = (),
) -> str:
    return apply_replacements(params.construct_url(template), rules)


def construct_search_url(
    template: str,
    name: str,
    rules: Iterable[ReplacementRule] = (),
) -> str:
    """
    Substitute the query-escaped search term for `{}` and apply cleanup rules.
    """

    url = template.replace(SEARCH_PLACEHOLDER, quote_plus(name))
    return apply_replacements(url, rules)


def query_url_parameters_from_scene(scene: StoredScene) -> QueryURLParameters:
    return QueryURLParameters(
        [
            ("checksum", scene.checksum),
            ("oshash", scene.oshash),
            ("filename", os.path.basename(scene.path) if scene.path else None),
            ("title", scene.title),
            ("url", scene.url),
            ("date", scene.date),
            ("studio", scene.studio),
        ]
    )


def query_url_parameters_from_gallery(gallery: StoredGallery) -> QueryURLParameters:
    return QueryURLParameters(
        [
            ("checksum", gallery.checksum),
            ("filename", os.path.basename(gallery.path) if gallery.path else None),
            ("title", gallery.title),
            ("url", gallery.url),
            ("date", gallery.date),
        ]
    )


def query_url_parameters_from_url(url: str) -> QueryURLParameters:
    return QueryURLParameters([("url", url)])


def rewrite_url(
    url: str,
    *,
    url_rules: Iterable[ReplacementRule],
    query_url: str | None,
) -> str:
    """
    Rewrite a caller-supplied URL before a by-URL fetch.

    The URL is cleaned by `url_rules` and, when a query template is set,
    substituted into its `{url}` placeholder.
    """

    rewritten = apply_replacements(url, url_rules)
    if not query_url:
        return rewritten
    return query_url_parameters_from_url(rewritten).construct_url(query_url)
