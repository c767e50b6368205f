"""
tests/test_scrapers.py

End-to-end tests for the JSON and HTML scraper entry points.

Every test runs the full fetch -> query -> assemble pipeline against a
FakeFetcher, so the requested URLs double as assertions on URL building.
"""

from __future__ import annotations

import logging

import pytest

from app.domain.scraping import GalleryUpdateInput, PerformerFragmentInput, SceneUpdateInput
from app.scraping.config.loader import parse_scraper_definition
from app.scraping.errors import (
    DocumentInvalidError,
    EntityNotFoundError,
    FetchError,
    ScraperConfigurationError,
    UnsupportedOperationError,
)
from app.scraping.scrapers import HTMLScraper, JSONScraper

DEFINITION = parse_scraper_definition(
    {
        "id": "example",
        "name": "Example",
        "performerByName": {
            "action": "scrapeJson",
            "queryURL": "https://api.example.com/search?q={}",
            "scraper": "search",
        },
        "performerByURL": {
            "action": "scrapeJson",
            "url": ["example.com/performers/"],
            "urlReplace": [{"regex": "^https://example\\.com/performers/(\\d+)$", "with": "$1"}],
            "queryURL": "https://api.example.com/performers/{url}",
            "scraper": "performer",
        },
        "sceneByFragment": {
            "action": "scrapeJson",
            "queryURL": "https://api.example.com/scenes?f={filename}&s={studio}&d={date}",
            "queryURLReplace": [{"regex": " ", "with": "%20"}],
            "scraper": "scene",
        },
        "galleryByFragment": {
            "action": "scrapeJson",
            "queryURL": "https://api.example.com/galleries/{checksum}",
            "scraper": "gallery",
        },
        "movieByURL": {"action": "scrapeJson", "url": ["example.com/movies/"], "scraper": "movie"},
        "sceneByURL": [
            {"action": "scrapeHtml", "url": ["example.org/videos/"], "scraper": "htmlScene"},
            {"action": "scrapeJson", "url": ["example.com/scenes/"], "scraper": "absent"},
        ],
        "jsonScrapers": {
            "search": {"performer": {"Name": "results[*].name", "URL": "results[*].url"}},
            "performer": {
                "common": {"$p": "data.performer"},
                "performer": {
                    "Name": "$p.name",
                    "Country": "$p.country",
                    "Tags": {"Name": "$p.tags"},
                },
            },
            "scene": {
                "scene": {
                    "Title": "result.title",
                    "Details": "result.details",
                    "Studio": {
                        "Name": {"selector": "result.studio", "postProcess": [{"subScraper": "name"}]}
                    },
                }
            },
            "gallery": {"gallery": {"Title": "title", "Tags": {"Name": "tags"}}},
            "movie": {"movie": {"Name": "name", "Studio": {"Name": "studio"}}},
        },
        "htmlScrapers": {
            "htmlScene": {
                "scene": {
                    "Title": "h1",
                    "Image": "meta[property='og:image']::attr(content)",
                    "Performers": {"Name": ".cast a"},
                }
            }
        },
    }
)


def _json_scraper(lookup: str, fetcher, store=None, index: int | None = None) -> JSONScraper:
    type_config = getattr(DEFINITION, lookup)
    if index is not None:
        type_config = type_config[index]
    return JSONScraper(definition=DEFINITION, type_config=type_config, fetcher=fetcher, store=store)


class TestByName:
    def test_search_url_and_results(self, fetcher) -> None:
        fetcher.add(
            "https://api.example.com/search?q=foo+bar",
            {"results": [{"name": "Foo Bar", "url": "u1"}, {"name": "Foo Baz", "url": "u2"}]},
        )

        performers = _json_scraper("performer_by_name", fetcher).scrape_performers_by_name("foo bar")

        assert fetcher.requests == ["https://api.example.com/search?q=foo+bar"]
        assert [p.name for p in performers] == ["Foo Bar", "Foo Baz"]
        assert [p.url for p in performers] == ["u1", "u2"]

    def test_jsonp_response(self, fetcher) -> None:
        fetcher.add("https://api.example.com/search?q=ava", 'cb({"results": [{"name": "Ava"}]});')

        performers = _json_scraper("performer_by_name", fetcher).scrape_performers_by_name("ava")

        assert [p.name for p in performers] == ["Ava"]

    def test_html_response_is_invalid_document(self, fetcher) -> None:
        fetcher.add("https://api.example.com/search?q=ava", "<html><body>blocked</body></html>")

        with pytest.raises(DocumentInvalidError):
            _json_scraper("performer_by_name", fetcher).scrape_performers_by_name("ava")

    def test_fetch_errors_propagate(self, fetcher) -> None:
        with pytest.raises(FetchError) as ctx:
            _json_scraper("performer_by_name", fetcher).scrape_performers_by_name("nobody")
        assert ctx.value.status_code == 404


class TestByURL:
    def test_url_is_rewritten_before_fetch(self, fetcher) -> None:
        fetcher.add(
            "https://api.example.com/performers/42",
            {"data": {"performer": {"name": "Ava", "tags": ["blonde", "tall"]}}},
        )

        performer = _json_scraper("performer_by_url", fetcher, index=0).scrape_performer_by_url(
            "https://example.com/performers/42"
        )

        assert fetcher.requests == ["https://api.example.com/performers/42"]
        assert performer.to_payload() == {
            "name": "Ava",
            "tags": [{"name": "blonde"}, {"name": "tall"}],
        }

    def test_movie_by_url(self, fetcher) -> None:
        fetcher.add("https://example.com/movies/9", {"name": "Road Trips", "studio": "Coastline"})

        movie = _json_scraper("movie_by_url", fetcher, index=0).scrape_movie_by_url("https://example.com/movies/9")

        assert movie.name == "Road Trips"
        assert movie.studio.name == "Coastline"

    def test_html_scene_by_url(self, fetcher) -> None:
        fetcher.add(
            "https://example.org/videos/1",
            "<html><head><meta property='og:image' content='https://cdn/c.jpg'></head>"
            "<body><h1>Sunset Drive</h1><div class='cast'><a>Ava</a><a>Bea</a></div></body></html>",
        )
        scraper = HTMLScraper(
            definition=DEFINITION,
            type_config=DEFINITION.scene_by_url[0],
            fetcher=fetcher,
        )

        scene = scraper.scrape_scene_by_url("https://example.org/videos/1")

        assert scene.title == "Sunset Drive"
        assert scene.image == "https://cdn/c.jpg"
        assert [p.name for p in scene.performers] == ["Ava", "Bea"]

    def test_missing_mapping_fails_before_io(self, fetcher) -> None:
        with pytest.raises(ScraperConfigurationError, match="absent not found"):
            _json_scraper("scene_by_url", fetcher, index=1).scrape_scene_by_url("https://example.com/scenes/1")
        assert fetcher.requests == []


class TestByFragment:
    def test_scene_fragment_builds_url_from_stored_scene(self, fetcher, store) -> None:
        url = "https://api.example.com/scenes?f=Sunset%20Drive.mp4&s=Coastline&d={date}"
        fetcher.add(url, {"result": {"title": "Sunset Drive", "studio": "/studios/3"}})
        fetcher.add("https://api.example.com/studios/3", {"name": "Coastline"})

        scene = _json_scraper("scene_by_fragment", fetcher, store).scrape_scene_by_fragment(
            SceneUpdateInput(id="1")
        )

        assert fetcher.requests == [url, "https://api.example.com/studios/3"]
        assert scene.title == "Sunset Drive"
        assert scene.studio.name == "Coastline"

    def test_sub_scrape_failure_keeps_sibling_fields(self, fetcher, store, caplog) -> None:
        url = "https://api.example.com/scenes?f=Sunset%20Drive.mp4&s=Coastline&d={date}"
        fetcher.add(url, {"result": {"title": "Sunset Drive", "details": "Drive.", "studio": "/studios/404"}})

        with caplog.at_level(logging.WARNING):
            scene = _json_scraper("scene_by_fragment", fetcher, store).scrape_scene_by_fragment(
                SceneUpdateInput(id="1")
            )

        assert scene.to_payload() == {"title": "Sunset Drive", "details": "Drive."}
        assert "sub_scrape_failed" in caplog.text

    def test_unknown_scene_raises_without_fetch(self, fetcher, store) -> None:
        with pytest.raises(EntityNotFoundError):
            _json_scraper("scene_by_fragment", fetcher, store).scrape_scene_by_fragment(
                SceneUpdateInput(id="999")
            )
        assert fetcher.requests == []

    def test_invalid_id_raises_entity_not_found(self, fetcher, store) -> None:
        with pytest.raises(EntityNotFoundError):
            _json_scraper("scene_by_fragment", fetcher, store).scrape_scene_by_fragment(
                SceneUpdateInput(id="abc")
            )
        assert fetcher.requests == []

    def test_gallery_fragment(self, fetcher, store) -> None:
        fetcher.add("https://api.example.com/galleries/def456", {"title": "Beach Set", "tags": ["beach"]})

        gallery = _json_scraper("gallery_by_fragment", fetcher, store).scrape_gallery_by_fragment(
            GalleryUpdateInput(id="7")
        )

        assert gallery.to_payload() == {"title": "Beach Set", "tags": [{"name": "beach"}]}

    def test_unknown_gallery(self, fetcher, store) -> None:
        with pytest.raises(EntityNotFoundError):
            _json_scraper("gallery_by_fragment", fetcher, store).scrape_gallery_by_fragment(
                GalleryUpdateInput(id="8")
            )
        assert fetcher.requests == []

    def test_performer_fragment_not_supported(self, fetcher) -> None:
        with pytest.raises(UnsupportedOperationError):
            _json_scraper("performer_by_name", fetcher).scrape_performer_by_fragment(
                PerformerFragmentInput(name="Ava")
            )
        assert fetcher.requests == []

    def test_fragment_without_store_is_configuration_error(self, fetcher) -> None:
        with pytest.raises(ScraperConfigurationError):
            _json_scraper("scene_by_fragment", fetcher).scrape_scene_by_fragment(SceneUpdateInput(id="1"))


def test_debug_payload_logging(fetcher, caplog) -> None:
    definition = parse_scraper_definition(
        {
            "name": "Debug",
            "performerByName": {"action": "scrapeJson", "queryURL": "https://d/{}", "scraper": "s"},
            "jsonScrapers": {"s": {"performer": {"Name": "name"}}},
            "debug": {"printHTML": True},
        }
    )
    fetcher.add("https://d/x", {"name": "X"})
    scraper = JSONScraper(definition=definition, type_config=definition.performer_by_name, fetcher=fetcher)

    with caplog.at_level(logging.INFO, logger="app.scraping.base"):
        scraper.scrape_performers_by_name("x")

    assert "document_payload" in caplog.text


def _scene_url_scraper(scene_mapping: dict, fetcher) -> JSONScraper:
    definition = parse_scraper_definition(
        {
            "name": "Scenes",
            "sceneByURL": {"action": "scrapeJson", "url": ["x.org/"], "scraper": "s"},
            "jsonScrapers": {"s": {"scene": scene_mapping}},
        }
    )
    return JSONScraper(definition=definition, type_config=definition.scene_by_url[0], fetcher=fetcher)


def test_scene_movies_carry_their_studio(fetcher) -> None:
    fetcher.add("https://x.org/1", {"title": "T", "movie": {"name": "M", "studio": "S"}})
    scraper = _scene_url_scraper(
        {"Title": "title", "Movies": {"Name": "movie.name", "Studio": {"Name": "movie.studio"}}},
        fetcher,
    )

    scene = scraper.scrape_scene_by_url("https://x.org/1")

    assert scene.to_payload() == {"title": "T", "movies": [{"name": "M", "studio": {"name": "S"}}]}


def test_flat_studio_under_movies_is_a_configuration_error() -> None:
    with pytest.raises(ScraperConfigurationError):
        parse_scraper_definition(
            {
                "name": "Scenes",
                "jsonScrapers": {"s": {"scene": {"Movies": {"Name": "movie.name", "Studio": "movie.studio"}}}},
            }
        )


def test_blank_sub_scrape_link_is_not_fetched(fetcher) -> None:
    fetcher.add("https://x.org/1", {"title": "T", "link": ""})
    scraper = _scene_url_scraper(
        {"Title": "title", "Details": {"selector": "link", "postProcess": [{"subScraper": "title"}]}},
        fetcher,
    )

    scene = scraper.scrape_scene_by_url("https://x.org/1")

    assert fetcher.requests == ["https://x.org/1"]
    assert scene.to_payload() == {"title": "T"}
