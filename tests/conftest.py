"""
Shared fixtures for scraping tests.

No test touches the network: `FakeFetcher` serves canned payloads by URL
and records every request.
"""

from __future__ import annotations

import json

import pytest

from app.domain.scraping import StoredGallery, StoredScene
from app.scraping.config.models import RequestOptions
from app.scraping.errors import FetchError
from app.scraping.storage.base import EntityStore


class FakeFetcher:
    def __init__(self, pages: dict[str, bytes | str | dict | list] | None = None) -> None:
        self.pages = dict(pages or {})
        self.requests: list[str] = []

    def add(self, url: str, payload: bytes | str | dict | list) -> None:
        self.pages[url] = payload

    def fetch(self, url: str, request: RequestOptions | None = None) -> bytes:
        self.requests.append(url)
        if url not in self.pages:
            raise FetchError(f"HTTP 404 fetching {url}", url=url, status_code=404)
        payload = self.pages[url]
        if isinstance(payload, (dict, list)):
            payload = json.dumps(payload)
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return payload


class FakeEntityStore(EntityStore):
    def __init__(
        self,
        scenes: list[StoredScene] | None = None,
        galleries: list[StoredGallery] | None = None,
    ) -> None:
        self.scenes = {scene.id: scene for scene in scenes or []}
        self.galleries = {gallery.id: gallery for gallery in galleries or []}

    def find_scene(self, scene_id: int) -> StoredScene | None:
        return self.scenes.get(scene_id)

    def find_gallery(self, gallery_id: int) -> StoredGallery | None:
        return self.galleries.get(gallery_id)


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def store() -> FakeEntityStore:
    return FakeEntityStore(
        scenes=[
            StoredScene(
                id=1,
                path="/library/videos/Sunset Drive.mp4",
                checksum="abc123",
                oshash="0f0f0f0f",
                title="Sunset Drive",
                studio="Coastline",
            )
        ],
        galleries=[
            StoredGallery(id=7, checksum="def456", path="/library/galleries/beach set.zip"),
        ],
    )
