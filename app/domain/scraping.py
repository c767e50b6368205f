"""
app/domain/scraping.py

Domain models for stored entities and the update fragments that reference them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredScene:
    """
    Read-only view of one stored scene used to build query URLs.
    """

    id: int
    path: str
    checksum: str | None = None
    oshash: str | None = None
    title: str | None = None
    url: str | None = None
    date: str | None = None
    studio: str | None = None


@dataclass(frozen=True)
class StoredGallery:
    """
    Read-only view of one stored gallery used to build query URLs.
    """

    id: int
    checksum: str
    path: str | None = None
    title: str | None = None
    url: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class SceneUpdateInput:
    """
    Partial scene update identifying the scene to scrape for.
    """

    id: str
    title: str | None = None
    url: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class GalleryUpdateInput:
    """
    Partial gallery update identifying the gallery to scrape for.
    """

    id: str
    title: str | None = None
    url: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class PerformerFragmentInput:
    """
    Partially known performer attributes supplied by a caller.
    """

    name: str | None = None
    url: str | None = None
