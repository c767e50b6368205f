"""
Storage layer interfaces for stored entity lookups.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.scraping import GalleryUpdateInput, SceneUpdateInput, StoredGallery, StoredScene
from app.scraping.errors import EntityNotFoundError


class EntityStore(ABC):
    """
    Read-only lookup of stored entities referenced by update fragments.
    """

    @abstractmethod
    def find_scene(self, scene_id: int) -> StoredScene | None:
        """
        Return the stored scene, or None when it does not exist.
        """

    @abstractmethod
    def find_gallery(self, gallery_id: int) -> StoredGallery | None:
        """
        Return the stored gallery, or None when it does not exist.
        """


def scene_from_update_fragment(update: SceneUpdateInput, store: EntityStore) -> StoredScene | None:
    return store.find_scene(_parse_id(update.id, "scene"))


def gallery_from_update_fragment(
    update: GalleryUpdateInput,
    store: EntityStore,
) -> StoredGallery | None:
    return store.find_gallery(_parse_id(update.id, "gallery"))


def _parse_id(raw: str, kind: str) -> int:
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise EntityNotFoundError(f"Invalid {kind} id '{raw}'.") from exc
