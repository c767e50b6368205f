"""
Storage exports for fragment scraping.
"""

from app.scraping.storage.base import (
    EntityStore,
    gallery_from_update_fragment,
    scene_from_update_fragment,
)
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyEntityStore

__all__ = [
    "EntityStore",
    "SQLAlchemyEntityStore",
    "gallery_from_update_fragment",
    "scene_from_update_fragment",
]
