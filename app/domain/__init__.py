"""
app/domain package marker.
"""

from app.domain.scraping import (
    GalleryUpdateInput,
    PerformerFragmentInput,
    SceneUpdateInput,
    StoredGallery,
    StoredScene,
)

__all__ = [
    "GalleryUpdateInput",
    "PerformerFragmentInput",
    "SceneUpdateInput",
    "StoredGallery",
    "StoredScene",
]
