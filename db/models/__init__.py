"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works without
extra imports.
"""

from db.models.gallery import Gallery
from db.models.scene import Scene
from db.models.studio import Studio

__all__ = [
    "Gallery",
    "Scene",
    "Studio",
]
