"""
app/schemas package marker.
"""

from app.schemas.scraped import (
    ScrapedGallery,
    ScrapedMovie,
    ScrapedPerformer,
    ScrapedScene,
    ScrapedStudio,
    ScrapedTag,
)

__all__ = [
    "ScrapedGallery",
    "ScrapedMovie",
    "ScrapedPerformer",
    "ScrapedScene",
    "ScrapedStudio",
    "ScrapedTag",
]
