"""
Field mapping model and record assembly.
"""

from app.scraping.mapping.engine import MappedScraper
from app.scraping.mapping.models import (
    AttributeMapping,
    FeetToCmStep,
    LbToKgStep,
    MappedRecordConfig,
    MappedScraperConfig,
    MapStep,
    ParseDateStep,
    PostProcessStep,
    ReplaceStep,
    SubScrapeStep,
)

__all__ = [
    "AttributeMapping",
    "FeetToCmStep",
    "LbToKgStep",
    "MapStep",
    "MappedRecordConfig",
    "MappedScraper",
    "MappedScraperConfig",
    "ParseDateStep",
    "PostProcessStep",
    "ReplaceStep",
    "SubScrapeStep",
]
