"""
app/schemas/scraped.py

Record schemas produced by mapped scrapers.

Every attribute is optional: a field whose selector found nothing stays
`None` and is dropped by `model_dump(exclude_none=True)`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ScrapedRecord(BaseModel):
    """
    Shared configuration for scraped record models.
    """

    model_config = ConfigDict(extra="ignore")

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class ScrapedTag(ScrapedRecord):
    name: str | None = None


class ScrapedStudio(ScrapedRecord):
    name: str | None = None
    url: str | None = None
    remote_site_id: str | None = None


class ScrapedPerformer(ScrapedRecord):
    name: str | None = None
    gender: str | None = None
    url: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    birthdate: str | None = None
    ethnicity: str | None = None
    country: str | None = None
    eye_color: str | None = None
    height: str | None = None
    measurements: str | None = None
    fake_tits: str | None = None
    career_length: str | None = None
    tattoos: str | None = None
    piercings: str | None = None
    aliases: str | None = None
    image: str | None = None
    details: str | None = None
    death_date: str | None = None
    hair_color: str | None = None
    weight: str | None = None
    remote_site_id: str | None = None
    tags: list[ScrapedTag] | None = None


class ScrapedMovie(ScrapedRecord):
    name: str | None = None
    aliases: str | None = None
    duration: str | None = None
    date: str | None = None
    rating: str | None = None
    director: str | None = None
    url: str | None = None
    synopsis: str | None = None
    front_image: str | None = None
    back_image: str | None = None
    studio: ScrapedStudio | None = None


class ScrapedScene(ScrapedRecord):
    title: str | None = None
    details: str | None = None
    url: str | None = None
    date: str | None = None
    image: str | None = None
    duration: str | None = None
    remote_site_id: str | None = None
    studio: ScrapedStudio | None = None
    tags: list[ScrapedTag] | None = None
    performers: list[ScrapedPerformer] | None = None
    movies: list[ScrapedMovie] | None = None


class ScrapedGallery(ScrapedRecord):
    title: str | None = None
    details: str | None = None
    url: str | None = None
    date: str | None = None
    studio: ScrapedStudio | None = None
    tags: list[ScrapedTag] | None = None
    performers: list[ScrapedPerformer] | None = None
