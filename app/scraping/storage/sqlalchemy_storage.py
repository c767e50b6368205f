"""
SQLAlchemy-backed entity lookups for fragment scraping.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.domain.scraping import StoredGallery, StoredScene
from app.scraping.storage.base import EntityStore
from db.models import Gallery, Scene


class SQLAlchemyEntityStore(EntityStore):
    """
    Read stored scenes and galleries through a DB session.
    """

    def __init__(self, *, session: Session) -> None:
        self._session = session

    def find_scene(self, scene_id: int) -> StoredScene | None:
        stmt = select(Scene).options(joinedload(Scene.studio)).where(Scene.id == scene_id)
        row = self._session.execute(stmt).scalar_one_or_none()
        if row is None:
            return None
        return StoredScene(
            id=row.id,
            path=row.path,
            checksum=row.checksum,
            oshash=row.oshash,
            title=row.title,
            url=row.url,
            date=row.date.isoformat() if row.date else None,
            studio=row.studio.name if row.studio else None,
        )

    def find_gallery(self, gallery_id: int) -> StoredGallery | None:
        row = self._session.get(Gallery, gallery_id)
        if row is None:
            return None
        return StoredGallery(
            id=row.id,
            checksum=row.checksum,
            path=row.path,
            title=row.title,
            url=row.url,
            date=row.date.isoformat() if row.date else None,
        )
