"""
db/models/scene.py

Scene model: one stored video file and its descriptive metadata.
"""

import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.studio import Studio


class Scene(Base, TimestampMixin):
    """
    Stored scene.

    checksum/oshash identify the file contents; path is the location on disk
    and supplies the `{filename}` query URL parameter.
    """

    __tablename__ = "scenes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    path: Mapped[str] = mapped_column(String(4096), nullable=False, unique=True)

    checksum: Mapped[str | None] = mapped_column(String(64), nullable=True)

    oshash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    title: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)

    studio_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("studios.id", ondelete="SET NULL"),
        nullable=True,
    )

    studio: Mapped[Optional["Studio"]] = relationship("Studio", back_populates="scenes")

    __table_args__ = (
        Index("ix_scenes_checksum", "checksum"),
        Index("ix_scenes_oshash", "oshash"),
    )
