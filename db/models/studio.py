"""
db/models/studio.py

Studio model, referenced by scenes for query URL construction.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.scene import Scene


class Studio(Base, TimestampMixin):
    __tablename__ = "studios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    scenes: Mapped[list["Scene"]] = relationship("Scene", back_populates="studio")
