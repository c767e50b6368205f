"""
db/models/gallery.py

Gallery model: one stored image set (zip file or folder).
"""

import datetime

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Gallery(Base, TimestampMixin):
    __tablename__ = "galleries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    checksum: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    # Galleries created by hand have no backing path.
    path: Mapped[str | None] = mapped_column(String(4096), nullable=True)

    title: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
