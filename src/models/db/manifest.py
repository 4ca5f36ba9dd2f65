"""Manifest Database Model."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.db.base import Base, utcnow

__all__ = ["Manifest"]


class Manifest(Base):
    """A stored IIIF manifest document keyed by its canonical `@id`.

    `document` holds the full JSON document, `@id` included. `id` is internal to
    the store and is never part of the document returned to clients.
    """

    __tablename__ = "manifest"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    at_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
