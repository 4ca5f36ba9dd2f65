"""Notification Database Model."""

import secrets
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.db.base import Base, utcnow

__all__ = ["Notification", "new_object_id"]


def new_object_id() -> str:
    """Generate a 24 character hexadecimal public identifier."""
    return secrets.token_hex(12)


class Notification(Base):
    """A received notification, stored exactly as submitted plus `received`.

    `id` orders records by insertion; `object_id` is the identifier exposed in
    URLs.
    """

    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    object_id: Mapped[str] = mapped_column(
        String(24), unique=True, index=True, default=new_object_id
    )
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
