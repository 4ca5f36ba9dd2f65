"""Models for IIIFNotifications database tables."""

from src.models.db.base import Base
from src.models.db.manifest import Manifest
from src.models.db.notification import Notification

__all__ = ["Base", "Manifest", "Notification"]
