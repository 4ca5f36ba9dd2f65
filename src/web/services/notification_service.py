"""Service for storing and reading received notifications."""

from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from src import log
from src.config.database import NotificationsDB
from src.core.notifications import parse_object_id
from src.exceptions import DatabaseError, InvalidNotificationPayloadError
from src.models.db.notification import Notification, new_object_id
from src.models.schemas.notification import StoredNotification

__all__ = ["RECEIVED_FORMAT", "NotificationService", "received_timestamp"]

RECEIVED_FORMAT = "%d-%m-%Y %H:%M:%S %Z"


def received_timestamp(now: datetime | None = None) -> str:
    """Format the ingestion time stored in a notification's `received` field.

    Args:
        now (datetime | None): Time to format, defaults to the local time.

    Returns:
        str: Timestamp such as `19-10-2026 14:05:09 UTC`.
    """
    now = now or datetime.now().astimezone()
    return now.strftime(RECEIVED_FORMAT).strip()


class NotificationService:
    """Notification store with identifier parsing and target filtering."""

    def __init__(self, db: NotificationsDB) -> None:
        """Bind the service to a database manager."""
        self.db = db

    def create_notification(
        self, payload: Any, received_at: datetime | None = None
    ) -> str:
        """Store a submitted notification and stamp its `received` time.

        A client-supplied `received` value is overwritten.

        Args:
            payload (Any): Parsed request body.
            received_at (datetime | None): Override for the ingestion time.

        Returns:
            str: The new notification's identifier.

        Raises:
            InvalidNotificationPayloadError: If the payload is not a JSON object.
            DatabaseError: If the record cannot be written.
        """
        if not isinstance(payload, dict):
            raise InvalidNotificationPayloadError(
                "Notification body must be a JSON object"
            )

        document = dict(payload)
        document["received"] = received_timestamp(received_at)
        notification = Notification(
            object_id=new_object_id(),
            document=document,
        )

        try:
            with self.db() as ctx:
                ctx.session.add(notification)
                ctx.session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to store notification") from e

        log.info(
            f"Received notification $$'{notification.object_id}'$$ for target "
            f"$$'{document.get('target')}'$$"
        )
        return notification.object_id

    def list_notifications(
        self, target: str | None = None
    ) -> list[StoredNotification]:
        """Return stored notifications in insertion order.

        Args:
            target (str | None): When given, keep only notifications whose
                `target` equals it, or whose `target` list contains it.

        Returns:
            list[StoredNotification]: Matching notifications.
        """
        with self.db() as ctx:
            rows = ctx.session.query(Notification).order_by(Notification.id).all()
            notifications = [
                StoredNotification(object_id=row.object_id, document=dict(row.document))
                for row in rows
            ]

        if target is None:
            return notifications
        return [n for n in notifications if n.matches_target(target)]

    def get_notification(self, identifier: str) -> dict[str, Any]:
        """Return the stored document, or an empty dict for unknown identifiers."""
        object_id = parse_object_id(identifier)
        if object_id is None:
            return {}

        with self.db() as ctx:
            row = (
                ctx.session.query(Notification)
                .filter(Notification.object_id == object_id)
                .first()
            )
            return dict(row.document) if row else {}

    def delete_notification(self, identifier: str) -> bool:
        """Delete a notification; unknown or malformed identifiers are a no-op.

        Returns:
            bool: True if a record was deleted.
        """
        object_id = parse_object_id(identifier)
        if object_id is None:
            return False

        with self.db() as ctx:
            deleted = (
                ctx.session.query(Notification)
                .filter(Notification.object_id == object_id)
                .delete()
            )
            ctx.session.commit()

        if deleted:
            log.info(f"Deleted notification $$'{object_id}'$$")
        return bool(deleted)
