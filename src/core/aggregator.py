"""Aggregation view builder for the notification listing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from sqlalchemy.exc import SQLAlchemyError

from src import log
from src.core.extractor import extract_payload, label_for_payload
from src.core.fetcher import FetchResult
from src.core.notifications import (
    RANGE_TYPE,
    as_text,
    is_missing,
    notification_value,
)
from src.exceptions import IIIFNotificationsError
from src.models.schemas.notification import (
    ListingEntry,
    NotificationContainer,
    StoredNotification,
)

__all__ = ["NotificationAggregator"]

if TYPE_CHECKING:
    from collections.abc import Sequence

    from src.core.merger import ManifestMerger
    from src.web.services.notification_service import NotificationService


class Fetcher(Protocol):
    """Anything that can fetch a batch of target URIs."""

    async def fetch_all(self, uris: Sequence[str]) -> list[FetchResult]: ...


def _target_uri(target: object) -> str | None:
    if not isinstance(target, str) or is_missing(target.strip()):
        return None
    return target.strip()


class NotificationAggregator:
    """Build the LDP listing and fold each notification's payloads into manifests.

    Merging is recomputed on every listing. Targets are fetched concurrently,
    then folded strictly in store order and, within a notification, in `target`
    order, so the manifest ends up as if every target were processed one after
    the other. A failing target is logged and skipped; it never affects other
    targets or the listing itself.
    """

    def __init__(
        self,
        notifications: NotificationService,
        fetcher: Fetcher,
        merger: ManifestMerger,
        payload_type: str = RANGE_TYPE,
    ) -> None:
        """Wire the aggregator to its collaborators.

        Args:
            notifications (NotificationService): Notification store.
            fetcher (Fetcher): Remote payload fetcher.
            merger (ManifestMerger): Manifest merger.
            payload_type (str): Type every payload is extracted as.
        """
        self.notifications = notifications
        self.fetcher = fetcher
        self.merger = merger
        self.payload_type = payload_type

    async def build_container(
        self, this_uri: str, target: str | None = None
    ) -> NotificationContainer:
        """Merge remote payloads and list the notifications.

        Args:
            this_uri (str): Absolute URI of the listing endpoint, no trailing slash.
            target (str | None): Optional exact-match filter on `target`.

        Returns:
            NotificationContainer: One entry per listed notification.
        """
        notifications = self.notifications.list_notifications(target)

        uris = list(
            dict.fromkeys(
                uri
                for notification in notifications
                for uri in map(_target_uri, notification.targets)
                if uri is not None
            )
        )
        results = dict(zip(uris, await self.fetcher.fetch_all(uris), strict=True))

        for notification in notifications:
            await self._fold(notification, results)

        return NotificationContainer(
            id=this_uri,
            contains=[self.build_entry(this_uri, n) for n in notifications],
        )

    async def _fold(
        self, notification: StoredNotification, results: dict[str, FetchResult]
    ) -> None:
        for target in notification.targets:
            uri = _target_uri(target)
            if uri is None:
                log.warning(
                    f"Missing target value in notification "
                    f"$$'{notification.object_id}'$$"
                )
                continue

            result = results[uri]
            extracted = (
                extract_payload(result.document, self.payload_type)
                if result.ok
                else None
            )
            if extracted is None or extracted.data is None:
                log.warning(
                    f"Nothing in $$'{uri}'$$ payload returned for "
                    f"{label_for_payload(self.payload_type) or 'payload'} "
                    f"{self.payload_type}, skipping update "
                    f"$${{status: {result.status}, reason: {result.reason}}}$$"
                )
                continue

            try:
                merged = await self.merger.merge(
                    notification.at_id, extracted.label, extracted.data
                )
            except (SQLAlchemyError, IIIFNotificationsError):
                log.error(
                    f"Failed to merge $$'{uri}'$$ into manifest "
                    f"$$'{notification.at_id}'$$",
                    exc_info=True,
                )
                continue

            if merged:
                log.debug(
                    f"Merged {extracted.label} from $$'{uri}'$$ into manifest "
                    f"$$'{notification.at_id}'$$"
                )

    @staticmethod
    def build_entry(this_uri: str, notification: StoredNotification) -> ListingEntry:
        """Render a notification as a listing entry.

        `motivation` falls back to the default; `updated`, `source` and
        `received` are left out when missing or empty.
        """
        optional = {
            name: as_text(value)
            for name in ("updated", "source", "received")
            if not is_missing(value := getattr(notification, name))
        }
        return ListingEntry(
            url=f"{this_uri}/{notification.object_id}",
            motivation=as_text(
                notification_value(notification.motivation, "motivation")
            ),
            **optional,
        )
