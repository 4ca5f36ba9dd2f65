"""Notification schemas: stored record views and the LDP listing container."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.notifications import normalize_targets

__all__ = [
    "LDP_CONTEXT",
    "ListingEntry",
    "NotificationContainer",
    "StoredNotification",
]

LDP_CONTEXT = "http://www.w3.org/ns/ldp"


@dataclass(frozen=True)
class StoredNotification:
    """Typed accessors over a stored notification document.

    The document is kept as submitted; defaults such as the motivation
    fallback are applied when rendering, never here.
    """

    object_id: str
    document: dict[str, Any] = field(default_factory=dict)

    @property
    def at_id(self) -> str | None:
        """The `@id` of the manifest this notification folds payloads into."""
        value = self.document.get("@id")
        return value if isinstance(value, str) and value else None

    @property
    def target(self) -> Any:
        """The raw `target`, a URI or a list of URIs."""
        return self.document.get("target")

    @property
    def targets(self) -> list[Any]:
        """The `target` as a list, one element for a scalar."""
        return normalize_targets(self.target)

    @property
    def motivation(self) -> Any:
        """The stored `motivation`, without the listing default."""
        return self.document.get("motivation")

    @property
    def source(self) -> Any:
        """The stored `source`."""
        return self.document.get("source")

    @property
    def updated(self) -> Any:
        """The client-supplied `updated` value."""
        return self.document.get("updated")

    @property
    def received(self) -> Any:
        """The server-side ingestion stamp."""
        return self.document.get("received")

    def matches_target(self, value: str) -> bool:
        """Exact match on `target`, or on any element when `target` is a list."""
        target = self.target
        if isinstance(target, list):
            return value in target
        return target == value


class ListingEntry(BaseModel):
    """One entry of the notification listing.

    Optional fields are None when the stored value is missing and are dropped
    from the serialized JSON.
    """

    url: str
    motivation: str
    updated: str | None = None
    source: str | None = None
    received: str | None = None


class NotificationContainer(BaseModel):
    """LDP container listing the received notifications."""

    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(default=LDP_CONTEXT, alias="@context")
    id: str = Field(alias="@id")
    contains: list[ListingEntry] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Serialize with JSON-LD keys and without absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
