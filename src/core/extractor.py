"""Payload extraction by declared payload type."""

from dataclasses import dataclass
from typing import Any

from src.core.notifications import RANGE_TYPE

__all__ = ["ExtractedPayload", "extract_payload", "label_for_payload"]

# Manifest attribute each payload type is folded into
_PAYLOAD_LABELS: dict[str, str] = {RANGE_TYPE: "structures"}


@dataclass(frozen=True)
class ExtractedPayload:
    """The manifest attribute to replace and the data to replace it with.

    `label` is None for payload types that have no manifest attribute, in
    which case merging is a no-op.
    """

    label: str | None
    data: Any


def label_for_payload(payload_type: str) -> str | None:
    """Return the manifest attribute for a payload type, if it has one."""
    return _PAYLOAD_LABELS.get(payload_type)


def extract_payload(document: Any, payload_type: str) -> ExtractedPayload:
    """Select the part of a remote document that belongs in the manifest.

    `sc:Range` payloads contribute their `ranges` array as `structures`; a
    missing `ranges` key yields None data. Any other type returns the whole
    document with no label.

    Args:
        document (Any): Parsed JSON payload.
        payload_type (str): Declared type of the payload.

    Returns:
        ExtractedPayload: Label and data for the merge step.
    """
    if payload_type == RANGE_TYPE:
        ranges = document.get("ranges") if isinstance(document, dict) else None
        return ExtractedPayload(label=label_for_payload(payload_type), data=ranges)
    return ExtractedPayload(label=None, data=document)
