"""Manifest merger: folds extracted payload data into stored manifests."""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import TYPE_CHECKING, Any

__all__ = ["ManifestMerger"]

if TYPE_CHECKING:
    from src.web.services.manifest_service import ManifestService


class ManifestMerger:
    """Replace a manifest attribute with extracted payload data.

    Writers targeting the same manifest are serialized with a lock keyed by
    `@id`; the blocking store update runs in a worker thread so other requests
    keep being served meanwhile. A lock only lives while some merge holds or
    waits for it.
    """

    def __init__(self, manifests: ManifestService) -> None:
        """Bind the merger to the manifest store.

        Args:
            manifests (ManifestService): Store used for the find-and-update.
        """
        self.manifests = manifests
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: Counter[str] = Counter()

    async def merge(self, at_id: str | None, label: str | None, data: Any) -> bool:
        """Replace `label` on the manifest whose `@id` is `at_id` with `data`.

        Args:
            at_id (str | None): Canonical id of the manifest to update.
            label (str | None): Attribute to replace; nothing happens without one.
            data (Any): New attribute value.

        Returns:
            bool: True if a manifest was matched and holds `data` afterwards.
        """
        if not label or not at_id:
            return False

        lock = self._locks.setdefault(at_id, asyncio.Lock())
        self._users[at_id] += 1
        try:
            async with lock:
                return await asyncio.to_thread(
                    self.manifests.replace_attribute, at_id, label, data
                )
        finally:
            self._users[at_id] -= 1
            if not self._users[at_id]:
                del self._users[at_id]
                del self._locks[at_id]
