"""Web application state.

The state is built once by `create_app` from the injected database and stored on
`app.state`; route handlers receive it through the `get_app_state` dependency.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from src.core.aggregator import Fetcher, NotificationAggregator
from src.core.fetcher import PayloadFetcher
from src.core.merger import ManifestMerger
from src.web.services.manifest_service import ManifestService
from src.web.services.notification_service import NotificationService

__all__ = ["AppState", "get_app_state"]

if TYPE_CHECKING:
    from src.config.database import NotificationsDB
    from src.config.settings import IIIFNotificationsConfig


class AppState:
    """Container for the long-lived services used by the route handlers."""

    def __init__(
        self,
        db: NotificationsDB,
        config: IIIFNotificationsConfig,
        fetcher: Fetcher | None = None,
    ) -> None:
        """Build the services around a database and configuration.

        Args:
            db (NotificationsDB): Database manager shared by every service.
            config (IIIFNotificationsConfig): Application configuration.
            fetcher (Fetcher | None): Payload fetcher, defaults to a
                `PayloadFetcher` using `config.fetch`.
        """
        self.db = db
        self.manifests_path: Path = config.manifests_path
        self.manifests = ManifestService(db, config.manifest_base_url)
        self.notifications = NotificationService(db)
        self.fetcher: Fetcher = fetcher or PayloadFetcher(
            timeout=config.fetch.timeout,
            max_concurrency=config.fetch.max_concurrency,
            user_agent=config.fetch.user_agent,
        )
        self.merger = ManifestMerger(self.manifests)
        self.aggregator = NotificationAggregator(
            self.notifications, self.fetcher, self.merger
        )
        self.on_shutdown_callbacks: list[Callable[[], Any]] = []
        self.started_at: datetime = datetime.now(UTC)

    def add_shutdown_callback(self, cb: Callable[[], Any]) -> None:
        """Register a callback executed during app shutdown.

        Args:
            cb (Callable[[], Any]): Callback, sync or async.
        """
        self.on_shutdown_callbacks.append(cb)

    async def shutdown(self) -> None:
        """Run registered shutdown callbacks, ignoring individual errors."""
        for cb in self.on_shutdown_callbacks:
            with suppress(Exception):
                res = cb()
                if hasattr(res, "__await__"):
                    await res


def get_app_state(request: Request) -> AppState:
    """FastAPI dependency returning the state of the serving application."""
    return request.app.state.app_state
