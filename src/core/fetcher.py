"""Remote payload fetcher for notification targets."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import aiohttp

from src import __version__, log
from src.core.notifications import loads_json

__all__ = ["FetchResult", "FetchStatus", "PayloadFetcher"]


class FetchStatus(StrEnum):
    """Outcome of reading one target URI."""

    OK = "ok"  # Body parsed as JSON
    EMPTY = "empty"  # Request succeeded but the body was empty
    FAILED = "failed"  # Transport error, timeout or non-2xx status
    INVALID = "invalid"  # Body is not valid JSON


@dataclass(frozen=True)
class FetchResult:
    """Result of fetching a target URI; only `OK` results carry a document."""

    uri: str
    status: FetchStatus
    document: Any = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the body was fetched and parsed as JSON."""
        return self.status is FetchStatus.OK


class PayloadFetcher:
    """Fetch JSON payloads from notification targets over plain HTTP GET.

    Every fetch is bounded by a total timeout and no request is retried. A
    client session is opened per batch so the fetcher carries no state between
    listing requests.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_concurrency: int = 8,
        user_agent: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout (float): Total seconds allowed for a single fetch.
            max_concurrency (int): Maximum simultaneous requests in one batch.
            user_agent (str | None): User-Agent header, defaults to the app name.
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self.user_agent = user_agent or f"IIIFNotifications/{__version__}"

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def fetch(self, uri: str) -> FetchResult:
        """Fetch a single target.

        Args:
            uri (str): Target URI to read.

        Returns:
            FetchResult: The outcome; errors are reported, never raised.
        """
        results = await self.fetch_all([uri])
        return results[0]

    async def fetch_all(self, uris: Sequence[str]) -> list[FetchResult]:
        """Fetch several targets concurrently.

        Args:
            uris (Sequence[str]): Target URIs to read.

        Returns:
            list[FetchResult]: One result per URI, in the order given.
        """
        if not uris:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with self._new_session() as session:

            async def bounded(uri: str) -> FetchResult:
                async with semaphore:
                    return await self._fetch_one(session, uri)

            return list(await asyncio.gather(*(bounded(uri) for uri in uris)))

    async def _fetch_one(
        self, session: aiohttp.ClientSession, uri: str
    ) -> FetchResult:
        try:
            async with session.get(uri) as response:
                if response.status >= 400:
                    return FetchResult(
                        uri, FetchStatus.FAILED, reason=f"HTTP {response.status}"
                    )
                body = await response.read()
        except TimeoutError:
            return FetchResult(
                uri, FetchStatus.FAILED, reason=f"timed out after {self.timeout}s"
            )
        except (aiohttp.ClientError, ValueError) as e:
            return FetchResult(
                uri, FetchStatus.FAILED, reason=str(e) or e.__class__.__name__
            )

        if not body.strip():
            return FetchResult(uri, FetchStatus.EMPTY, reason="empty response body")

        try:
            document = loads_json(body)
        except ValueError as e:
            return FetchResult(uri, FetchStatus.INVALID, reason=f"invalid JSON: {e}")

        log.debug(f"Fetched JSON payload from $$'{uri}'$$ ({len(body)} bytes)")
        return FetchResult(uri, FetchStatus.OK, document=document)
