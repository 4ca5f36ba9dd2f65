"""Tests for the remote payload fetcher against a local HTTP server."""

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from src.core.fetcher import FetchStatus, PayloadFetcher


def _make_app() -> web.Application:
    async def ranges(request: web.Request) -> web.Response:
        return web.json_response({"ranges": [{"@id": "r1"}]})

    async def empty(request: web.Request) -> web.Response:
        return web.Response(body=b"")

    async def blank(request: web.Request) -> web.Response:
        return web.Response(text="  \n", content_type="application/json")

    async def invalid(request: web.Request) -> web.Response:
        return web.Response(text="{not json", content_type="application/json")

    async def constants(request: web.Request) -> web.Response:
        body = {
            "nan": '{"ranges": [{"@id": "r1", "x": NaN}]}',
            "infinity": '{"ranges": [-Infinity]}',
            "overflow": '{"ranges": [1e999]}',
        }[request.match_info["name"]]
        return web.Response(text=body, content_type="application/json")

    async def missing(request: web.Request) -> web.Response:
        raise web.HTTPNotFound()

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(2)
        return web.json_response({})

    async def agent(request: web.Request) -> web.Response:
        return web.json_response({"agent": request.headers.get("User-Agent")})

    app = web.Application()
    app.router.add_get("/ranges", ranges)
    app.router.add_get("/empty", empty)
    app.router.add_get("/blank", blank)
    app.router.add_get("/invalid", invalid)
    app.router.add_get("/constants/{name}", constants)
    app.router.add_get("/missing", missing)
    app.router.add_get("/slow", slow)
    app.router.add_get("/agent", agent)
    return app


@pytest_asyncio.fixture
async def payload_server() -> AsyncIterator[TestServer]:
    """Run a local server exposing canned payload responses."""
    server = TestServer(_make_app())
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def _url(server: TestServer, path: str) -> str:
    return str(server.make_url(path))


@pytest.mark.asyncio
async def test_fetch_parses_json(payload_server: TestServer) -> None:
    """A JSON body is returned as an OK result."""
    result = await PayloadFetcher().fetch(_url(payload_server, "/ranges"))

    assert result.ok
    assert result.status is FetchStatus.OK
    assert result.document == {"ranges": [{"@id": "r1"}]}


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/empty", "/blank"])
async def test_fetch_empty_body_is_not_an_error(
    payload_server: TestServer, path: str
) -> None:
    """Empty and whitespace-only bodies are reported as empty payloads."""
    result = await PayloadFetcher().fetch(_url(payload_server, path))

    assert result.status is FetchStatus.EMPTY
    assert result.document is None


@pytest.mark.asyncio
async def test_fetch_invalid_json(payload_server: TestServer) -> None:
    """Malformed JSON is reported without raising."""
    result = await PayloadFetcher().fetch(_url(payload_server, "/invalid"))

    assert result.status is FetchStatus.INVALID
    assert result.reason and "invalid JSON" in result.reason


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["nan", "infinity", "overflow"])
async def test_fetch_rejects_non_standard_constants(
    payload_server: TestServer, name: str
) -> None:
    """NaN, Infinity and overflowing numbers make a payload invalid."""
    result = await PayloadFetcher().fetch(_url(payload_server, f"/constants/{name}"))

    assert result.status is FetchStatus.INVALID
    assert result.document is None


@pytest.mark.asyncio
async def test_fetch_error_status_fails(payload_server: TestServer) -> None:
    """Non-2xx responses count as failed fetches."""
    result = await PayloadFetcher().fetch(_url(payload_server, "/missing"))

    assert result.status is FetchStatus.FAILED
    assert result.reason == "HTTP 404"


@pytest.mark.asyncio
async def test_fetch_times_out(payload_server: TestServer) -> None:
    """A slow target fails once the total timeout elapses."""
    result = await PayloadFetcher(timeout=0.2).fetch(_url(payload_server, "/slow"))

    assert result.status is FetchStatus.FAILED
    assert result.reason and "timed out" in result.reason


@pytest.mark.asyncio
async def test_fetch_unreachable_host_fails() -> None:
    """Transport errors are converted into failed results."""
    result = await PayloadFetcher(timeout=2).fetch("http://127.0.0.1:1/payload")

    assert result.status is FetchStatus.FAILED
    assert result.reason


@pytest.mark.asyncio
async def test_fetch_invalid_uri_fails() -> None:
    """A target that is not a URL fails instead of raising."""
    result = await PayloadFetcher().fetch("not a url")

    assert result.status is FetchStatus.FAILED


@pytest.mark.asyncio
async def test_fetch_all_keeps_input_order(payload_server: TestServer) -> None:
    """Batch results line up with the requested URIs."""
    uris = [
        _url(payload_server, "/missing"),
        _url(payload_server, "/ranges"),
        _url(payload_server, "/empty"),
    ]

    results = await PayloadFetcher(max_concurrency=1).fetch_all(uris)

    assert [r.uri for r in results] == uris
    assert [r.status for r in results] == [
        FetchStatus.FAILED,
        FetchStatus.OK,
        FetchStatus.EMPTY,
    ]


@pytest.mark.asyncio
async def test_fetch_all_without_uris() -> None:
    """An empty batch opens no session and returns nothing."""
    assert await PayloadFetcher().fetch_all([]) == []


@pytest.mark.asyncio
async def test_fetch_sends_user_agent(payload_server: TestServer) -> None:
    """The configured User-Agent is sent with every request."""
    result = await PayloadFetcher(user_agent="tests/1.0").fetch(
        _url(payload_server, "/agent")
    )

    assert result.document == {"agent": "tests/1.0"}


def test_fetcher_rejects_invalid_limits() -> None:
    """Timeout and concurrency must be positive."""
    with pytest.raises(ValueError):
        PayloadFetcher(timeout=0)
    with pytest.raises(ValueError):
        PayloadFetcher(max_concurrency=0)
