from __future__ import annotations

import asyncio
import os
from datetime import UTC, datetime
from pathlib import Path

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from _support import conference_payload, make_conference
from pyconfsync import ConferenceDataManager, SyncConfig
from pyconfsync._transport import FileFetcher, HttpFetcher, Response, is_local_locator
from pyconfsync.state.outcome import SyncStatus
from pyconfsync.storage import MemoryStore

LAST_MODIFIED = "Wed, 01 Jan 2020 00:00:00 GMT"


def _app(calls: list[str]) -> web.Application:
    async def conferences(request: web.Request) -> web.Response:
        calls.append(request.headers.get("User-Agent", ""))
        return web.Response(
            body=conference_payload(make_conference()),
            content_type="application/json",
            headers={"Last-Modified": LAST_MODIFIED},
        )

    async def broken(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="maintenance", headers={"Last-Modified": LAST_MODIFIED})

    async def slow(_request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.Response(text="{}")

    app = web.Application()
    app.router.add_get("/conferences.json", conferences)
    app.router.add_get("/broken", broken)
    app.router.add_get("/slow", slow)
    return app


def test_response_header_lookup_is_case_insensitive() -> None:
    response = Response(headers={"last-MODIFIED": LAST_MODIFIED})

    assert response.header("Last-Modified") == LAST_MODIFIED
    assert response.header("etag") is None
    assert response.last_modified == datetime(2020, 1, 1, tzinfo=UTC)


def test_response_without_marker() -> None:
    assert Response(headers={"Last-Modified": "garbage"}).last_modified is None
    assert Response().last_modified is None


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("https://example.org/c.json", False),
        ("http://example.org/c.json", False),
        ("file:///data/c.json", True),
        ("/data/c.json", True),
        ("data/c.json", True),
        ("C:\\data\\c.json", True),
    ],
)
def test_is_local_locator(locator: str, expected: bool) -> None:
    assert is_local_locator(locator) is expected


@pytest.mark.asyncio
async def test_http_fetcher_returns_body_and_headers() -> None:
    calls: list[str] = []
    async with TestServer(_app(calls)) as server, aiohttp.ClientSession() as session:
        fetcher = HttpFetcher(session, timeout=5, user_agent="tests/1.0")
        response = await fetcher.fetch(str(server.make_url("/conferences.json")))

    assert response.error is None
    assert response.status == 200
    assert response.body == conference_payload(make_conference())
    assert response.last_modified == datetime(2020, 1, 1, tzinfo=UTC)
    assert calls == ["tests/1.0"]


@pytest.mark.asyncio
async def test_http_fetcher_reports_error_status() -> None:
    async with TestServer(_app([])) as server, aiohttp.ClientSession() as session:
        response = await HttpFetcher(session).fetch(str(server.make_url("/broken")))

    assert response.error is not None
    assert response.error.status_code == 503
    assert response.body is None
    assert response.last_modified == datetime(2020, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_http_fetcher_reports_timeout() -> None:
    async with TestServer(_app([])) as server, aiohttp.ClientSession() as session:
        response = await HttpFetcher(session, timeout=0.05).fetch(str(server.make_url("/slow")))

    assert response.error is not None
    assert response.body is None


@pytest.mark.asyncio
async def test_http_fetcher_reports_connection_error() -> None:
    async with aiohttp.ClientSession() as session:
        response = await HttpFetcher(session, timeout=2).fetch("http://127.0.0.1:9/conferences.json")

    assert response.error is not None
    assert response.status is None


@pytest.mark.asyncio
async def test_manager_syncs_over_http() -> None:
    async with TestServer(_app([])) as server:
        config = SyncConfig(source_url=str(server.make_url("/conferences.json")))
        store = MemoryStore()
        async with ConferenceDataManager(config, store=store) as manager:
            outcome = await manager.refresh()
            again = await manager.refresh(forced=True)

    assert outcome.status is SyncStatus.UPDATED
    # Forced refresh with an unchanged marker still reloads.
    assert again.status is SyncStatus.UPDATED
    assert store.load_sync_state().last_modified == datetime(2020, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_manager_does_not_close_external_session() -> None:
    async with aiohttp.ClientSession() as session:
        async with ConferenceDataManager(SyncConfig(source_url="https://example.org"), session=session):
            pass
        assert not session.closed


@pytest.mark.asyncio
async def test_file_fetcher_reads_path_and_file_url(tmp_path: Path) -> None:
    path = tmp_path / "conferences.json"
    path.write_bytes(conference_payload(make_conference()))
    os.utime(path, (1577836800, 1577836800))

    for locator in (str(path), path.as_uri()):
        response = await FileFetcher().fetch(locator)
        assert response.error is None
        assert response.body == path.read_bytes()
        assert response.last_modified == datetime(2020, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_file_fetcher_missing_file(tmp_path: Path) -> None:
    response = await FileFetcher().fetch(str(tmp_path / "missing.json"))

    assert response.error is not None
    assert response.body is None


@pytest.mark.asyncio
async def test_manager_syncs_bundled_file(tmp_path: Path) -> None:
    path = tmp_path / "conferences.json"
    path.write_bytes(conference_payload(make_conference(name="Bundled")))
    store_dir = tmp_path / "cache"
    config = SyncConfig(source_url=path.as_uri(), store_dir=str(store_dir))

    async with ConferenceDataManager(config) as manager:
        outcome = await manager.refresh()

    assert outcome.status is SyncStatus.UPDATED
    # A fresh manager serves the persisted dataset before any refresh.
    offline = ConferenceDataManager(SyncConfig(store_dir=str(store_dir)))
    conference = offline.current_conference()
    assert conference is not None and conference.info.name == "Bundled"
