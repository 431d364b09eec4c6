"""Pytest configuration providing stubbed archive endpoints and shared fixtures."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable

import httpx
import pytest

from archive_urls import logging_conf
from archive_urls.config import HarvestSettings
from archive_urls.engine import Fetcher

WAYBACK_HOST = "web.archive.org"
COMMONCRAWL_HOST = "index.commoncrawl.org"
VIRUSTOTAL_HOST = "www.virustotal.com"


class ArchiveStub:
    """Serve canned bodies per host and record every request received."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, host: str, body: str = "", status: int = 200) -> None:
        self.routes[host] = lambda request: httpx.Response(status, text=body, request=request)

    def route_error(self, host: str, exc: type[httpx.HTTPError] = httpx.ConnectError) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc("connection refused", request=request)

        self.routes[host] = _raise

    def route_handler(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[host] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            return httpx.Response(404, text="not stubbed", request=request)
        return handler(request)

    def hosts(self) -> list[str]:
        return [request.url.host for request in self.requests]


def cdx_body(rows: Iterable[list[str]], header: list[str] | None = None) -> str:
    header = header or ["urlkey", "timestamp", "original", "mimetype", "statuscode", "digest", "length"]
    return json.dumps([header, *rows])


def ndjson_body(items: Iterable[dict[str, Any]]) -> str:
    return "\n".join(json.dumps(item) for item in items) + "\n"


@pytest.fixture(autouse=True)
def _fresh_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # handlers bind to the current sys.stderr, which CliRunner swaps per invoke
    monkeypatch.setattr(logging_conf, "_LOGGING_INITIALISED", False)
    monkeypatch.delenv("VT_API_KEY", raising=False)
    monkeypatch.delenv("ARCHIVE_URLS_CONFIG", raising=False)


@pytest.fixture
def make_settings() -> Callable[..., HarvestSettings]:
    def _builder(**overrides: Any) -> HarvestSettings:
        base: dict[str, Any] = {"timeout": 5, "concurrency": 5}
        base.update(overrides)
        return HarvestSettings(**base)

    return _builder


@pytest.fixture(name="cdx_body")
def cdx_body_fixture() -> Callable[..., str]:
    return cdx_body


@pytest.fixture(name="ndjson_body")
def ndjson_body_fixture() -> Callable[..., str]:
    return ndjson_body


@pytest.fixture
def archive_stub() -> ArchiveStub:
    return ArchiveStub()


@pytest.fixture
def make_fetcher(archive_stub: ArchiveStub, make_settings) -> Iterable[Callable[..., Fetcher]]:
    created: list[Fetcher] = []

    def _builder(settings: HarvestSettings | None = None, **overrides: Any) -> Fetcher:
        fetcher = Fetcher(
            settings or make_settings(**overrides),
            transport=httpx.MockTransport(archive_stub),
        )
        created.append(fetcher)
        return fetcher

    yield _builder
    for fetcher in created:
        fetcher.close()
