# tests/test_notion_client.py

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest

from planit.core.credentials import MissingTokenError, SettingsTokenProvider, StaticTokenProvider
from planit.core.ports import TokenProvider
from planit.notion.client import NotionAPIError, NotionClient

from .fakes import page, title_prop


class Recorder:
    """httpx.MockTransport handler that captures requests and replays one response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@asynccontextmanager
async def _client(
    settings,
    recorder: Recorder,
    tokens: TokenProvider | None = None,
) -> AsyncIterator[NotionClient]:
    """NotionClient over a mock transport; the underlying AsyncClient is closed on exit."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as http:
        yield NotionClient(settings, tokens or StaticTokenProvider("secret_abc"), http_client=http)


@pytest.mark.asyncio
async def test_query_database_sends_headers_filter_and_returns_results(settings) -> None:
    pages = [page("p1", Task_Name=title_prop("T"))]
    rec = Recorder(httpx.Response(200, json={"object": "list", "results": pages, "has_more": False}))

    async with _client(settings, rec) as client:
        result = await client.query_database("db-1", filter={"property": "Checkbox", "checkbox": {"equals": False}})

    assert result == pages
    req = rec.requests[0]
    assert req.method == "POST"
    assert str(req.url) == "https://api.notion.test/v1/databases/db-1/query"
    assert req.headers["Authorization"] == "Bearer secret_abc"
    assert req.headers["Notion-Version"] == "2022-06-28"
    assert json.loads(req.content) == {"filter": {"property": "Checkbox", "checkbox": {"equals": False}}}


@pytest.mark.asyncio
async def test_update_checkbox_patches_page(settings) -> None:
    rec = Recorder(httpx.Response(200, json={"object": "page", "id": "p1"}))

    async with _client(settings, rec) as client:
        await client.update_checkbox("p1", True)

    req = rec.requests[0]
    assert req.method == "PATCH"
    assert str(req.url) == "https://api.notion.test/v1/pages/p1"
    assert json.loads(req.content) == {"properties": {"Checkbox": {"checkbox": True}}}


@pytest.mark.asyncio
async def test_search_databases_filters_on_object(settings) -> None:
    rec = Recorder(httpx.Response(200, json={"results": [{"object": "database", "id": "d1"}]}))

    async with _client(settings, rec) as client:
        assert await client.search_databases() == [{"object": "database", "id": "d1"}]

    body = json.loads(rec.requests[0].content)
    assert body == {"filter": {"value": "database", "property": "object"}, "page_size": 100}


@pytest.mark.asyncio
async def test_injected_http_client_is_closed_after_use(settings) -> None:
    rec = Recorder(httpx.Response(200, json={"results": []}))

    async with _client(settings, rec) as client:
        await client.query_database("db-1")
        http = client._http
        assert http is not None and not http.is_closed

    assert http.is_closed


@pytest.mark.asyncio
async def test_non_success_status_raises_with_body(settings) -> None:
    rec = Recorder(httpx.Response(401, text='{"code":"unauthorized"}'))

    async with _client(settings, rec) as client:
        with pytest.raises(NotionAPIError) as exc_info:
            await client.query_database("db-1")

    assert str(exc_info.value) == 'Notion API Error: {"code":"unauthorized"}'
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error_with_snippet(settings) -> None:
    body = "<html>" + "x" * 1000
    rec = Recorder(httpx.Response(200, text=body))

    async with _client(settings, rec) as client:
        with pytest.raises(NotionAPIError) as exc_info:
            await client.query_database("db-1")

    msg = str(exc_info.value)
    assert msg.startswith("JSON Parse Error: ")
    snippet = msg.split("Snippet: ", 1)[1]
    assert snippet == body[:500]


@pytest.mark.asyncio
async def test_missing_results_is_parse_error(settings) -> None:
    rec = Recorder(httpx.Response(200, json={"object": "error"}))

    async with _client(settings, rec) as client:
        with pytest.raises(NotionAPIError, match="results"):
            await client.query_database("db-1")


@pytest.mark.asyncio
async def test_transport_error_is_wrapped(settings) -> None:
    rec = Recorder(httpx.ConnectError("connection refused"))

    async with _client(settings, rec) as client:
        with pytest.raises(NotionAPIError, match="connection refused") as exc_info:
            await client.update_checkbox("p1", False)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_missing_token_fails_before_any_request(settings) -> None:
    rec = Recorder(httpx.Response(200, json={"results": []}))

    async with _client(settings, rec, tokens=SettingsTokenProvider(settings)) as client:
        with pytest.raises(MissingTokenError):
            await client.query_database("db-1")

    assert rec.requests == []
