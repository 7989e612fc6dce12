# src/planit/notion/client.py

"""
Minimal async Notion API client.

Only the three calls the app needs: query a database, flip a page's
"Checkbox", list databases shared with the integration. No pagination and no
retries: one request per call, failures surface as NotionAPIError.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from ..core.ports import TokenProvider

logger = logging.getLogger(__name__)

_SNIPPET_CHARS = 500


class NotionAPIError(RuntimeError):
    """Transport failure, non-success status or unparsable body from Notion."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _make_timeout(settings) -> httpx.Timeout:
    connect_s = float(getattr(settings, "http_connect_timeout", 5.0))
    read_s = float(getattr(settings, "http_read_timeout", 20.0))
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


class NotionClient:
    """
    Implements core.ports.RecordSource over httpx.

    `http_client` is optional; pass one (e.g. with httpx.MockTransport) to control
    transport. Otherwise a short-lived AsyncClient is created per request.
    """

    def __init__(
        self,
        settings,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._tokens = token_provider
        self._http = http_client
        self._base_url = str(getattr(settings, "notion_base_url", "https://api.notion.com/v1")).rstrip("/")
        self._version = str(getattr(settings, "notion_api_version", "2022-06-28"))

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._tokens.get_token()}",
            "Notion-Version": self._version,
            "Content-Type": "application/json",
        }

    async def _send(self, method: str, path: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = self._headers()
        logger.debug("Notion %s %s", method, url)
        try:
            if self._http is not None:
                return await self._http.request(method, url, headers=headers, json=payload)
            async with httpx.AsyncClient(timeout=_make_timeout(self._settings)) as client:
                return await client.request(method, url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.info("Notion %s %s failed: %s", method, url, e.__class__.__name__)
            raise NotionAPIError(str(e) or e.__class__.__name__) from e

    async def _request(self, method: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        res = await self._send(method, path, payload)
        body_text = res.text

        if not res.is_success:
            logger.info("Notion %s %s -> HTTP %s", method, path, res.status_code)
            raise NotionAPIError(f"Notion API Error: {body_text}", status_code=res.status_code)

        try:
            data = json.loads(body_text) if body_text else {}
        except ValueError as e:
            snippet = body_text[:_SNIPPET_CHARS]
            raise NotionAPIError(f"JSON Parse Error: {e}. Snippet: {snippet}", status_code=res.status_code) from e

        if not isinstance(data, dict):
            snippet = body_text[:_SNIPPET_CHARS]
            raise NotionAPIError(
                f"JSON Parse Error: expected an object. Snippet: {snippet}", status_code=res.status_code
            )
        return data

    @staticmethod
    def _results(data: dict[str, Any]) -> list[dict[str, Any]]:
        results = data.get("results")
        if not isinstance(results, list):
            raise NotionAPIError("JSON Parse Error: missing field `results`.")
        return [r for r in results if isinstance(r, dict)]

    async def query_database(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """POST /databases/{id}/query; returns the first page of results."""
        payload: dict[str, Any] = {}
        if filter is not None:
            payload["filter"] = filter
        data = await self._request("POST", f"databases/{database_id}/query", payload)
        pages = self._results(data)
        if data.get("has_more"):
            logger.debug("Database %s has more results; only the first page is used.", database_id)
        logger.info("Fetched %d pages from database %s", len(pages), database_id)
        return pages

    async def update_checkbox(self, page_id: str, checked: bool) -> None:
        payload = {"properties": {"Checkbox": {"checkbox": bool(checked)}}}
        await self._request("PATCH", f"pages/{page_id}", payload)
        logger.info("Set Checkbox=%s on page %s", bool(checked), page_id)

    async def search_databases(self, page_size: int = 100) -> list[dict[str, Any]]:
        payload = {
            "filter": {"value": "database", "property": "object"},
            "page_size": int(page_size),
        }
        data = await self._request("POST", "search", payload)
        return self._results(data)
