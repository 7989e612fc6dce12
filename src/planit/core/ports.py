# src/planit/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task API.

Credentials and the Notion transport are injected as Protocols, so the
decoder/assembler stay pure and the task API can be tested with fakes.
"""

from typing import Any, Awaitable, Protocol


class TokenProvider(Protocol):
    """Returns the Notion integration token (raises if none is configured)."""

    def get_token(self) -> str: ...


class RecordSource(Protocol):
    """
    Where task pages come from and where completion is written back.

    Implemented by notion.client.NotionClient; return values are raw Notion
    objects (dicts), decoding happens in the task API.
    """

    def query_database(
            self,
            database_id: str,
            filter: dict[str, Any] | None = None,
    ) -> Awaitable[list[dict[str, Any]]]: ...

    def update_checkbox(self, page_id: str, checked: bool) -> Awaitable[None]: ...

    def search_databases(self, page_size: int = 100) -> Awaitable[list[dict[str, Any]]]: ...
