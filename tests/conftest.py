# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from planit.core.credentials import FileTokenStore
from planit.core.state import AppState

from .fakes import FakeRecordSource


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the Notion client.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="planit",
        log_level="INFO",
        data_dir=tmp_path,
        token_path=tmp_path / "notion_token",
        notion_token=None,
        notion_database_id="db-main",
        notion_base_url="https://api.notion.test/v1",
        notion_api_version="2022-06-28",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
    )


@pytest.fixture()
def source() -> FakeRecordSource:
    return FakeRecordSource()


@pytest.fixture()
def state(settings: SimpleNamespace, source: FakeRecordSource) -> AppState:
    """AppState wired with an in-memory record source and a tmp token file."""
    return AppState(
        settings=settings,
        source=source,
        token_store=FileTokenStore(settings.token_path),
    )
