# src/planit/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the token store, token provider and Notion client into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.credentials import FileTokenStore, SettingsTokenProvider
from ..core.state import AppState
from ..notion.client import NotionClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.token_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). No token is required here;
    it is resolved lazily on the first Notion request.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = FileTokenStore(settings.token_path)
    client = NotionClient(settings, SettingsTokenProvider(settings, store))

    logger.debug("State ready (data_dir=%s, api_version=%s)", settings.data_dir, settings.notion_api_version)
    return AppState(settings=settings, source=client, token_store=store)
