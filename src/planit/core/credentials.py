# src/planit/core/credentials.py

"""
Notion token handling.

The token comes from settings (env / .env) or from a small local file written by
`planit login`. Neither is read at import time.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class MissingTokenError(RuntimeError):
    """No Notion token configured anywhere."""


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        self._token = token

    def get_token(self) -> str:
        if not self._token or not self._token.strip():
            raise MissingTokenError("Notion token is empty.")
        return self._token.strip()


class FileTokenStore:
    """
    Token persisted in a local (gitignored) file.

    Written atomically via a temp file; permissions are tightened to 0600 best-effort.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            raise ValueError("Refusing to save an empty token.")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(token + "\n", "utf-8")
        with contextlib.suppress(Exception):
            os.chmod(tmp, 0o600)
        os.replace(tmp, self._path)
        logger.info("Saved Notion token to %s", self._path)

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            token = self._path.read_text("utf-8").strip()
        except OSError:
            logger.exception("Failed to read token file %s", self._path)
            return None
        return token or None

    def delete(self) -> bool:
        """Returns True if a token file was removed."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted Notion token file %s", self._path)
        return True


class SettingsTokenProvider:
    """Token from settings first (PLANIT_NOTION_TOKEN / NOTION_API_KEY), then the token store."""

    def __init__(self, settings, store: FileTokenStore | None = None) -> None:
        self._settings = settings
        self._store = store

    def get_token(self) -> str:
        token = getattr(self._settings, "notion_token", None)
        if token and str(token).strip():
            return str(token).strip()

        if self._store is not None:
            stored = self._store.load()
            if stored:
                return stored

        raise MissingTokenError(
            "Notion token is not set. Set PLANIT_NOTION_TOKEN in your .env or run `planit login <token>`."
        )
