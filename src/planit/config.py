# src/planit/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the token is only needed when talking to Notion).
- Generic NOTION_* names are accepted as fallbacks for the PLANIT_* ones.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "PLANIT"

DEFAULT_NOTION_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_API_VERSION = "2022-06-28"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    token_path: Path

    # ---- Notion ----
    notion_token: Optional[str]
    notion_database_id: Optional[str]
    notion_base_url: str
    notion_api_version: str

    # ---- HTTP ----
    http_connect_timeout: float
    http_read_timeout: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "planit") or "planit"
        # WARNING keeps command output on stdout free of log lines.
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/planit"))
        token_path = _env_path(_k("TOKEN_PATH"), data_dir / "notion_token")

        notion_token = _first_env(_k("NOTION_TOKEN"), "NOTION_API_KEY", "NOTION_TOKEN", default=None)
        notion_database_id = _first_env(_k("NOTION_DATABASE_ID"), "NOTION_DATABASE_ID", default=None)
        if notion_token is not None:
            notion_token = notion_token.strip()
        if notion_database_id is not None:
            notion_database_id = notion_database_id.strip()

        notion_base_url = _env(_k("NOTION_BASE_URL"), DEFAULT_NOTION_BASE_URL).rstrip("/")
        notion_api_version = _env(_k("NOTION_API_VERSION"), DEFAULT_NOTION_API_VERSION)

        http_connect_timeout = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)
        http_read_timeout = _env_float(_k("HTTP_READ_TIMEOUT_SECONDS"), 20.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            token_path=token_path,
            notion_token=notion_token,
            notion_database_id=notion_database_id,
            notion_base_url=notion_base_url or DEFAULT_NOTION_BASE_URL,
            notion_api_version=notion_api_version or DEFAULT_NOTION_API_VERSION,
            http_connect_timeout=http_connect_timeout,
            http_read_timeout=http_read_timeout,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
