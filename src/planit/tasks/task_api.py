# src/planit/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from ..core.ports import RecordSource
from .assembler import assemble_pages
from .task_models import (
    CHECKBOX_PROPERTY,
    DATE_PROPERTY,
    DEFAULT_DATABASE_TITLE,
    DatabaseInfo,
    Task,
)

logger = logging.getLogger(__name__)


def due_tasks_filter(today: date | str) -> dict[str, Any]:
    """Notion filter: unchecked tasks whose "Date" is today or earlier."""
    day = today.isoformat() if isinstance(today, date) else str(today)
    return {
        "and": [
            {"property": CHECKBOX_PROPERTY, "checkbox": {"equals": False}},
            {"property": DATE_PROPERTY, "date": {"on_or_before": day}},
        ]
    }


async def fetch_tasks(
    source: RecordSource,
    database_id: str,
    *,
    today: date | None = None,
) -> list[Task]:
    """
    Fetch open tasks due up to `today` (local date by default) and normalize them.
    Task order follows the order Notion returned the pages in.
    """
    day = today or date.today()
    pages = await source.query_database(database_id, filter=due_tasks_filter(day))
    tasks = assemble_pages(pages)
    logger.info("Assembled %d tasks from database %s (due <= %s)", len(tasks), database_id, day)
    return tasks


async def set_task_completed(source: RecordSource, page_id: str, completed: bool) -> None:
    await source.update_checkbox(page_id, completed)


def _database_title(db: Mapping[str, Any]) -> str:
    title = db.get("title")
    if isinstance(title, list):
        for frag in title:
            if isinstance(frag, Mapping) and isinstance(frag.get("plain_text"), str):
                return frag["plain_text"]
            break
    return DEFAULT_DATABASE_TITLE


async def list_databases(source: RecordSource) -> list[DatabaseInfo]:
    out: list[DatabaseInfo] = []
    for db in await source.search_databases():
        db_id = db.get("id")
        if not isinstance(db_id, str):
            continue
        out.append(DatabaseInfo(id=db_id, title=_database_title(db)))
    return out
