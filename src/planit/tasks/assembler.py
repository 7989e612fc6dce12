# src/planit/tasks/assembler.py

"""
Record -> Task mapping.

Each field is derived independently and has an explicit default, so a page with
missing, renamed or oddly-typed properties still yields a complete Task.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..notion.properties import (
    CheckboxProperty,
    DateProperty,
    PropertyPayload,
    RollupProperty,
    TitleProperty,
    decode_property,
)
from ..notion.rollups import date_start, first_text, rollup_date, rollup_title
from .task_models import (
    CHECKBOX_PROPERTY,
    DATE_PROPERTY,
    DEFAULT_TITLE,
    OBJECTIVE_DEADLINE_PROPERTY,
    OBJECTIVE_NAME_PROPERTY,
    TITLE_PROPERTY,
    Record,
    Task,
    TaskStatus,
)

logger = logging.getLogger(__name__)


def _lookup(record: Record, name: str, expected: type) -> PropertyPayload | None:
    """Decode property `name`; None when absent."""
    props = record.properties if isinstance(record.properties, Mapping) else {}
    if name not in props:
        return None
    prop = decode_property(props[name])
    if not isinstance(prop, expected):
        logger.debug(
            "Record %s: property %r decoded as %s, expected %s",
            record.id,
            name,
            type(prop).__name__,
            expected.__name__,
        )
    return prop


def _title(record: Record) -> str:
    prop = _lookup(record, TITLE_PROPERTY, TitleProperty)
    if isinstance(prop, TitleProperty):
        text = first_text(prop.title)
        if text is not None:
            return text
    return DEFAULT_TITLE


def _status(record: Record) -> TaskStatus:
    prop = _lookup(record, CHECKBOX_PROPERTY, CheckboxProperty)
    if isinstance(prop, CheckboxProperty):
        return TaskStatus.from_checkbox(prop.checkbox)
    return TaskStatus.TODO


def _do_date(record: Record) -> str | None:
    prop = _lookup(record, DATE_PROPERTY, DateProperty)
    if isinstance(prop, DateProperty):
        return date_start(prop.date)
    return None


def _objective_name(record: Record) -> str | None:
    prop = _lookup(record, OBJECTIVE_NAME_PROPERTY, RollupProperty)
    if isinstance(prop, RollupProperty):
        return rollup_title(prop.rollup)
    return None


def _objective_deadline(record: Record) -> str | None:
    prop = _lookup(record, OBJECTIVE_DEADLINE_PROPERTY, RollupProperty)
    if isinstance(prop, RollupProperty):
        return rollup_date(prop.rollup)
    return None


def assemble(record: Record) -> Task:
    """Build the Task for one record. Never raises on bad property data."""
    return Task(
        id=record.id,
        title=_title(record),
        status=_status(record),
        do_date=_do_date(record),
        objective_name=_objective_name(record),
        objective_deadline=_objective_deadline(record),
    )


def assemble_all(records: Iterable[Record]) -> list[Task]:
    """Map records to tasks, keeping input order (no filtering)."""
    return [assemble(r) for r in records]


def assemble_pages(pages: Iterable[Any]) -> list[Task]:
    """Convenience: raw Notion page objects -> tasks."""
    return assemble_all(Record.from_page(p) for p in pages)
