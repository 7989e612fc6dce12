# src/planit/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime, time
from enum import StrEnum
from types import MappingProxyType
from typing import Any

# Property names as they appear in the Notion task database.
TITLE_PROPERTY = "Task Name"
CHECKBOX_PROPERTY = "Checkbox"
DATE_PROPERTY = "Date"
OBJECTIVE_NAME_PROPERTY = "Objective Name"
OBJECTIVE_DEADLINE_PROPERTY = "Objective Deadline"

DEFAULT_TITLE = "Untitled"
DEFAULT_DATABASE_TITLE = "Untitled Database"

# Time-remaining thresholds for the countdown shown next to a date.
URGENT_HOURS = 3
HOURS_VIEW_LIMIT = 72
# A date without a time counts until the end of that (local) day.
END_OF_DAY = time(23, 59, 59)


class TaskStatus(StrEnum):
    """Display status derived from the "Checkbox" property."""

    DONE = "Done"
    TODO = "To Do"

    @classmethod
    def from_checkbox(cls, checked: bool | None) -> TaskStatus:
        return cls.DONE if checked is True else cls.TODO


@dataclass(frozen=True, slots=True)
class Record:
    """
    One page fetched from the task database.

    `properties` holds the raw, still-undecoded payloads keyed by property name.
    """

    id: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_page(cls, page: Any) -> Record:
        if not isinstance(page, Mapping):
            return cls(id="", properties=MappingProxyType({}))
        page_id = page.get("id")
        props = page.get("properties")
        return cls(
            id=page_id if isinstance(page_id, str) else "",
            properties=MappingProxyType(dict(props) if isinstance(props, Mapping) else {}),
        )


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    status: TaskStatus
    do_date: str | None = None
    objective_name: str | None = None
    objective_deadline: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = str(self.status)
        return data


@dataclass(frozen=True, slots=True)
class DatabaseInfo:
    id: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Urgency(StrEnum):
    NORMAL = "normal"
    URGENT = "urgent"
    OVERDUE = "overdue"


@dataclass(frozen=True, slots=True)
class TimeRemaining:
    text: str
    urgency: Urgency


NO_DEADLINE = TimeRemaining(text="", urgency=Urgency.NORMAL)


def _parse_target(date_str: str) -> datetime | None:
    try:
        if "T" in date_str:
            return datetime.fromisoformat(date_str)
        return datetime.combine(datetime.fromisoformat(date_str).date(), END_OF_DAY)
    except ValueError:
        return None


def time_remaining(date_str: str | None, now: datetime | None = None) -> TimeRemaining | None:
    """
    Countdown text for a task/objective date:
    - past            -> "overdue"
    - under 3 hours   -> "H:MM:SS" (urgent)
    - under 72 hours  -> "<n>h"
    - otherwise       -> "<n>d"

    Naive values are local time. Returns None for an unparsable date string.
    """
    if not date_str:
        return NO_DEADLINE

    target = _parse_target(date_str)
    if target is None:
        return None

    if now is None:
        now = datetime.now()
    # Compare like with like: aware vs aware, naive (local) vs naive.
    if target.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif target.tzinfo is None and now.tzinfo is not None:
        target = target.astimezone()

    diff_s = (target - now).total_seconds()
    if diff_s < 0:
        return TimeRemaining(text="overdue", urgency=Urgency.OVERDUE)

    total = int(diff_s)
    hours = total // 3600
    if hours < URGENT_HOURS:
        minutes = (total % 3600) // 60
        seconds = total % 60
        return TimeRemaining(text=f"{hours}:{minutes:02d}:{seconds:02d}", urgency=Urgency.URGENT)
    if hours < HOURS_VIEW_LIMIT:
        return TimeRemaining(text=f"{hours}h", urgency=Urgency.NORMAL)
    return TimeRemaining(text=f"{hours // 24}d", urgency=Urgency.NORMAL)
