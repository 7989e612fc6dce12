# src/planit/cli/commands.py

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import fetch_tasks, list_databases, set_task_completed
from ..tasks.task_models import NO_DEADLINE, Task, TaskStatus, TimeRemaining, Urgency, time_remaining

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry (/help, /tasks, ...). The CLI maps argv onto it."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Use help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _mask(token: str | None) -> str:
    if not token:
        return "not set"
    token = token.strip()
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}…{token[-4:]}"


def _countdown(date_str: str | None, now: datetime | None) -> TimeRemaining:
    # Unparsable dates show no countdown rather than failing the listing.
    return time_remaining(date_str, now) or NO_DEADLINE


def _countdowns(task: Task, now: datetime | None) -> tuple[TimeRemaining, TimeRemaining]:
    """(do date, objective deadline) countdowns; completed tasks have none."""
    if task.status == TaskStatus.DONE:
        return NO_DEADLINE, NO_DEADLINE
    return _countdown(task.do_date, now), _countdown(task.objective_deadline, now)


def task_view(task: Task, now: datetime | None = None) -> dict[str, object]:
    """Task.to_dict() plus the countdowns shown next to its dates."""
    do_left, objective_left = _countdowns(task, now)
    data = task.to_dict()
    data["do_date_remaining"] = do_left.text
    data["objective_deadline_remaining"] = objective_left.text
    data["urgency"] = str(do_left.urgency)
    return data


def format_task(task: Task, now: datetime | None = None) -> str:
    do_left, objective_left = _countdowns(task, now)
    marker = "! " if do_left.urgency == Urgency.URGENT else ""
    line = f"{marker}[{task.status}] {task.title}"
    if task.do_date:
        suffix = f", {do_left.text}" if do_left.text else ""
        line += f"  (do: {task.do_date}{suffix})"
    if task.objective_name or task.objective_deadline:
        objective = task.objective_name or "?"
        if task.objective_deadline:
            objective += f", deadline {task.objective_deadline}"
            if objective_left.text:
                objective += f" ({objective_left.text})"
        line += f"  -> {objective}"
    return f"{line}  id={task.id}"


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    env_token = getattr(settings, "notion_token", None)
    stored = state.token_store.load()
    if env_token:
        token_line = f"{_mask(env_token)} (from environment)"
    elif stored:
        token_line = f"{_mask(stored)} (from {state.token_store.path})"
    else:
        token_line = "not set"
    db = getattr(settings, "notion_database_id", None) or "not set"
    return (
        "Status:\n"
        f"  Token: {token_line}\n"
        f"  Database: {db}\n"
        f"  Notion API version: {getattr(settings, 'notion_api_version', '?')}"
    )


async def cmd_tasks(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    tasks                 -> tasks due today or earlier from the configured database
    tasks <database_id>   -> same, from another database
    tasks --json          -> machine-readable output
    """
    as_json = "--json" in args
    positional = [a for a in args if not a.startswith("--")]
    database_id = positional[0] if positional else getattr(state.settings, "notion_database_id", None)
    if not database_id:
        return "No database selected. Set PLANIT_NOTION_DATABASE_ID or pass one: tasks <database_id>."

    if emit is not None and not as_json:
        emit(f"Fetching tasks from {database_id}...")

    tasks = await fetch_tasks(state.source, database_id)

    if as_json:
        return json.dumps([task_view(t) for t in tasks], ensure_ascii=False, indent=2)
    if not tasks:
        return "Nothing due."
    return "\n".join(format_task(t) for t in tasks)


async def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    if not args:
        verb = "done" if completed else "undo"
        return f"Usage: {verb} <page_id>"
    page_id = args[0]
    await set_task_completed(state.source, page_id, completed)
    return f"Marked {page_id} as {'Done' if completed else 'To Do'}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, False)


async def cmd_databases(state: AppState, args: list[str]) -> str:
    dbs = await list_databases(state.source)
    if not dbs:
        return "No databases are shared with this integration."
    lines = ["Databases:"]
    for i, db in enumerate(dbs, start=1):
        lines.append(f"{i}. {db.title}  id={db.id}")
    return "\n".join(lines)


async def cmd_login(state: AppState, args: list[str]) -> str:
    if not args or not args[0].strip():
        return "Usage: login <notion_integration_token>"
    state.token_store.save(args[0])
    logger.debug("Token stored at %s", state.token_store.path)
    return f"Token saved to {state.token_store.path}."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.token_store.delete():
        return "Stored token removed."
    return "No stored token."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show configuration (token/database/API version).")
registry.register("tasks", cmd_tasks, help_text="List open tasks due today: tasks [database_id] [--json].")
registry.register("done", cmd_done, help_text="Mark a task as done: done <page_id>.")
registry.register("undo", cmd_undo, help_text="Mark a task as not done: undo <page_id>.")
registry.register("databases", cmd_databases, help_text="List databases shared with the integration.", aliases=["dbs"])
registry.register("login", cmd_login, help_text="Store a Notion token locally: login <token>.")
registry.register("logout", cmd_logout, help_text="Remove the locally stored token.")
