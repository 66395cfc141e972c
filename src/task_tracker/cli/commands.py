# src/task_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import cast

from ..core.state import AppState
from ..tasks.errors import TaskStoreSaveError, ValidationError
from ..tasks.task_models import Epic, Subtask, Task, TaskStatus, TaskType
from .printer import format_all, format_counts, format_history, format_prioritized, format_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store errors are turned into replies: a rejected mutation changes nothing,
        a failed save means the change is live in memory but not on disk.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValidationError as e:
            return f"Rejected: {e}"
        except TaskStoreSaveError as e:
            return f"Applied in memory, but saving failed: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


class UsageError(ValueError):
    pass


def _parse_id(raw: str) -> int:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        raise UsageError(f"Not an id: {raw!r}") from None


def _parse_start(raw: str) -> datetime | None:
    if raw == "-":
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise UsageError(f"Bad start time {raw!r}, expected e.g. 2025-05-01T09:00 or '-'") from None


def _parse_minutes(raw: str) -> timedelta:
    try:
        minutes = int(raw)
    except ValueError:
        raise UsageError(f"Bad duration {raw!r}, expected whole minutes") from None
    if minutes < 0:
        raise UsageError("Duration must not be negative")
    return timedelta(minutes=minutes)


def _split_text(words: list[str]) -> tuple[str, str]:
    """`name words | description words` -> (name, description)."""
    text = " ".join(words)
    name, _, description = text.partition("|")
    name = name.strip()
    if not name:
        raise UsageError("Name is required")
    return name, description.strip()


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    data_file = getattr(state.task_store, "path", None)
    storage = f"file {data_file}" if data_file is not None else "in memory only"
    return (
        "Status:\n"
        f"  Storage: {storage}\n"
        f"  Items: {format_counts(state.task_store)}\n"
        f"  Scheduled: {len(state.task_store.prioritized())}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_all(state.task_store)


def cmd_prio(state: AppState, args: list[str]) -> str:
    return format_prioritized(state.task_store)


def cmd_history(state: AppState, args: list[str]) -> str:
    return format_history(state.task_store)


def cmd_show(state: AppState, args: list[str]) -> str:
    """
    /show <id>  -> show one item (records it in history)
    """
    if len(args) != 1:
        return "Usage: /show <id>"
    try:
        entity_id = _parse_id(args[0])
    except UsageError as e:
        return str(e)

    entity = state.task_store.get(entity_id)
    if entity is None:
        return f"No item with id={entity_id}."
    lines = [format_task(entity)]
    if isinstance(entity, Epic):
        for subtask in state.task_store.epic_subtasks(entity_id) or []:
            lines.append(f"  - {format_task(subtask)}")
    return "\n".join(lines)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add <start|-> <minutes> <name> [| description]
    """
    if len(args) < 4 or args[0].lower() != "add":
        return "Usage: /task add <start|-> <minutes> <name> [| description]"
    try:
        start = _parse_start(args[1])
        duration = _parse_minutes(args[2])
        name, description = _split_text(args[3:])
    except UsageError as e:
        return str(e)

    task_id = state.task_store.create_task(
        Task(name=name, description=description, start_time=start, duration=duration)
    )
    logger.debug("Console created task id=%s", task_id)
    return f"Task created: #{task_id}"


def cmd_epic(state: AppState, args: list[str]) -> str:
    """
    /epic add <name> [| description]
    """
    if len(args) < 2 or args[0].lower() != "add":
        return "Usage: /epic add <name> [| description]"
    try:
        name, description = _split_text(args[1:])
    except UsageError as e:
        return str(e)

    epic_id = state.task_store.create_epic(Epic(name=name, description=description))
    return f"Epic created: #{epic_id}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub add <epic_id> <start|-> <minutes> <name> [| description]
    """
    if len(args) < 5 or args[0].lower() != "add":
        return "Usage: /sub add <epic_id> <start|-> <minutes> <name> [| description]"
    try:
        epic_id = _parse_id(args[1])
        start = _parse_start(args[2])
        duration = _parse_minutes(args[3])
        name, description = _split_text(args[4:])
    except UsageError as e:
        return str(e)

    subtask_id = state.task_store.create_subtask(
        Subtask(
            epic_id=epic_id,
            name=name,
            description=description,
            start_time=start,
            duration=duration,
        )
    )
    if subtask_id is None:
        return f"No epic with id={epic_id}; subtask not created."
    return f"Subtask created: #{subtask_id} (epic #{epic_id})"


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <id> <NEW|IN_PROGRESS|DONE>
    """
    if len(args) != 2:
        return "Usage: /set <id> <NEW|IN_PROGRESS|DONE>"
    try:
        entity_id = _parse_id(args[0])
        status = TaskStatus.parse(args[1])
    except ValueError as e:
        return str(e)

    store = state.task_store
    entity = store.peek(entity_id)
    if entity is None:
        return f"No item with id={entity_id}."

    match entity.type:
        case TaskType.EPIC:
            return "Epic status is derived from its subtasks and cannot be set."
        case TaskType.SUBTASK:
            store.update_subtask(cast(Subtask, replace(entity, status=status)))
        case _:
            store.update_task(replace(entity, status=status))
    return f"#{entity_id} -> {status.value}"


def cmd_del(state: AppState, args: list[str]) -> str:
    """
    /del <id>   -> delete one item (deleting an epic deletes its subtasks)
    """
    if len(args) != 1:
        return "Usage: /del <id>"
    try:
        entity_id = _parse_id(args[0])
    except UsageError as e:
        return str(e)

    store = state.task_store
    entity = store.peek(entity_id)
    if entity is None:
        return f"No item with id={entity_id}."

    match entity.type:
        case TaskType.EPIC:
            store.delete_epic(entity_id)
        case TaskType.SUBTASK:
            store.delete_subtask(entity_id)
        case _:
            store.delete_task(entity_id)
    return f"Deleted #{entity_id}."


def cmd_clear(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /clear tasks | subtasks | epics
    """
    if len(args) != 1:
        return "Usage: /clear tasks | subtasks | epics"

    what = args[0].lower()
    store = state.task_store
    if what == "tasks":
        store.delete_all_tasks()
    elif what == "subtasks":
        store.delete_all_subtasks()
    elif what == "epics":
        if emit:
            with contextlib.suppress(Exception):
                emit("[CLEAR] Deleting every epic also deletes every subtask.")
        store.delete_all_epics()
    else:
        return "Usage: /clear tasks | subtasks | epics"
    return f"Cleared {what}. Now: {format_counts(store)}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage and item counts.")
registry.register("list", cmd_list, help_text="List all tasks, epics and subtasks.", aliases=["ls"])
registry.register("prio", cmd_prio, help_text="List scheduled items by start time.")
registry.register("history", cmd_history, help_text="Show recently viewed items.")
registry.register("show", cmd_show, help_text="Show one item: /show <id>.")
registry.register("task", cmd_task, help_text="Add a task: /task add <start|-> <minutes> <name> [| desc].")
registry.register("epic", cmd_epic, help_text="Add an epic: /epic add <name> [| desc].")
registry.register(
    "sub", cmd_sub, help_text="Add a subtask: /sub add <epic_id> <start|-> <minutes> <name> [| desc]."
)
registry.register("set", cmd_set, help_text="Set task/subtask status: /set <id> <NEW|IN_PROGRESS|DONE>.")
registry.register("del", cmd_del, help_text="Delete an item: /del <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete in bulk: /clear tasks | subtasks | epics.")
