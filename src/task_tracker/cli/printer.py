# src/task_tracker/cli/printer.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ..core.ports import TaskRepo
from ..tasks.task_models import Epic, Subtask, Task, TaskType

RULE = "-" * 60


def _fmt_dt(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else "-"


def format_task(task: Task) -> str:
    """One-line rendering, e.g. `#5 SUBTASK [DONE] Write docs (epic #3) | 09:00 -> 10:00 (60 min)`."""
    head = f"#{task.id} {task.type.value} [{task.status.value}] {task.name}"
    if isinstance(task, Subtask):
        head += f" (epic #{task.epic_id})"
    if task.description:
        head += f" - {task.description}"

    minutes = int(task.duration.total_seconds() // 60)
    when = f"{_fmt_dt(task.start_time)} -> {_fmt_dt(task.end_time)} ({minutes} min)"

    line = f"{head} | {when}"
    if isinstance(task, Epic):
        ids = ", ".join(f"#{sid}" for sid in task.subtask_ids) or "none"
        line += f" | subtasks: {ids}"
    return line


def _section(title: str, tasks: Iterable[Task]) -> list[str]:
    lines = [f"{title}:"]
    items = [f"> {format_task(t)}" for t in tasks]
    lines.extend(items or ["  (empty)"])
    return lines


def format_all(store: TaskRepo) -> str:
    lines = [RULE]
    lines += _section("All tasks", store.list_tasks())
    lines.append("")
    lines += _section("All epics", store.list_epics())
    lines.append("")
    lines += _section("All subtasks", store.list_subtasks())
    lines.append(RULE)
    return "\n".join(lines)


def format_prioritized(store: TaskRepo) -> str:
    lines = [RULE, "Prioritized tasks and subtasks:", RULE]
    items = store.prioritized()
    lines.extend(f"> {format_task(t)}" for t in items)
    if not items:
        lines.append("  (nothing scheduled)")
    return "\n".join(lines)


def format_history(store: TaskRepo) -> str:
    items = store.history()
    if not items:
        return "History is empty."
    lines = ["Recently viewed (oldest first):"]
    lines.extend(f"{i}. {format_task(t)}" for i, t in enumerate(items, start=1))
    return "\n".join(lines)


def format_counts(store: TaskRepo) -> str:
    counts = store.counts()
    return ", ".join(f"{t.value.lower()}s: {counts.get(t, 0)}" for t in TaskType)
