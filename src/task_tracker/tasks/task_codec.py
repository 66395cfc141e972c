# src/task_tracker/tasks/task_codec.py

"""
Line codec for the data file.

One record per line, 9 comma-separated columns:

    id,type,name,status,description,epic_id,start_time,duration_minutes,end_time

- epic_id: owning epic for subtasks, 0 otherwise
- start_time: ISO-8601 local date-time (no UTC offset), empty when absent
- duration_minutes: whole minutes; other durations are rejected on write
- end_time: aggregated end for epics (empty when absent), 0 for tasks and subtasks

The format has no quoting, so commas and line breaks are rejected in text fields.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from .errors import TaskStoreLoadError, ValidationError
from .task_models import Epic, Subtask, Task, TaskStatus, TaskType

COLUMNS = 9
SEPARATOR = ","
_FORBIDDEN = (SEPARATOR, "\n", "\r")


def _format_dt(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.microsecond:
        return value.isoformat()
    if value.second:
        return value.isoformat(timespec="seconds")
    return value.isoformat(timespec="minutes")


def _check_text(task: Task, field: str, value: str) -> str:
    if any(ch in value for ch in _FORBIDDEN):
        raise ValidationError(
            f"{task.type.value.lower()} id={task.id}: {field} must not contain commas or line breaks"
        )
    return value


def _whole_minutes(task: Task) -> int:
    minutes, rest = divmod(task.duration, timedelta(minutes=1))
    if rest:
        raise ValidationError(
            f"{task.type.value.lower()} id={task.id}: duration must be whole minutes, got {task.duration}"
        )
    return minutes


def encode_task(task: Task) -> str:
    """Encode one entity as a line (without the trailing newline)."""
    epic_id = "0"
    end_time = "0"
    if isinstance(task, Subtask):
        epic_id = str(task.epic_id)
    elif isinstance(task, Epic):
        end_time = _format_dt(task.end_time)

    minutes = _whole_minutes(task)
    return SEPARATOR.join(
        (
            str(task.id),
            task.type.value,
            _check_text(task, "name", task.name),
            task.status.value,
            _check_text(task, "description", task.description),
            epic_id,
            _format_dt(task.start_time),
            str(minutes),
            end_time,
        )
    )


def _parse_dt(raw: str, line_no: int, column: str) -> datetime | None:
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise TaskStoreLoadError(f"line {line_no}: bad {column} {raw!r}") from None
    if value.tzinfo is not None:
        raise TaskStoreLoadError(f"line {line_no}: {column} must be local time without offset, got {raw!r}")
    return value


def _parse_int(raw: str, line_no: int, column: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise TaskStoreLoadError(f"line {line_no}: bad {column} {raw!r}") from None


def decode_line(line: str, *, line_no: int = 0) -> Task:
    """Decode one record; raises TaskStoreLoadError describing the first problem found."""
    parts = line.rstrip("\r\n").split(SEPARATOR)
    if len(parts) != COLUMNS:
        raise TaskStoreLoadError(
            f"line {line_no}: expected {COLUMNS} columns, got {len(parts)}"
        )

    raw_id, raw_type, name, raw_status, description, raw_epic, raw_start, raw_minutes, raw_end = parts

    task_id = _parse_int(raw_id, line_no, "id")
    try:
        task_type = TaskType(raw_type.strip())
    except ValueError:
        raise TaskStoreLoadError(f"line {line_no}: unknown type {raw_type!r}") from None
    try:
        status = TaskStatus.parse(raw_status)
    except ValueError as e:
        raise TaskStoreLoadError(f"line {line_no}: {e}") from None

    start_time = _parse_dt(raw_start, line_no, "start time")
    minutes = _parse_int(raw_minutes, line_no, "duration")
    if minutes < 0:
        raise TaskStoreLoadError(f"line {line_no}: negative duration {minutes}")
    duration = timedelta(minutes=minutes)

    common = {
        "id": task_id,
        "name": name,
        "description": description,
        "status": status,
        "duration": duration,
        "start_time": start_time,
    }

    match task_type:
        case TaskType.EPIC:
            return Epic(span_end=_parse_dt(raw_end, line_no, "end time"), **common)
        case TaskType.SUBTASK:
            return Subtask(epic_id=_parse_int(raw_epic, line_no, "epic id"), **common)
        case _:
            return Task(**common)
