# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import StrEnum
from typing import ClassVar, Self

from .errors import ValidationError


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - values equal the names, so the data file stores them verbatim
    - an epic's status is always recomputed from its subtasks, never set by a client
    """

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        try:
            return cls(raw.strip().upper())
        except ValueError:
            raise ValueError(f"unknown task status: {raw!r}") from None


class TaskType(StrEnum):
    TASK = "TASK"
    EPIC = "EPIC"
    SUBTASK = "SUBTASK"


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class Task:
    """
    Plain schedulable unit of work.

    Values are immutable: the store replaces them by id, so anything already handed
    out (to a caller or to the history) stays a frozen snapshot.
    Equality and hashing use the id only.
    """

    type: ClassVar[TaskType] = TaskType.TASK

    name: str
    description: str = ""
    status: TaskStatus = TaskStatus.NEW
    duration: timedelta = timedelta(0)
    start_time: datetime | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValidationError(f"duration must be non-negative, got {self.duration}")
        # naive local times only
        if self.start_time is not None and self.start_time.tzinfo is not None:
            raise ValidationError(f"start time must be local time without offset, got {self.start_time}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def end_time(self) -> datetime | None:
        if self.start_time is None:
            return None
        return self.start_time + self.duration

    @property
    def is_schedulable(self) -> bool:
        """Whether the entity takes part in the prioritized index and overlap checks."""
        return self.type is not TaskType.EPIC and self.start_time is not None

    def with_id(self, task_id: int | None) -> Self:
        return replace(self, id=task_id)

    def with_status(self, status: TaskStatus) -> Self:
        return replace(self, status=status)


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class Subtask(Task):
    type: ClassVar[TaskType] = TaskType.SUBTASK

    epic_id: int


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class Epic(Task):
    """
    Container of subtasks.

    status, start_time, duration and span_end are derived from the subtasks by the
    store; values passed in by clients are overwritten on the next aggregation.
    """

    type: ClassVar[TaskType] = TaskType.EPIC

    subtask_ids: tuple[int, ...] = ()
    span_end: datetime | None = None

    @property
    def end_time(self) -> datetime | None:
        return self.span_end

    def with_subtask_ids(self, subtask_ids: tuple[int, ...]) -> Epic:
        return replace(self, subtask_ids=tuple(dict.fromkeys(subtask_ids)))

    def with_rollup(
        self,
        *,
        status: TaskStatus,
        start_time: datetime | None,
        end_time: datetime | None,
        duration: timedelta,
    ) -> Epic:
        return replace(
            self,
            status=status,
            start_time=start_time,
            span_end=end_time,
            duration=duration,
        )
