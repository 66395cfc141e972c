# tests/helpers.py

from __future__ import annotations

from datetime import datetime, timedelta

from task_tracker.tasks.task_models import Epic, Subtask, Task, TaskStatus

T0 = datetime(2025, 5, 1, 9, 0)


def at(hour: int, minute: int = 0) -> datetime:
    return T0.replace(hour=hour, minute=minute)


def make_task(
    start: datetime | None = T0,
    minutes: int = 60,
    *,
    name: str = "Task",
    status: TaskStatus = TaskStatus.NEW,
    task_id: int | None = None,
) -> Task:
    return Task(
        name=name,
        description=f"{name} description",
        status=status,
        duration=timedelta(minutes=minutes),
        start_time=start,
        id=task_id,
    )


def make_subtask(
    epic_id: int,
    start: datetime | None = T0,
    minutes: int = 60,
    *,
    name: str = "Subtask",
    status: TaskStatus = TaskStatus.NEW,
    task_id: int | None = None,
) -> Subtask:
    return Subtask(
        epic_id=epic_id,
        name=name,
        description=f"{name} description",
        status=status,
        duration=timedelta(minutes=minutes),
        start_time=start,
        id=task_id,
    )


def make_epic(name: str = "Epic") -> Epic:
    return Epic(name=name, description=f"{name} description")


SAMPLE_LINES = [
    "1,TASK,Task #1,NEW,Task 1 description,0,2025-05-01T09:00,59,0",
    "2,TASK,Task #2,DONE,Task 2 description,0,2025-05-01T10:00,59,0",
    "3,EPIC,Epic #1,NEW,Epic 1 description,0,2025-05-01T11:00,59,2025-05-01T11:59",
    "4,EPIC,Epic #2,NEW,Epic 2 description,0,2025-05-01T12:00,59,2025-05-01T12:59",
    "5,SUBTASK,Subtask #1 for epic #1,NEW,Subtask 1 for epic 1,3,2025-05-01T11:00,59,0",
    "6,SUBTASK,Subtask #2 for epic #2,NEW,Subtask 2 for epic 2,4,2025-05-01T12:00,59,0",
]
SAMPLE_TEXT = "".join(line + "\n" for line in SAMPLE_LINES)
