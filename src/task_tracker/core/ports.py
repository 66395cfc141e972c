# src/task_tracker/core/ports.py

"""
Ports (interfaces) used by the CLI layer.

The console and commands depend on Protocols instead of the concrete stores, so the
in-memory and file-backed variants are interchangeable and tests can use either.
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import Epic, Subtask, Task, TaskType


class TaskRepo(Protocol):
    # Tasks
    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task | None: ...
    def create_task(self, task: Task) -> int: ...
    def update_task(self, task: Task) -> None: ...
    def delete_task(self, task_id: int) -> None: ...
    def delete_all_tasks(self) -> None: ...

    # Subtasks
    def list_subtasks(self) -> list[Subtask]: ...
    def get_subtask(self, subtask_id: int) -> Subtask | None: ...
    def create_subtask(self, subtask: Subtask) -> int | None: ...
    def update_subtask(self, subtask: Subtask) -> None: ...
    def delete_subtask(self, subtask_id: int) -> None: ...
    def delete_all_subtasks(self) -> None: ...

    # Epics
    def list_epics(self) -> list[Epic]: ...
    def get_epic(self, epic_id: int) -> Epic | None: ...
    def create_epic(self, epic: Epic) -> int: ...
    def update_epic(self, epic: Epic) -> None: ...
    def delete_epic(self, epic_id: int) -> None: ...
    def delete_all_epics(self) -> None: ...
    def epic_subtasks(self, epic_id: int) -> list[Subtask] | None: ...

    # Views
    def get(self, entity_id: int) -> Task | None: ...
    def peek(self, entity_id: int) -> Task | None: ...
    def history(self) -> list[Task]: ...
    def prioritized(self) -> list[Task]: ...
    def counts(self) -> dict[TaskType, int]: ...
