# src/task_tracker/tasks/history.py

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable

from .task_models import Task


class HistoryTracker:
    """
    Recently viewed entities, oldest first.

    Each id appears at most once; a repeated access moves the entry to the tail and
    replaces the stored snapshot. OrderedDict gives O(1) move-to-end and O(1)
    removal by id.
    """

    def __init__(self) -> None:
        self._entries: OrderedDict[int, Task] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._entries

    def record_access(self, task: Task | None) -> None:
        if task is None or task.id is None:
            return
        self._entries[task.id] = task
        self._entries.move_to_end(task.id)

    def remove(self, task_id: int) -> None:
        self._entries.pop(task_id, None)

    def remove_all(self, task_ids: Iterable[int]) -> None:
        for task_id in list(task_ids):
            self._entries.pop(task_id, None)

    def snapshot(self) -> list[Task]:
        return list(self._entries.values())
