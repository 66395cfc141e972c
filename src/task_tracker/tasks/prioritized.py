# src/task_tracker/tasks/prioritized.py

from __future__ import annotations

import bisect
import itertools
from datetime import datetime

from .task_models import Task, TaskType

_SortKey = tuple[datetime, int]


class PrioritizedIndex:
    """
    Tasks and subtasks ordered by start time (ties: insertion order).

    Only schedulable entities are kept: epics and entities without a start time
    are ignored by insert(). The same ordering drives the overlap check.
    """

    def __init__(self) -> None:
        self._keys: list[_SortKey] = []
        self._items: list[Task] = []
        self._key_by_id: dict[int, _SortKey] = {}
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._key_by_id

    def insert(self, task: Task) -> None:
        """Add (or reposition) a task. Non-schedulable entities are skipped."""
        if task.id is None:
            return
        self.remove(task.id)
        if not task.is_schedulable or task.start_time is None:
            return

        key = (task.start_time, next(self._seq))
        pos = bisect.bisect_right(self._keys, key)
        self._keys.insert(pos, key)
        self._items.insert(pos, task)
        self._key_by_id[task.id] = key

    def remove(self, task: Task | int | None) -> None:
        task_id = task.id if isinstance(task, Task) else task
        if task_id is None:
            return
        key = self._key_by_id.pop(task_id, None)
        if key is None:
            return
        pos = bisect.bisect_left(self._keys, key)
        del self._keys[pos]
        del self._items[pos]

    def all(self) -> list[Task]:
        return list(self._items)

    def find_conflict(self, candidate: Task) -> Task | None:
        """
        Return the first entry whose [start, end) window intersects the candidate's.

        An entry with the candidate's own id is skipped so updates never conflict
        with their previous version.
        """
        start = candidate.start_time
        end = candidate.end_time
        if start is None or end is None or candidate.type is TaskType.EPIC:
            return None

        for (other_start, _), other in zip(self._keys, self._items):
            if other_start >= end:
                # sorted by start: nothing further can begin before the candidate ends
                break
            if other.id == candidate.id:
                continue
            if start < other_start + other.duration and end > other_start:
                return other
        return None

    def has_conflict(self, candidate: Task) -> bool:
        return self.find_conflict(candidate) is not None
