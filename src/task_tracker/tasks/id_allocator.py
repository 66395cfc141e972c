# src/task_tracker/tasks/id_allocator.py

from __future__ import annotations


class IdAllocator:
    """
    Monotonic id counter shared by tasks, subtasks and epics of one store.

    Not thread-safe: the store is single-writer.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def observe(self, used_id: int) -> None:
        """Fast-forward past an id that was loaded rather than minted."""
        if used_id >= self._next:
            self._next = used_id + 1

    def peek(self) -> int:
        return self._next
