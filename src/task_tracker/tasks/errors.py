# src/task_tracker/tasks/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task store failures."""


class ValidationError(TaskStoreError, ValueError):
    """
    Rejected input: missing entity, schedule overlap, or a record that cannot be stored.

    Raised before any state is touched, so the store is never partially mutated.
    """


class TaskStoreSaveError(TaskStoreError):
    """Writing the data file failed (the in-memory change has already been applied)."""


class TaskStoreLoadError(TaskStoreError):
    """The data file could not be read or contains a malformed record."""
