# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task store (file-backed or in-memory) into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.file_store import FileBackedTaskStore
from ..tasks.history import HistoryTracker
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file.parent.mkdir(parents=True, exist_ok=True)


def create_default_store(settings) -> TaskRepo:
    """
    Default store for the given settings.

    With persistence on, the data file is loaded into a fresh store; a malformed file
    raises TaskStoreLoadError and nothing is returned.
    """
    history = HistoryTracker()
    if settings.persist:
        return FileBackedTaskStore.load_from_file(settings.tasks_file, history)
    logger.info("Persistence disabled; tasks live in memory only.")
    return TaskStore(history)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(settings=settings, task_store=create_default_store(settings))
