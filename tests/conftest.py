# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.task_store import TaskStore

from .helpers import SAMPLE_TEXT


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        persist=True,
        console_enabled=False,
        data_dir=tmp_path / "data",
        tasks_file=tmp_path / "data" / "tasks.csv",
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with an in-memory store."""
    return AppState(settings=settings, task_store=TaskStore())


@pytest.fixture()
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.csv"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path
