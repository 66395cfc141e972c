# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from task_tracker.logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_file_gets_everything_console_is_filtered(tmp_path: Path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path, console_level=logging.INFO)

    logging.getLogger("task_tracker.tasks.file_store").debug("saved 3 records")
    logging.getLogger("some.library").warning("library chatter")
    for h in logging.getLogger().handlers:
        h.flush()

    text = (tmp_path / "tracker.log").read_text(encoding="utf-8")
    assert "saved 3 records" in text
    assert "library chatter" in text

    console = next(h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler))
    noisy = logging.LogRecord("some.library", logging.WARNING, __file__, 1, "x", None, None)
    ours = logging.LogRecord("task_tracker.tasks.task_store", logging.INFO, __file__, 1, "x", None, None)
    assert not console.filter(noisy)
    assert console.filter(ours)


@pytest.mark.parametrize(
    "name, level, shown",
    [
        ("task_tracker.cli.commands", logging.DEBUG, True),
        ("task_tracker.tasks.file_store", logging.INFO, False),
        ("task_tracker.tasks.file_store", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("some.library", logging.ERROR, True),
    ],
)
def test_console_filter_levels(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "x", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
