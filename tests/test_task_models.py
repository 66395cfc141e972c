# tests/test_task_models.py

from __future__ import annotations

import dataclasses
from datetime import timedelta, timezone

import pytest

from task_tracker.tasks.errors import ValidationError
from task_tracker.tasks.task_models import Epic, Subtask, Task, TaskStatus, TaskType

from .helpers import T0, at, make_subtask, make_task


def test_equality_and_hash_use_id_only() -> None:
    a = make_task(name="A", task_id=1)
    b = make_task(at(15), 10, name="B", status=TaskStatus.DONE, task_id=1)
    c = make_task(name="A", task_id=2)

    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_end_time_is_start_plus_duration() -> None:
    task = make_task(T0, 90)
    assert task.end_time == at(10, 30)
    assert make_task(None).end_time is None


def test_negative_duration_rejected() -> None:
    with pytest.raises(ValueError):
        Task(name="bad", duration=timedelta(minutes=-1))


def test_start_time_must_be_naive() -> None:
    with pytest.raises(ValidationError):
        Task(name="bad", start_time=T0.replace(tzinfo=timezone.utc))
    with pytest.raises(ValidationError):
        make_subtask(1, T0.replace(tzinfo=timezone(timedelta(hours=2))))


def test_values_are_frozen_and_copies_are_independent() -> None:
    task = make_task(task_id=1)
    done = task.with_status(TaskStatus.DONE)

    assert task.status is TaskStatus.NEW
    assert done.status is TaskStatus.DONE
    assert done.id == 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.name = "changed"  # type: ignore[misc]


def test_with_id_keeps_variant() -> None:
    subtask = make_subtask(7).with_id(3)
    assert isinstance(subtask, Subtask)
    assert subtask.type is TaskType.SUBTASK
    assert subtask.epic_id == 7
    assert subtask.id == 3


def test_epic_derived_fields() -> None:
    epic = Epic(name="E")
    assert epic.status is TaskStatus.NEW
    assert epic.end_time is None
    assert epic.duration == timedelta(0)
    assert not epic.is_schedulable

    rolled = epic.with_rollup(
        status=TaskStatus.DONE, start_time=T0, end_time=at(12), duration=timedelta(hours=2)
    )
    assert rolled.start_time == T0
    assert rolled.end_time == at(12)
    assert rolled.with_subtask_ids((4, 5, 4)).subtask_ids == (4, 5)


def test_schedulable_requires_start_time() -> None:
    assert make_task(T0).is_schedulable
    assert not make_task(None).is_schedulable
    assert make_subtask(1, T0).is_schedulable


def test_status_parse() -> None:
    assert TaskStatus.parse("done") is TaskStatus.DONE
    assert TaskStatus.parse(" IN_PROGRESS ") is TaskStatus.IN_PROGRESS
    with pytest.raises(ValueError):
        TaskStatus.parse("waiting")
