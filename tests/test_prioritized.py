# tests/test_prioritized.py

from __future__ import annotations

from dataclasses import replace

from task_tracker.tasks.prioritized import PrioritizedIndex
from task_tracker.tasks.task_models import Epic

from .helpers import T0, at, make_subtask, make_task


def _ids(index: PrioritizedIndex) -> list[int | None]:
    return [t.id for t in index.all()]


def test_orders_by_start_time_with_stable_ties() -> None:
    index = PrioritizedIndex()
    index.insert(make_task(at(12), task_id=1))
    index.insert(make_task(at(9), task_id=2))
    index.insert(make_subtask(10, at(12), task_id=3))
    index.insert(make_task(at(10), task_id=4))

    assert _ids(index) == [2, 4, 1, 3]


def test_skips_unscheduled_and_epics() -> None:
    index = PrioritizedIndex()
    index.insert(make_task(None, task_id=1))
    index.insert(Epic(name="E", id=2, start_time=T0))

    assert len(index) == 0


def test_reinsert_repositions() -> None:
    index = PrioritizedIndex()
    first = make_task(at(9), task_id=1)
    index.insert(first)
    index.insert(make_task(at(10), task_id=2))

    index.insert(replace(first, start_time=at(11)))
    assert _ids(index) == [2, 1]

    index.insert(replace(first, start_time=None))
    assert _ids(index) == [2]
    assert 1 not in index


def test_remove_by_entity_or_id() -> None:
    index = PrioritizedIndex()
    a = make_task(at(9), task_id=1)
    index.insert(a)
    index.insert(make_task(at(10), task_id=2))

    index.remove(a)
    index.remove(2)
    index.remove(3)
    assert index.all() == []


def test_half_open_overlap() -> None:
    index = PrioritizedIndex()
    index.insert(make_task(at(10), 60, task_id=1))

    assert index.has_conflict(make_task(at(10, 59), 60))
    assert index.has_conflict(make_task(at(9, 30), 31))
    assert index.has_conflict(make_task(at(10, 15), 10))
    assert index.has_conflict(make_task(at(9), 180))
    assert not index.has_conflict(make_task(at(11), 60))
    assert not index.has_conflict(make_task(at(9), 60))


def test_self_is_not_a_conflict() -> None:
    index = PrioritizedIndex()
    index.insert(make_task(at(10), 60, task_id=1))

    assert not index.has_conflict(make_task(at(10, 30), 60, task_id=1))
    assert index.find_conflict(make_task(at(10, 30), 60, task_id=2)).id == 1


def test_unscheduled_candidate_never_conflicts() -> None:
    index = PrioritizedIndex()
    index.insert(make_task(at(10), 60, task_id=1))

    assert not index.has_conflict(make_task(None))
