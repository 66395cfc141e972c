# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta

from .errors import ValidationError
from .history import HistoryTracker
from .id_allocator import IdAllocator
from .prioritized import PrioritizedIndex
from .task_models import Epic, Subtask, Task, TaskStatus, TaskType

logger = logging.getLogger(__name__)


def aggregate_status(subtasks: Iterable[Subtask]) -> TaskStatus:
    """
    Epic status from its subtasks:
    - no subtasks or all NEW -> NEW
    - all DONE -> DONE
    - anything else -> IN_PROGRESS
    """
    all_new = True
    all_done = True
    for subtask in subtasks:
        if subtask.status is not TaskStatus.NEW:
            all_new = False
        if subtask.status is not TaskStatus.DONE:
            all_done = False
        if not all_new and not all_done:
            break

    if all_new:
        return TaskStatus.NEW
    if all_done:
        return TaskStatus.DONE
    return TaskStatus.IN_PROGRESS


def aggregate_span(
    subtasks: Iterable[Subtask],
) -> tuple[datetime | None, datetime | None, timedelta]:
    """Return (min start, max end, sum of durations) over the subtasks."""
    start: datetime | None = None
    end: datetime | None = None
    total = timedelta(0)
    for subtask in subtasks:
        total += subtask.duration
        if subtask.start_time is None:
            continue
        if start is None or subtask.start_time < start:
            start = subtask.start_time
        sub_end = subtask.end_time
        if sub_end is not None and (end is None or sub_end > end):
            end = sub_end
    return start, end, total


class TaskStore:
    """
    In-memory task store.

    Owns three id-keyed collections (tasks, subtasks, epics) sharing one id space,
    plus the view history and the prioritized (start-time ordered) index.

    Rules:
    - input is validated before anything is mutated (ValidationError)
    - a missing id on get/update/delete is not an error: get returns None, the rest no-op
    - every subtask change re-aggregates the owning epic
    - stored values are immutable and replaced whole

    Thread-safety:
    - none; callers sharing a store across threads must hold one lock around it
    """

    def __init__(self, history: HistoryTracker | None = None) -> None:
        self._ids = IdAllocator()
        self._tasks: dict[int, Task] = {}
        self._subtasks: dict[int, Subtask] = {}
        self._epics: dict[int, Epic] = {}
        self._history = history if history is not None else HistoryTracker()
        self._prioritized = PrioritizedIndex()

    # ---- low-level helpers ----

    @staticmethod
    def _require(entity: Task | None, expected: TaskType) -> None:
        if entity is None:
            raise ValidationError(f"{expected.value.lower()} is required")
        if entity.type is not expected:
            raise ValidationError(
                f"expected {expected.value}, got {entity.type.value} (id={entity.id})"
            )

    def _ensure_no_overlap(self, candidate: Task) -> None:
        conflict = self._prioritized.find_conflict(candidate)
        if conflict is None:
            return
        logger.warning(
            "Rejected %s id=%s [%s, %s): overlaps %s id=%s [%s, %s)",
            candidate.type,
            candidate.id,
            candidate.start_time,
            candidate.end_time,
            conflict.type,
            conflict.id,
            conflict.start_time,
            conflict.end_time,
        )
        raise ValidationError(
            f"{candidate.type.value.lower()} '{candidate.name}' overlaps "
            f"{conflict.type.value.lower()} id={conflict.id} '{conflict.name}'"
        )

    def _has_id(self, entity_id: int) -> bool:
        return entity_id in self._tasks or entity_id in self._subtasks or entity_id in self._epics

    def _epic_members(self, epic: Epic) -> list[Subtask]:
        return [self._subtasks[sid] for sid in epic.subtask_ids if sid in self._subtasks]

    def _refresh_epic(self, epic_id: int) -> None:
        epic = self._epics.get(epic_id)
        if epic is None:
            return
        members = self._epic_members(epic)
        start, end, duration = aggregate_span(members)
        self._epics[epic_id] = epic.with_rollup(
            status=aggregate_status(members),
            start_time=start,
            end_time=end,
            duration=duration,
        )

    def _link_subtask(self, epic_id: int, subtask_id: int) -> None:
        epic = self._epics[epic_id]
        self._epics[epic_id] = epic.with_subtask_ids((*epic.subtask_ids, subtask_id))

    def _unlink_subtask(self, epic_id: int, subtask_id: int) -> None:
        epic = self._epics.get(epic_id)
        if epic is None:
            return
        self._epics[epic_id] = epic.with_subtask_ids(
            tuple(sid for sid in epic.subtask_ids if sid != subtask_id)
        )

    def refresh_all_epics(self) -> None:
        for epic_id in list(self._epics):
            self._refresh_epic(epic_id)

    # ---- tasks ----

    def list_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get_task(self, task_id: int) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        self._history.record_access(task)
        return task

    def create_task(self, task: Task) -> int:
        self._require(task, TaskType.TASK)
        self._ensure_no_overlap(task.with_id(None))

        task_id = self._ids.next()
        stored = task.with_id(task_id)
        self._tasks[task_id] = stored
        self._prioritized.insert(stored)
        logger.debug("Task created id=%s start=%s duration=%s", task_id, stored.start_time, stored.duration)
        return task_id

    def update_task(self, task: Task) -> None:
        self._require(task, TaskType.TASK)
        self._ensure_no_overlap(task)

        if task.id not in self._tasks:
            logger.debug("Task update skipped: id=%s not found", task.id)
            return
        self._tasks[task.id] = task
        self._prioritized.insert(task)
        logger.debug("Task updated id=%s status=%s", task.id, task.status)

    def delete_task(self, task_id: int) -> None:
        if self._tasks.pop(task_id, None) is None:
            return
        self._prioritized.remove(task_id)
        self._history.remove(task_id)
        logger.debug("Task deleted id=%s", task_id)

    def delete_all_tasks(self) -> None:
        ids = list(self._tasks)
        self._history.remove_all(ids)
        for task_id in ids:
            self._prioritized.remove(task_id)
        self._tasks.clear()
        logger.info("Deleted all tasks (%d)", len(ids))

    # ---- subtasks ----

    def list_subtasks(self) -> list[Subtask]:
        return list(self._subtasks.values())

    def get_subtask(self, subtask_id: int) -> Subtask | None:
        subtask = self._subtasks.get(subtask_id)
        if subtask is None:
            return None
        self._history.record_access(subtask)
        return subtask

    def create_subtask(self, subtask: Subtask) -> int | None:
        """
        Create a subtask under its epic.

        Returns None (nothing stored) when the epic does not exist.
        """
        self._require(subtask, TaskType.SUBTASK)
        self._ensure_no_overlap(subtask.with_id(None))

        if subtask.epic_id not in self._epics:
            logger.warning("Subtask '%s' not created: epic id=%s not found", subtask.name, subtask.epic_id)
            return None

        subtask_id = self._ids.next()
        stored = subtask.with_id(subtask_id)
        self._subtasks[subtask_id] = stored
        self._prioritized.insert(stored)

        self._link_subtask(stored.epic_id, subtask_id)
        self._refresh_epic(stored.epic_id)
        logger.debug("Subtask created id=%s epic_id=%s", subtask_id, stored.epic_id)
        return subtask_id

    def update_subtask(self, subtask: Subtask) -> None:
        """
        Replace a stored subtask.

        Changing epic_id moves the subtask to the other epic (which must exist);
        both epics are re-aggregated.
        """
        self._require(subtask, TaskType.SUBTASK)
        self._ensure_no_overlap(subtask)

        current = self._subtasks.get(subtask.id) if subtask.id is not None else None
        if current is None:
            logger.debug("Subtask update skipped: id=%s not found", subtask.id)
            return

        moved = subtask.epic_id != current.epic_id
        if moved and subtask.epic_id not in self._epics:
            raise ValidationError(
                f"cannot move subtask id={subtask.id}: epic id={subtask.epic_id} not found"
            )

        self._subtasks[subtask.id] = subtask
        self._prioritized.insert(subtask)

        if moved:
            self._unlink_subtask(current.epic_id, subtask.id)
            self._link_subtask(subtask.epic_id, subtask.id)
            self._refresh_epic(current.epic_id)
            logger.debug("Subtask id=%s moved epic %s -> %s", subtask.id, current.epic_id, subtask.epic_id)
        self._refresh_epic(subtask.epic_id)
        logger.debug("Subtask updated id=%s status=%s", subtask.id, subtask.status)

    def delete_subtask(self, subtask_id: int) -> None:
        subtask = self._subtasks.pop(subtask_id, None)
        if subtask is None:
            return
        self._prioritized.remove(subtask_id)
        self._history.remove(subtask_id)

        self._unlink_subtask(subtask.epic_id, subtask_id)
        self._refresh_epic(subtask.epic_id)
        logger.debug("Subtask deleted id=%s epic_id=%s", subtask_id, subtask.epic_id)

    def delete_all_subtasks(self) -> None:
        ids = list(self._subtasks)
        for epic_id, epic in list(self._epics.items()):
            self._epics[epic_id] = epic.with_subtask_ids(())

        self._history.remove_all(ids)
        for subtask_id in ids:
            self._prioritized.remove(subtask_id)
        self._subtasks.clear()

        self.refresh_all_epics()
        logger.info("Deleted all subtasks (%d)", len(ids))

    # ---- epics ----

    def list_epics(self) -> list[Epic]:
        return list(self._epics.values())

    def get_epic(self, epic_id: int) -> Epic | None:
        epic = self._epics.get(epic_id)
        if epic is None:
            return None
        self._history.record_access(epic)
        return epic

    def create_epic(self, epic: Epic) -> int:
        self._require(epic, TaskType.EPIC)

        epic_id = self._ids.next()
        self._epics[epic_id] = epic.with_id(epic_id).with_subtask_ids(())
        self._refresh_epic(epic_id)
        logger.debug("Epic created id=%s", epic_id)
        return epic_id

    def update_epic(self, epic: Epic) -> None:
        """Replace name and description; links and derived fields stay with the store."""
        self._require(epic, TaskType.EPIC)

        current = self._epics.get(epic.id) if epic.id is not None else None
        if current is None:
            logger.debug("Epic update skipped: id=%s not found", epic.id)
            return
        self._epics[current.id] = replace(current, name=epic.name, description=epic.description)
        self._refresh_epic(current.id)
        logger.debug("Epic updated id=%s", current.id)

    def delete_epic(self, epic_id: int) -> None:
        epic = self._epics.pop(epic_id, None)
        if epic is None:
            return
        for subtask_id in epic.subtask_ids:
            self._subtasks.pop(subtask_id, None)
            self._prioritized.remove(subtask_id)
        self._history.remove_all(epic.subtask_ids)
        self._history.remove(epic_id)
        logger.debug("Epic deleted id=%s (cascade: %d subtasks)", epic_id, len(epic.subtask_ids))

    def delete_all_epics(self) -> None:
        subtask_ids = list(self._subtasks)
        epic_ids = list(self._epics)
        for subtask_id in subtask_ids:
            self._prioritized.remove(subtask_id)
        self._history.remove_all(subtask_ids)
        self._history.remove_all(epic_ids)
        self._subtasks.clear()
        self._epics.clear()
        logger.info("Deleted all epics (%d) and subtasks (%d)", len(epic_ids), len(subtask_ids))

    def epic_subtasks(self, epic_id: int) -> list[Subtask] | None:
        epic = self._epics.get(epic_id)
        if epic is None:
            return None
        return self._epic_members(epic)

    # ---- views ----

    def get(self, entity_id: int) -> Task | None:
        """Look up any entity by id (records the access like the typed getters)."""
        if entity_id in self._tasks:
            return self.get_task(entity_id)
        if entity_id in self._subtasks:
            return self.get_subtask(entity_id)
        return self.get_epic(entity_id)

    def peek(self, entity_id: int) -> Task | None:
        """Like get(), but leaves the history untouched."""
        for bucket in (self._tasks, self._subtasks, self._epics):
            if entity_id in bucket:
                return bucket[entity_id]
        return None

    def history(self) -> list[Task]:
        return self._history.snapshot()

    def prioritized(self) -> list[Task]:
        return self._prioritized.all()

    def counts(self) -> dict[TaskType, int]:
        return {
            TaskType.TASK: len(self._tasks),
            TaskType.EPIC: len(self._epics),
            TaskType.SUBTASK: len(self._subtasks),
        }

    # ---- loading (entities that already carry ids) ----

    def _require_new_id(self, entity: Task) -> int:
        if entity.id is None or entity.id <= 0:
            raise ValidationError(f"{entity.type.value.lower()} '{entity.name}' has no id assigned")
        if self._has_id(entity.id):
            raise ValidationError(f"duplicate id={entity.id}")
        return entity.id

    def put_task(self, task: Task) -> None:
        self._require(task, TaskType.TASK)
        task_id = self._require_new_id(task)
        self._ensure_no_overlap(task)

        self._tasks[task_id] = task
        self._prioritized.insert(task)
        self._ids.observe(task_id)

    def put_epic(self, epic: Epic) -> None:
        """Insert a loaded epic; links are rebuilt by put_subtask, rollup by refresh_all_epics()."""
        self._require(epic, TaskType.EPIC)
        epic_id = self._require_new_id(epic)

        self._epics[epic_id] = epic.with_subtask_ids(())
        self._ids.observe(epic_id)

    def put_subtask(self, subtask: Subtask) -> None:
        self._require(subtask, TaskType.SUBTASK)
        subtask_id = self._require_new_id(subtask)
        if subtask.epic_id not in self._epics:
            raise ValidationError(f"subtask id={subtask_id}: epic id={subtask.epic_id} not found")
        self._ensure_no_overlap(subtask)

        self._subtasks[subtask_id] = subtask
        self._prioritized.insert(subtask)
        self._link_subtask(subtask.epic_id, subtask_id)
        self._ids.observe(subtask_id)
