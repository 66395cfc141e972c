# src/task_tracker/tasks/file_store.py

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import TaskStoreLoadError, TaskStoreSaveError, ValidationError
from .history import HistoryTracker
from .task_codec import decode_line, encode_task
from .task_models import Epic, Subtask, Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

FILE_ENCODING = "utf-8"


class FileBackedTaskStore(TaskStore):
    """
    TaskStore that rewrites the whole data file after every mutation.

    - write-through: save() runs inline, before the mutating call returns
    - a failed save raises TaskStoreSaveError; the in-memory change is already applied
    - load_from_file() builds a fresh store and returns it only if every line loaded
    """

    def __init__(self, path: str | Path, history: HistoryTracker | None = None) -> None:
        super().__init__(history)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- persistence ----

    def _records(self) -> list[Task]:
        # Epics before subtasks so a reader can link subtasks as it goes.
        out: list[Task] = []
        out.extend(sorted(self.list_tasks(), key=lambda t: t.id or 0))
        out.extend(sorted(self.list_epics(), key=lambda t: t.id or 0))
        out.extend(sorted(self.list_subtasks(), key=lambda t: t.id or 0))
        return out

    def save(self) -> None:
        lines = [encode_task(t) + "\n" for t in self._records()]
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text("".join(lines), encoding=FILE_ENCODING, newline="\n")
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("Failed to save tasks to %s: %s", self._path, e)
            raise TaskStoreSaveError(f"cannot write {self._path}: {e}") from e
        logger.debug("Saved %d records to %s", len(lines), self._path)

    def _load(self) -> None:
        if not self._path.exists():
            logger.info("Data file %s not found, starting empty", self._path)
            return

        try:
            text = self._path.read_text(encoding=FILE_ENCODING)
        except OSError as e:
            raise TaskStoreLoadError(f"cannot read {self._path}: {e}") from e

        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            entity = decode_line(line, line_no=line_no)
            try:
                match entity:
                    case Epic():
                        self.put_epic(entity)
                    case Subtask():
                        self.put_subtask(entity)
                    case _:
                        self.put_task(entity)
            except ValidationError as e:
                raise TaskStoreLoadError(f"line {line_no}: {e}") from e

        self.refresh_all_epics()
        logger.info("Loaded tasks from %s: %s", self._path, {k.value: v for k, v in self.counts().items()})

    @classmethod
    def load_from_file(
        cls, path: str | Path, history: HistoryTracker | None = None
    ) -> FileBackedTaskStore:
        store = cls(path, history)
        store._load()
        return store

    # ---- write-through overrides ----

    @staticmethod
    def _check_encodable(entity: Task | None) -> None:
        # Reject text the file cannot hold before anything is mutated.
        if entity is not None:
            encode_task(entity)

    def create_task(self, task: Task) -> int:
        self._check_encodable(task)
        task_id = super().create_task(task)
        self.save()
        return task_id

    def update_task(self, task: Task) -> None:
        self._check_encodable(task)
        super().update_task(task)
        self.save()

    def delete_task(self, task_id: int) -> None:
        super().delete_task(task_id)
        self.save()

    def delete_all_tasks(self) -> None:
        super().delete_all_tasks()
        self.save()

    def create_subtask(self, subtask: Subtask) -> int | None:
        self._check_encodable(subtask)
        subtask_id = super().create_subtask(subtask)
        self.save()
        return subtask_id

    def update_subtask(self, subtask: Subtask) -> None:
        self._check_encodable(subtask)
        super().update_subtask(subtask)
        self.save()

    def delete_subtask(self, subtask_id: int) -> None:
        super().delete_subtask(subtask_id)
        self.save()

    def delete_all_subtasks(self) -> None:
        super().delete_all_subtasks()
        self.save()

    def create_epic(self, epic: Epic) -> int:
        self._check_encodable(epic)
        epic_id = super().create_epic(epic)
        self.save()
        return epic_id

    def update_epic(self, epic: Epic) -> None:
        self._check_encodable(epic)
        super().update_epic(epic)
        self.save()

    def delete_epic(self, epic_id: int) -> None:
        super().delete_epic(epic_id)
        self.save()

    def delete_all_epics(self) -> None:
        super().delete_all_epics()
        self.save()
