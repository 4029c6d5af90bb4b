"""File-backed task storage.

The whole collection lives in one JSON array. Every operation re-reads the
file; nothing is cached between calls. Writes go to a temporary file in the
same directory which is then renamed over the data file, so readers only
ever see the old or the new collection.
"""

import logging
import os
import tempfile
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from taskboard.errors import StorageCorruptionError, StorageIOError, TaskNotFoundError
from taskboard.models import Task

logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(list[Task])
_RECORDS = TypeAdapter(list[Any])


class TaskFileStore:
    """Task storage over a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        """Bind the store to ``path``. The file is created on first read."""
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the store's write lock for a read-modify-write cycle."""
        with self._lock:
            yield

    def read_all(self) -> list[Task]:
        """Return every persisted task in storage order.

        A missing file is initialized to an empty collection. Content that is
        not a JSON array is treated as corruption: the file is moved aside to
        ``<name>.corrupt``, reset, and an empty list is returned. Individual
        records that fail validation are logged and skipped.
        """
        self._ensure_exists()
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            logger.error("Failed to read %s: %s", self._path, exc)
            raise StorageIOError(f"Failed to read {self._path}") from exc

        try:
            return self._parse(raw)
        except StorageCorruptionError as exc:
            logger.warning("Resetting corrupted task file %s: %s", self._path, exc.__cause__)
            with self._lock:
                self._backup_corrupted()
                self.write_all([])
            return []

    def write_all(self, tasks: Sequence[Task]) -> None:
        """Replace the persisted collection with ``tasks`` atomically."""
        content = _TASK_LIST.dump_json(list(tasks), indent=2, by_alias=True, exclude_none=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                suffix=".tmp",
                prefix=self._path.name + ".",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(tmp_path, self._path)
            except Exception:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as exc:
            logger.error("Failed to write %s: %s", self._path, exc)
            raise StorageIOError(f"Failed to write {self._path}") from exc
        logger.debug("Wrote %d tasks to %s", len(tasks), self._path)

    def find_by_id(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        for task in self.read_all():
            if task.id == task_id:
                return task
        return None

    def save(self, task: Task) -> Task:
        """Append a new task to the collection and return it."""
        with self._lock:
            tasks = self.read_all()
            tasks.append(task)
            self.write_all(tasks)
        return task

    def update(self, task: Task) -> Task:
        """Replace the stored task with the same ID, keeping its position."""
        with self._lock:
            tasks = self.read_all()
            for index, existing in enumerate(tasks):
                if existing.id == task.id:
                    tasks[index] = task
                    break
            else:
                raise TaskNotFoundError(task.id)
            self.write_all(tasks)
        return task

    def delete_by_id(self, task_id: str) -> None:
        """Remove the task with ``task_id``. Unknown IDs are ignored."""
        with self._lock:
            tasks = self.read_all()
            self.write_all([t for t in tasks if t.id != task_id])

    def _ensure_exists(self) -> None:
        if self._path.exists():
            return
        with self._lock:
            if not self._path.exists():
                logger.info("Initializing empty task file at %s", self._path)
                self.write_all([])

    def _parse(self, raw: bytes) -> list[Task]:
        try:
            records = _RECORDS.validate_json(raw)
        except ValidationError as exc:
            raise StorageCorruptionError("Task file is not a JSON array") from exc

        tasks = []
        for index, record in enumerate(records):
            try:
                tasks.append(Task.model_validate(record))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid task record #%d in %s: %s",
                    index,
                    self._path,
                    exc.errors(include_url=False, include_context=False),
                )
        return tasks

    def _backup_corrupted(self) -> None:
        backup = self._path.with_name(self._path.name + ".corrupt")
        try:
            os.replace(self._path, backup)
        except OSError as exc:
            logger.error("Failed to back up %s: %s", self._path, exc)
            raise StorageIOError(f"Failed to back up {self._path}") from exc
        logger.warning("Moved corrupted task file to %s", backup)
