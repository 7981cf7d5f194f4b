"""File-based JSON storage adapters."""

import json
import logging
import os
import sys
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from studybuddy.core.progress import UserProgress
from studybuddy.core.schedule import Schedule, ScheduleBlock
from studybuddy.core.tasks import (
    InvalidTaskError,
    Task,
    check_estimated_time,
    filter_tasks,
    parse_datetime,
    parse_difficulty,
    parse_mood,
    parse_schedule_type,
)
from studybuddy.ports.progress_store import ConcurrentUpdateError
from studybuddy.ports.task_repo import TaskNotFoundError

logger = logging.getLogger(__name__)

if sys.platform == "win32":
    fcntl = None
else:
    import fcntl

LOCK_FILE = ".studybuddy.lock"

# Threads in this process queue on _LOCK; other processes queue on the lock file
_LOCK = threading.RLock()
_HELD: set[Path] = set()


class StorageError(Exception):
    """Raised when a data file can't be read."""

    pass


@contextmanager
def _locked(data_dir: Path):
    """Hold the data directory lock for one read-modify-write. Re-entrant."""
    lock_path = (data_dir / LOCK_FILE).resolve()
    with _LOCK:
        if lock_path in _HELD or fcntl is None:
            yield
            return
        with open(lock_path, "a") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            _HELD.add(lock_path)
            try:
                yield
            finally:
                _HELD.discard(lock_path)
                fcntl.flock(f, fcntl.LOCK_UN)


class JsonFile:
    """A JSON document on disk, replaced atomically on every write."""

    def __init__(self, path: Path, default):
        self.path = path
        self.default = default

    def read(self):
        if not self.path.exists():
            return self.default()
        try:
            return json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt data file {self.path}: {e}")

    def write(self, data) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def _empty_collection() -> dict:
    return {"next_id": 1, "items": []}


_TASK_FIELD_PARSERS = {
    "title": lambda v: v,
    "description": lambda v: v or None,
    "estimated_time": check_estimated_time,
    "difficulty": parse_difficulty,
    "mood": parse_mood,
    "schedule_type": parse_schedule_type,
    "completed": bool,
    "due_date": lambda v: parse_datetime(v, "due date"),
    "category": lambda v: v,
}


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskRepository protocol. Ids are sequential integers stored
    as strings.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._file = JsonFile(self.data_dir / "tasks.json", _empty_collection)

    def _load(self) -> tuple[dict, list[Task]]:
        data = self._file.read()
        return data, [Task.from_dict(item) for item in data["items"]]

    def _save(self, data: dict, tasks: list[Task]) -> None:
        data["items"] = [t.to_dict() for t in tasks]
        self._file.write(data)

    def fetch(
        self,
        completed: bool | None = None,
        category: str | None = None,
        due_on: date | None = None,
    ) -> list[Task]:
        with _locked(self.data_dir):
            _, tasks = self._load()
        return filter_tasks(tasks, completed=completed, category=category, due_on=due_on)

    def get(self, task_id: str) -> Task:
        with _locked(self.data_dir):
            _, tasks = self._load()
        for task in tasks:
            if task.id == str(task_id):
                return task
        raise TaskNotFoundError(f"Task {task_id} not found")

    def create(self, task: Task) -> Task:
        with _locked(self.data_dir):
            data, tasks = self._load()
            stored = replace(task, id=str(data["next_id"]), completed=False, created_at=datetime.now())
            data["next_id"] += 1
            tasks.append(stored)
            self._save(data, tasks)
        logger.debug(f"Created task {stored.id}: {stored.title}")
        return stored

    def update(self, task_id: str, **changes) -> Task:
        unknown = set(changes) - set(_TASK_FIELD_PARSERS)
        if unknown:
            raise InvalidTaskError(f"Cannot update task field(s): {', '.join(sorted(unknown))}")
        parsed = {key: _TASK_FIELD_PARSERS[key](value) for key, value in changes.items()}

        with _locked(self.data_dir):
            data, tasks = self._load()
            for i, task in enumerate(tasks):
                if task.id == str(task_id):
                    tasks[i] = replace(task, **parsed)
                    self._save(data, tasks)
                    return tasks[i]
        raise TaskNotFoundError(f"Task {task_id} not found")

    def mark_completed(self, task_id: str, completed: bool) -> tuple[Task, bool]:
        with _locked(self.data_dir):
            data, tasks = self._load()
            for i, task in enumerate(tasks):
                if task.id == str(task_id):
                    if task.completed == completed:
                        return task, False
                    tasks[i] = replace(task, completed=completed)
                    self._save(data, tasks)
                    return tasks[i], True
        raise TaskNotFoundError(f"Task {task_id} not found")

    def delete(self, task_id: str) -> bool:
        with _locked(self.data_dir):
            data, tasks = self._load()
            remaining = [t for t in tasks if t.id != str(task_id)]
            if len(remaining) == len(tasks):
                return False
            self._save(data, remaining)
        return True


class JsonProgressStore:
    """
    JSON file progress storage.

    Implements ProgressStore protocol with a version-checked write.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._file = JsonFile(self.data_dir / "progress.json", lambda: None)

    def load(self) -> UserProgress:
        with _locked(self.data_dir):
            data = self._file.read()
            if data is None:
                progress = UserProgress()
                self._file.write(progress.to_dict())
                return progress
        return UserProgress.from_dict(data)

    def save(self, progress: UserProgress, expected_version: int) -> UserProgress:
        with _locked(self.data_dir):
            data = self._file.read()
            current = data.get("version", 0) if data else 0
            if current != expected_version:
                raise ConcurrentUpdateError(
                    f"Progress changed (expected version {expected_version}, found {current})"
                )
            saved = replace(progress, version=current + 1)
            self._file.write(saved.to_dict())
        return saved


class JsonScheduleStore:
    """
    JSON file schedule storage.

    Implements ScheduleStore protocol. Creating a schedule rewrites the whole
    file once, so the new schedule is the only active one after the write.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._file = JsonFile(self.data_dir / "schedules.json", _empty_collection)

    def _load(self) -> tuple[dict, list[Schedule]]:
        data = self._file.read()
        return data, [Schedule.from_dict(item) for item in data["items"]]

    def fetch_all(self) -> list[Schedule]:
        with _locked(self.data_dir):
            _, schedules = self._load()
        return sorted(schedules, key=lambda s: (s.created_at, int(s.id)), reverse=True)

    def active(self) -> Schedule | None:
        for schedule in self.fetch_all():
            if schedule.is_active:
                return schedule
        return None

    def create(self, title: str, blocks: list[ScheduleBlock]) -> Schedule:
        with _locked(self.data_dir):
            data, schedules = self._load()
            for schedule in schedules:
                schedule.is_active = False
            new = Schedule(id=str(data["next_id"]), title=title, blocks=list(blocks), is_active=True)
            data["next_id"] += 1
            schedules.append(new)
            data["items"] = [s.to_dict() for s in schedules]
            self._file.write(data)
        logger.debug(f"Created schedule {new.id} with {len(new.blocks)} blocks")
        return new
