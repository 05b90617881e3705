from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Protocol, Sequence

from task_dashboard.errors import LoadError, NotFoundError, PersistenceWriteError
from task_dashboard.models import Priority, Task, TaskStatus, utc_now

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tasks"

Listener = Callable[[tuple[Task, ...]], None]


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class MemoryBackend:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileBackend:
    """One UTF-8 file per key under `root`."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")


def seed_tasks(now: datetime | None = None) -> list[Task]:
    """Demonstration tasks shown on first run."""
    now = now or utc_now()
    day = timedelta(days=1)
    return [
        Task(
            id="1",
            title="Review project proposal",
            description="Go through the new client project proposal and provide feedback",
            status=TaskStatus.IN_PROGRESS,
            priority=Priority.HIGH,
            due_date=now + 2 * day,
            created_at=now,
            tags=["work", "client"],
        ),
        Task(
            id="2",
            title="Prepare weekly report",
            description="Compile data and prepare the weekly progress report",
            status=TaskStatus.NOT_STARTED,
            priority=Priority.MEDIUM,
            due_date=now + day,
            created_at=now - day,
            tags=["work", "report"],
        ),
        Task(
            id="3",
            title="Buy groceries",
            description="Get milk, eggs, bread, and vegetables",
            status=TaskStatus.COMPLETED,
            priority=Priority.LOW,
            due_date=now - day,
            created_at=now - 2 * day,
            tags=["personal", "shopping"],
        ),
    ]


def dumps_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)


def loads_tasks(text: str) -> list[Task]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadError(f"stored tasks are not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise LoadError("stored tasks must be a JSON list")

    tasks: list[Task] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise LoadError(f"task #{index} is not an object")
        try:
            tasks.append(Task.from_dict(item))
        except (KeyError, TypeError, ValueError) as exc:
            raise LoadError(f"task #{index} is malformed: {exc!r}") from exc

    ids = [task.id for task in tasks]
    if len(set(ids)) != len(ids):
        raise LoadError("stored tasks contain duplicate ids")
    return tasks


class TaskStore:
    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_KEY,
        seed: Callable[[], list[Task]] = seed_tasks,
    ) -> None:
        self.backend = backend
        self.key = key
        self._seed = seed
        self._tasks: tuple[Task, ...] = ()
        self._listeners: list[Listener] = []

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def load(self) -> list[Task]:
        raw = self.backend.get(self.key)
        if raw is None:
            tasks = self._seed()
            logger.info("No stored tasks under key=%s; seeded %d example tasks", self.key, len(tasks))
        else:
            tasks = loads_tasks(raw)
            logger.debug("Loaded %d tasks from key=%s", len(tasks), self.key)
        self._tasks = tuple(tasks)
        return list(tasks)

    def load_or_seed(self) -> list[Task]:
        try:
            return self.load()
        except LoadError as exc:
            logger.warning("Stored tasks under key=%s are unreadable (%s); using example tasks", self.key, exc)
            self._tasks = tuple(self._seed())
            return list(self._tasks)

    def get(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(task_id)

    def replace(self, tasks: Sequence[Task]) -> None:
        new_tasks = tuple(tasks)
        ids = [task.id for task in new_tasks]
        if len(set(ids)) != len(ids):
            raise ValueError("task ids must be unique")

        payload = dumps_tasks(new_tasks)
        self._tasks = new_tasks
        try:
            self.backend.set(self.key, payload)
        except OSError as exc:
            logger.exception("Failed to persist %d tasks under key=%s", len(new_tasks), self.key)
            raise PersistenceWriteError(f"could not save tasks: {exc}") from exc
        finally:
            for listener in list(self._listeners):
                listener(new_tasks)
        logger.debug("Saved %d tasks under key=%s", len(new_tasks), self.key)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
