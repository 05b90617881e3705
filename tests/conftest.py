from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from task_dashboard.models import Priority, Task, TaskStatus
from task_dashboard.notifications import Notification
from task_dashboard.service import TaskService
from task_dashboard.storage import MemoryBackend, TaskStore

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.events.append(notification)


class FailingBackend(MemoryBackend):
    """Reads work, writes fail like a full quota."""

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


def make_task(
    task_id: str,
    title: str = "Task",
    *,
    status: TaskStatus = TaskStatus.NOT_STARTED,
    priority: Priority = Priority.MEDIUM,
    due_in_days: int = 1,
    tags: list[str] | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title,
        description=f"{title} details",
        status=status,
        priority=priority,
        due_date=BASE + timedelta(days=due_in_days),
        created_at=BASE,
        tags=tags or ["general"],
    )


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def store() -> TaskStore:
    empty = TaskStore(MemoryBackend(), seed=list)
    empty.load()
    return empty


@pytest.fixture()
def service(store: TaskStore, notifier: RecordingNotifier) -> TaskService:
    return TaskService(store, notifier)
