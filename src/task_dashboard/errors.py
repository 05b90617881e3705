from __future__ import annotations

from collections.abc import Mapping


class TaskDashboardError(Exception):
    """Base class for recoverable task-dashboard errors."""


class ValidationError(TaskDashboardError):
    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class LoadError(TaskDashboardError):
    """Persisted collection exists but does not have the expected shape."""


class NotFoundError(TaskDashboardError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")


class PersistenceWriteError(TaskDashboardError):
    """Backend write failed; the in-memory collection is still authoritative."""


class DuplicateTagWarning(UserWarning):
    pass
