from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import StrEnum
from typing import Any

DEFAULT_TAG = "general"


class TaskStatus(StrEnum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_datetime(value: datetime | date | str) -> datetime:
    """Naive values are taken as UTC, the way a browser reads "YYYY-MM-DD"."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise ValueError(f"not a date value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_tag(raw: str) -> str:
    return raw.strip().lower()


def normalize_tags(tags: list[str] | tuple[str, ...]) -> list[str]:
    out: list[str] = []
    for raw in tags:
        tag = normalize_tag(raw)
        if tag and tag not in out:
            out.append(tag)
    return out or [DEFAULT_TAG]


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    due_date: datetime
    created_at: datetime
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: Priority = Priority.MEDIUM
    tags: list[str] = field(default_factory=lambda: [DEFAULT_TAG])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Task":
        """Raises KeyError, TypeError or ValueError when `raw` has the wrong shape."""
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            description=str(raw.get("description", "")),
            status=TaskStatus(raw["status"]),
            priority=Priority(raw.get("priority", Priority.MEDIUM.value)),
            due_date=_stored_datetime(raw["dueDate"]),
            created_at=_stored_datetime(raw["createdAt"]),
            tags=[str(item) for item in raw.get("tags", [])],
        )


def _stored_datetime(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise TypeError(f"date must be stored as text, got {type(raw).__name__}")
    return to_datetime(raw)


# Buttons the dashboard offers per status. The mutation API itself accepts any transition.
_ACTIONS: dict[TaskStatus, list[tuple[str, TaskStatus]]] = {
    TaskStatus.NOT_STARTED: [
        ("Mark Complete", TaskStatus.COMPLETED),
        ("Start Task", TaskStatus.IN_PROGRESS),
    ],
    TaskStatus.IN_PROGRESS: [("Mark Complete", TaskStatus.COMPLETED)],
    TaskStatus.COMPLETED: [("Reopen", TaskStatus.NOT_STARTED)],
}


def available_actions(status: TaskStatus) -> list[tuple[str, TaskStatus]]:
    return list(_ACTIONS[status])
