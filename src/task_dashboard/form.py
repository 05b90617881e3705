from __future__ import annotations

import asyncio
import logging
import warnings
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from task_dashboard.errors import DuplicateTagWarning
from task_dashboard.models import Priority, Task, normalize_tag, to_datetime
from task_dashboard.notifications import Notification, NotificationKind

if TYPE_CHECKING:
    from task_dashboard.service import TaskService

logger = logging.getLogger(__name__)

DEFAULT_SUBMIT_DELAY = 0.3


@dataclass(slots=True)
class TaskDraft:
    title: str = ""
    description: str = ""
    priority: Priority | str | None = Priority.MEDIUM
    due_date: datetime | date | str | None = None
    tags: list[str] = field(default_factory=list)


def validate(draft: TaskDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.title.strip():
        errors["title"] = "Title is required"
    if not draft.description.strip():
        errors["description"] = "Description is required"
    if draft.priority is not None and draft.priority not in {level.value for level in Priority}:
        errors["priority"] = "Priority is invalid"

    if draft.due_date is None or (isinstance(draft.due_date, str) and not draft.due_date.strip()):
        errors["dueDate"] = "Due date is required"
    else:
        try:
            to_datetime(draft.due_date)
        except ValueError:
            errors["dueDate"] = "Due date is invalid"
    return errors


def add_tag(tags: list[str], candidate: str) -> list[str]:
    tag = normalize_tag(candidate)
    if not tag:
        return list(tags)
    if tag in (normalize_tag(existing) for existing in tags):
        warnings.warn(f"tag already added: {tag}", DuplicateTagWarning, stacklevel=2)
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [existing for existing in tags if existing != tag]


def min_due_date(today: date | None = None) -> date:
    """Earliest date the form lets a user pick."""
    return (today or date.today()) + timedelta(days=1)


class TaskForm:
    def __init__(self, service: TaskService, delay: float = DEFAULT_SUBMIT_DELAY) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.service = service
        self.delay = delay
        self.draft = TaskDraft()
        self.errors: dict[str, str] = {}
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def set_field(self, name: str, value: object) -> None:
        if name == "tags":
            raise ValueError("use add_tag/remove_tag to edit tags")
        self.draft = replace(self.draft, **{name: value})
        self.errors.pop("dueDate" if name == "due_date" else name, None)

    def add_tag(self, candidate: str) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DuplicateTagWarning)
            self.draft.tags = add_tag(self.draft.tags, candidate)
        if any(issubclass(item.category, DuplicateTagWarning) for item in caught):
            self.service.notifier.notify(Notification(NotificationKind.INFO, "Tag already added"))

    def remove_tag(self, tag: str) -> None:
        self.draft.tags = remove_tag(self.draft.tags, tag)

    def reset(self) -> None:
        self.draft = TaskDraft()
        self.errors = {}

    async def submit(self) -> Task | None:
        if self._busy:
            logger.debug("Submit ignored: previous submission still pending")
            return None

        errors = validate(self.draft)
        if errors:
            self.errors = errors
            self.service.notifier.notify(Notification(NotificationKind.ERROR, "Please fill in all required fields"))
            return None

        self._busy = True
        try:
            await asyncio.sleep(self.delay)
            task = self.service.create(self.draft)
        finally:
            self._busy = False
        self.reset()
        return task
