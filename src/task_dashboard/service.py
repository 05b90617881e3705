from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from task_dashboard.errors import ValidationError
from task_dashboard.form import TaskDraft, validate
from task_dashboard.models import Priority, Task, TaskStatus, normalize_tags, to_datetime, utc_now
from task_dashboard.notifications import LoggingNotifier, Notification, NotificationKind, NotificationSink
from task_dashboard.storage import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, store: TaskStore, notifier: NotificationSink | None = None) -> None:
        self.store = store
        self.notifier = notifier or LoggingNotifier()

    def _notify(self, kind: NotificationKind, message: str) -> None:
        self.notifier.notify(Notification(kind, message))

    def create(self, draft: TaskDraft) -> Task:
        errors = validate(draft)
        if errors or draft.due_date is None:
            raise ValidationError(errors)

        task = Task(
            id=uuid4().hex,
            title=draft.title.strip(),
            description=draft.description.strip(),
            status=TaskStatus.NOT_STARTED,
            priority=Priority.MEDIUM if draft.priority is None else Priority(draft.priority),
            due_date=to_datetime(draft.due_date),
            created_at=utc_now(),
            tags=normalize_tags(draft.tags),
        )
        self.store.replace([*self.store.tasks, task])
        logger.info("Task created id=%s priority=%s due=%s", task.id, task.priority, task.due_date.date())
        self._notify(NotificationKind.SUCCESS, "Task added successfully!")
        return task

    def update_status(self, task_id: str, status: TaskStatus) -> Task:
        current = self.store.get(task_id)
        updated = replace(current, status=TaskStatus(status))
        self.store.replace([updated if task.id == task_id else task for task in self.store.tasks])
        logger.info("Task status id=%s %s -> %s", task_id, current.status, updated.status)
        self._notify(NotificationKind.INFO, f"Task marked as {updated.status}")
        return updated

    def delete(self, task_id: str) -> bool:
        tasks = self.store.tasks
        kept = [task for task in tasks if task.id != task_id]
        removed = len(kept) != len(tasks)
        if removed:
            self.store.replace(kept)
            logger.info("Task deleted id=%s", task_id)
        else:
            logger.debug("Delete of unknown task id=%s ignored", task_id)
        self._notify(NotificationKind.ERROR, "Task deleted")
        return removed

