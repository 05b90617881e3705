from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Iterable

from task_dashboard.models import Priority, Task, TaskStatus

DEFAULT_FILTER = "all"
DEFAULT_SORT = "dueDate"

_PRIORITY_ORDER = {Priority.HIGH: 1, Priority.MEDIUM: 2, Priority.LOW: 3}

_FILTERS: dict[str, Callable[[Task], bool]] = {
    "all": lambda task: True,
    "active": lambda task: task.status != TaskStatus.COMPLETED,
    "completed": lambda task: task.status == TaskStatus.COMPLETED,
    "highPriority": lambda task: task.priority == Priority.HIGH,
    "mediumPriority": lambda task: task.priority == Priority.MEDIUM,
    "lowPriority": lambda task: task.priority == Priority.LOW,
}
_FILTERS["high"] = _FILTERS["highPriority"]
_FILTERS["medium"] = _FILTERS["mediumPriority"]
_FILTERS["low"] = _FILTERS["lowPriority"]

_SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    "dueDate": lambda task: task.due_date,
    "priority": lambda task: _PRIORITY_ORDER[task.priority],
    # lowercase before uppercase on ties, like localeCompare
    "title": lambda task: (task.title.casefold(), task.title.swapcase()),
}

FILTER_KEYS = tuple(_FILTERS)
SORT_KEYS = tuple(_SORT_KEYS)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    not_started: int
    completion_rate: int


def filter_tasks(tasks: Iterable[Task], key: str) -> list[Task]:
    predicate = _FILTERS.get(key, _FILTERS["all"])
    return [task for task in tasks if predicate(task)]


def sort_tasks(tasks: Iterable[Task], key: str) -> list[Task]:
    sort_key = _SORT_KEYS.get(key)
    if sort_key is None:
        return list(tasks)
    return sorted(tasks, key=sort_key)


def build_view(tasks: Iterable[Task], filter_key: str = DEFAULT_FILTER, sort_key: str = DEFAULT_SORT) -> list[Task]:
    return sort_tasks(filter_tasks(tasks, filter_key), sort_key)


def completion_rate(tasks: Iterable[Task]) -> int:
    task_list = list(tasks)
    if not task_list:
        return 0
    done = sum(1 for task in task_list if task.status == TaskStatus.COMPLETED)
    # round half up
    return (done * 200 + len(task_list)) // (2 * len(task_list))


def priority_distribution(tasks: Iterable[Task]) -> dict[Priority, int]:
    distribution = {level: 0 for level in Priority}
    for task in tasks:
        distribution[task.priority] += 1
    return distribution


def task_stats(tasks: Iterable[Task]) -> TaskStats:
    task_list = list(tasks)
    by_status = {status: 0 for status in TaskStatus}
    for task in task_list:
        by_status[task.status] += 1
    return TaskStats(
        total=len(task_list),
        completed=by_status[TaskStatus.COMPLETED],
        in_progress=by_status[TaskStatus.IN_PROGRESS],
        not_started=by_status[TaskStatus.NOT_STARTED],
        completion_rate=completion_rate(task_list),
    )
