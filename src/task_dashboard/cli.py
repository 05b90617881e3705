from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime

from task_dashboard.analytics import DEFAULT_FILTER, DEFAULT_SORT, SORT_KEYS, build_view, priority_distribution, task_stats
from task_dashboard.config import Settings
from task_dashboard.errors import NotFoundError, PersistenceWriteError
from task_dashboard.form import TaskForm, min_due_date
from task_dashboard.logging_setup import setup_logging
from task_dashboard.models import Priority, TaskStatus, available_actions
from task_dashboard.notifications import Notification
from task_dashboard.service import TaskService
from task_dashboard.storage import FileBackend, TaskStore


class ConsoleNotifier:
    def notify(self, notification: Notification) -> None:
        print(f"{notification.kind}: {notification.message}")


def format_date(value: datetime) -> str:
    return value.strftime("%b %d, %Y")


def build_service(settings: Settings) -> TaskService:
    store = TaskStore(FileBackend(settings.data_dir), key=settings.storage_key)
    store.load_or_seed()
    return TaskService(store, ConsoleNotifier())


def cmd_add(args: argparse.Namespace, settings: Settings) -> int:
    service = build_service(settings)
    form = TaskForm(service, delay=settings.submit_delay)
    form.set_field("title", args.title)
    form.set_field("description", args.description)
    form.set_field("priority", Priority(args.priority))
    form.set_field("due_date", args.due)
    for tag in args.tag:
        form.add_tag(tag)

    task = asyncio.run(form.submit())
    if task is None:
        for field_name, message in form.errors.items():
            print(f"  {field_name}: {message}")
        return 1
    print(f"created: {task.id}")
    return 0


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    service = build_service(settings)
    tasks = build_view(service.store.tasks, args.filter, args.sort)
    if not tasks:
        print("no tasks match your filters")
        return 0

    for task in tasks:
        state = "x" if task.status == TaskStatus.COMPLETED else " "
        tags = " ".join(f"#{tag}" for tag in task.tags)
        actions = ", ".join(label for label, _status in available_actions(task.status))
        print(f"[{state}] ({task.priority}) {task.id} {task.title} [{task.status}] due {format_date(task.due_date)} {tags}")
        print(f"      {task.description}")
        print(f"      actions: {actions}")
    return 0


def _set_status(task_id: str, status: TaskStatus, settings: Settings) -> int:
    service = build_service(settings)
    try:
        service.update_status(task_id, status)
    except NotFoundError:
        print("not found")
        return 1
    return 0


def cmd_start(args: argparse.Namespace, settings: Settings) -> int:
    return _set_status(args.task_id, TaskStatus.IN_PROGRESS, settings)


def cmd_complete(args: argparse.Namespace, settings: Settings) -> int:
    return _set_status(args.task_id, TaskStatus.COMPLETED, settings)


def cmd_reopen(args: argparse.Namespace, settings: Settings) -> int:
    return _set_status(args.task_id, TaskStatus.NOT_STARTED, settings)


def cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    return _set_status(args.task_id, TaskStatus(args.status), settings)


def cmd_delete(args: argparse.Namespace, settings: Settings) -> int:
    service = build_service(settings)
    service.delete(args.task_id)
    return 0


def cmd_stats(_args: argparse.Namespace, settings: Settings) -> int:
    service = build_service(settings)
    stats = task_stats(service.store.tasks)
    print(
        f"total={stats.total} completed={stats.completed} in_progress={stats.in_progress} "
        f"not_started={stats.not_started} rate={stats.completion_rate}%"
    )
    distribution = priority_distribution(service.store.tasks)
    print("priorities=" + " ".join(f"{level}:{count}" for level, count in distribution.items()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task-dashboard", description="Task Dashboard CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="add task")
    add.add_argument("title")
    add.add_argument("-d", "--description", default="")
    add.add_argument("-p", "--priority", choices=[p.value for p in Priority], default=Priority.MEDIUM.value)
    add.add_argument("--due", help=f"due date, YYYY-MM-DD (earliest suggested: {min_due_date().isoformat()})")
    add.add_argument("--tag", action="append", default=[])
    add.set_defaults(handler=cmd_add)

    show = sub.add_parser("list", help="list tasks")
    show.add_argument("--filter", default=DEFAULT_FILTER, help="all, active, completed, highPriority, ...")
    show.add_argument("--sort", default=DEFAULT_SORT, choices=SORT_KEYS)
    show.set_defaults(handler=cmd_list)

    for name, handler, help_text in (
        ("start", cmd_start, "mark task as in progress"),
        ("complete", cmd_complete, "mark task as completed"),
        ("reopen", cmd_reopen, "mark task as not started"),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument("task_id")
        command.set_defaults(handler=handler)

    status = sub.add_parser("status", help="set any task status")
    status.add_argument("task_id")
    status.add_argument("status", choices=[s.value for s in TaskStatus])
    status.set_defaults(handler=cmd_status)

    delete = sub.add_parser("delete", help="delete task")
    delete.add_argument("task_id")
    delete.set_defaults(handler=cmd_delete)

    stats = sub.add_parser("stats", help="show statistics")
    stats.set_defaults(handler=cmd_stats)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()
    setup_logging(
        console_level=settings.log_level,
        log_dir=settings.log_dir if settings.log_to_file else None,
    )

    handler = args.handler
    try:
        return int(handler(args, settings))
    except PersistenceWriteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
