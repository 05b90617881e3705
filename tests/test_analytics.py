from __future__ import annotations

from conftest import make_task

from task_dashboard.analytics import (
    build_view,
    completion_rate,
    filter_tasks,
    priority_distribution,
    sort_tasks,
    task_stats,
)
from task_dashboard.models import Priority, TaskStatus


def sample_tasks():
    return [
        make_task("1", "Write report", priority=Priority.HIGH, status=TaskStatus.IN_PROGRESS, due_in_days=3),
        make_task("2", "Buy milk", priority=Priority.LOW, status=TaskStatus.COMPLETED, due_in_days=1),
        make_task("3", "Call mom", priority=Priority.MEDIUM, due_in_days=2),
        make_task("4", "Archive mail", priority=Priority.HIGH, status=TaskStatus.COMPLETED, due_in_days=5),
    ]


def test_filter_keys() -> None:
    tasks = sample_tasks()
    assert [t.id for t in filter_tasks(tasks, "all")] == ["1", "2", "3", "4"]
    assert [t.id for t in filter_tasks(tasks, "active")] == ["1", "3"]
    assert [t.id for t in filter_tasks(tasks, "completed")] == ["2", "4"]
    assert [t.id for t in filter_tasks(tasks, "highPriority")] == ["1", "4"]
    assert [t.id for t in filter_tasks(tasks, "mediumPriority")] == ["3"]
    assert [t.id for t in filter_tasks(tasks, "lowPriority")] == ["2"]
    assert [t.id for t in filter_tasks(tasks, "high")] == ["1", "4"]


def test_filter_unknown_key_means_all_and_returns_subset() -> None:
    tasks = sample_tasks()
    result = filter_tasks(tasks, "nonsense")
    assert result == tasks
    assert result is not tasks

    for key in ("all", "active", "completed", "highPriority", "mediumPriority", "lowPriority"):
        filtered = filter_tasks(tasks, key)
        assert len({t.id for t in filtered}) == len(filtered)
        assert all(t in tasks for t in filtered)


def test_sort_by_due_date_and_title() -> None:
    tasks = sample_tasks()
    assert [t.id for t in sort_tasks(tasks, "dueDate")] == ["2", "3", "1", "4"]
    assert [t.title for t in sort_tasks(tasks, "title")] == ["Archive mail", "Buy milk", "Call mom", "Write report"]


def test_sort_by_priority_high_first() -> None:
    tasks = [
        make_task("h", priority=Priority.HIGH),
        make_task("l", priority=Priority.LOW),
        make_task("m", priority=Priority.MEDIUM),
    ]
    assert [t.priority for t in sort_tasks(tasks, "priority")] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]


def test_sort_is_stable_and_does_not_mutate() -> None:
    tasks = [
        make_task("a", priority=Priority.LOW),
        make_task("b", priority=Priority.HIGH),
        make_task("c", priority=Priority.LOW),
        make_task("d", priority=Priority.HIGH),
    ]
    original = list(tasks)
    assert [t.id for t in sort_tasks(tasks, "priority")] == ["b", "d", "a", "c"]
    assert tasks == original


def test_sort_unknown_key_keeps_order() -> None:
    tasks = sample_tasks()
    assert sort_tasks(tasks, "size") == tasks


def test_build_view_filters_before_sorting() -> None:
    view = build_view(sample_tasks(), "active", "priority")
    assert [t.id for t in view] == ["1", "3"]
    assert [t.id for t in build_view(sample_tasks())] == ["2", "3", "1", "4"]


def test_stats() -> None:
    stats = task_stats(sample_tasks())
    assert stats.total == 4
    assert stats.completed == 2
    assert stats.in_progress == 1
    assert stats.not_started == 1
    assert stats.completion_rate == 50


def test_stats_empty_collection() -> None:
    stats = task_stats([])
    assert stats.total == 0
    assert stats.completion_rate == 0


def test_completion_rate_rounds_half_up() -> None:
    tasks = [make_task(str(i), status=TaskStatus.COMPLETED if i == 0 else TaskStatus.NOT_STARTED) for i in range(8)]
    assert completion_rate(tasks) == 13
    assert completion_rate(tasks[:3]) == 33
    assert completion_rate([make_task("x", status=TaskStatus.COMPLETED)]) == 100


def test_priority_distribution() -> None:
    distribution = priority_distribution(sample_tasks())
    assert distribution[Priority.HIGH] == 2
    assert distribution[Priority.MEDIUM] == 1
    assert distribution[Priority.LOW] == 1


def test_sort_by_title_ignores_case_like_locale_compare() -> None:
    tasks = [make_task("1", "banana"), make_task("2", "Cherry"), make_task("3", "apple"), make_task("4", "Apple")]
    assert [t.title for t in sort_tasks(tasks, "title")] == ["apple", "Apple", "banana", "Cherry"]
