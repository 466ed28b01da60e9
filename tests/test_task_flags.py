from datetime import date, datetime, timedelta

from models import Subtask, Task, TaskReminder
from task_flags import (
    compute_flags,
    has_pending_reminder,
    initials,
    is_follow_up_overdue,
    is_task_overdue,
    priority_weight,
    subtask_progress,
)

NOW = datetime(2026, 3, 18, 9, 0)


def _waiting_task(hours_ago: float, threshold=None) -> Task:
    since = (NOW - timedelta(hours=hours_ago)).strftime("%Y-%m-%d %H:%M:%S")
    return Task(
        id="w",
        due_date="2026-03-20",
        waiting_for_response=True,
        waiting_since=since,
        follow_up_after_hours=threshold,
    )


def test_follow_up_uses_task_threshold_then_default() -> None:
    assert compute_flags(_waiting_task(50), now=NOW).follow_up_overdue
    assert not compute_flags(_waiting_task(50, threshold=72), now=NOW).follow_up_overdue
    assert not compute_flags(_waiting_task(47), now=NOW).follow_up_overdue
    assert compute_flags(_waiting_task(47), now=NOW, default_follow_up_hours=24).follow_up_overdue


def test_follow_up_boundary_is_inclusive() -> None:
    since = (NOW - timedelta(hours=48)).strftime("%Y-%m-%d %H:%M:%S")
    assert is_follow_up_overdue(since, None, now=NOW)


def test_follow_up_needs_waiting_since() -> None:
    assert not is_follow_up_overdue(None, 1, now=NOW)
    assert not is_follow_up_overdue("not a time", 1, now=NOW)


def test_overdue_compares_date_keys() -> None:
    today = date(2026, 3, 18)

    assert is_task_overdue(Task(id="a", due_date="2026-03-17T23:59:00"), today=today)
    assert not is_task_overdue(Task(id="b", due_date="2026-03-18"), today=today)
    assert not is_task_overdue(Task(id="c", due_date="2026-03-01", status="done"), today=today)
    assert not is_task_overdue(Task(id="d"), today=today)


def test_in_progress_hidden_when_overdue() -> None:
    overdue = Task(id="a", due_date="2026-03-10", status="in_progress")
    current = Task(id="b", due_date="2026-03-20", status="in_progress")

    assert not compute_flags(overdue, now=NOW).in_progress
    assert compute_flags(current, now=NOW).in_progress


def test_pending_reminders() -> None:
    future = Task(id="a", reminder_at="2026-03-19 08:00:00")
    past = Task(id="b", reminder_at="2026-03-17 08:00:00")
    listed = Task(id="c", reminders=[TaskReminder(id="r", status="pending")])
    sent = Task(id="d", reminders=[TaskReminder(id="r", status="sent")])

    assert has_pending_reminder(future, now=NOW)
    assert not has_pending_reminder(past, now=NOW)
    assert has_pending_reminder(listed, now=NOW)
    assert not has_pending_reminder(sent, now=NOW)


def test_subtasks_and_initials() -> None:
    task = Task(
        id="a",
        assigned_to="Ada Lovelace",
        subtasks=[Subtask(id="1", text="x", completed=True), Subtask(id="2", text="y")],
    )

    flags = compute_flags(task, now=NOW)

    assert flags.subtask_progress == "1/2"
    assert flags.has_incomplete_subtasks
    assert flags.initials == "AL"
    assert initials("bob") == "BO"
    assert initials("  ") == ""
    assert subtask_progress(Task(id="b")) is None


def test_priority_weight_orders_unknown_last() -> None:
    weights = [priority_weight(Task(id=p, priority=p)) for p in ("urgent", "high", "medium", "low", "", "someday")]
    assert weights == [0, 1, 2, 3, 4, 4]
