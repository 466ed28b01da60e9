#!/usr/bin/env python3
"""Per-task predicates shared by the renderers and the focus summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from models import (
    DEFAULT_FOLLOW_UP_HOURS,
    PRIORITY_ORDER,
    UNKNOWN_PRIORITY_WEIGHT,
    Task,
    date_key,
    due_date_key,
    parse_optional_datetime,
)


def priority_weight(task: Task) -> int:
    return PRIORITY_ORDER.get(task.priority or "", UNKNOWN_PRIORITY_WEIGHT)


def is_task_overdue(task: Task, *, today: Optional[date] = None) -> bool:
    """Due strictly before today, compared on the date key only."""
    if task.is_done:
        return False
    key = due_date_key(task)
    if key is None:
        return False
    today_key = date_key(today or date.today())
    return key < today_key


def is_follow_up_overdue(
    waiting_since: Optional[str],
    follow_up_after_hours: Optional[float],
    *,
    now: Optional[datetime] = None,
    default_hours: float = DEFAULT_FOLLOW_UP_HOURS,
) -> bool:
    since = parse_optional_datetime(waiting_since)
    if since is None:
        return False
    now = now or datetime.now()
    elapsed_hours = (now - since).total_seconds() / 3600.0
    threshold = default_hours if follow_up_after_hours is None else follow_up_after_hours
    return elapsed_hours >= threshold


def task_follow_up_overdue(
    task: Task,
    *,
    now: Optional[datetime] = None,
    default_hours: float = DEFAULT_FOLLOW_UP_HOURS,
) -> bool:
    if not task.waiting_for_response:
        return False
    return is_follow_up_overdue(
        task.waiting_since,
        task.follow_up_after_hours,
        now=now,
        default_hours=default_hours,
    )


def has_pending_reminder(task: Task, *, now: Optional[datetime] = None) -> bool:
    reminder_at = parse_optional_datetime(task.reminder_at)
    if reminder_at is not None and reminder_at > (now or datetime.now()):
        return True
    return any(reminder.status == "pending" for reminder in task.reminders)


def subtask_progress(task: Task) -> Optional[str]:
    if not task.subtasks:
        return None
    done = sum(1 for subtask in task.subtasks if subtask.completed)
    return f"{done}/{len(task.subtasks)}"


def has_incomplete_subtasks(task: Task) -> bool:
    return any(not subtask.completed for subtask in task.subtasks)


def initials(name: Optional[str]) -> str:
    if not name or not name.strip():
        return ""
    parts = name.split()
    if len(parts) >= 2:
        return (parts[0][0] + parts[-1][0]).upper()
    return name.strip()[:2].upper()


@dataclass(frozen=True)
class TaskFlags:
    is_overdue: bool
    follow_up_overdue: bool
    has_pending_reminder: bool
    has_incomplete_subtasks: bool
    in_progress: bool
    subtask_progress: Optional[str]
    initials: str


def compute_flags(
    task: Task,
    *,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
    default_follow_up_hours: float = DEFAULT_FOLLOW_UP_HOURS,
) -> TaskFlags:
    now = now or datetime.now()
    today = today or now.date()
    overdue = is_task_overdue(task, today=today)
    return TaskFlags(
        is_overdue=overdue,
        follow_up_overdue=task_follow_up_overdue(
            task, now=now, default_hours=default_follow_up_hours
        ),
        has_pending_reminder=has_pending_reminder(task, now=now),
        has_incomplete_subtasks=has_incomplete_subtasks(task),
        in_progress=task.status == "in_progress" and not overdue,
        subtask_progress=subtask_progress(task),
        initials=initials(task.assigned_to),
    )


__all__ = [
    "TaskFlags",
    "compute_flags",
    "priority_weight",
    "is_task_overdue",
    "is_follow_up_overdue",
    "task_follow_up_overdue",
    "has_pending_reminder",
    "subtask_progress",
    "has_incomplete_subtasks",
    "initials",
]
