#!/usr/bin/env python3
"""Today's-focus summary computed over the full task collection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Tuple

from buckets import BucketIndex, build_date_buckets
from models import Task, date_key
from task_flags import has_pending_reminder, is_task_overdue


@dataclass(frozen=True)
class TodayFocus:
    overdue_count: int
    due_today: Tuple[Task, ...]
    waiting_count: int
    reminder_count: int

    @property
    def due_today_count(self) -> int:
        return len(self.due_today)


def today_focus(
    tasks: Sequence[Task],
    *,
    buckets: Optional[BucketIndex] = None,
    now: Optional[datetime] = None,
) -> TodayFocus:
    """Summarise the unfiltered collection, independent of the active view.

    ``buckets`` should be the unfiltered index for ``tasks``; it is rebuilt
    when omitted.
    """
    now = now or datetime.now()
    today = now.date()
    if buckets is None:
        buckets = build_date_buckets(tasks)

    overdue_count = 0
    waiting_count = 0
    for task in tasks:
        if task.is_done:
            continue
        if is_task_overdue(task, today=today):
            overdue_count += 1
        if task.waiting_for_response:
            waiting_count += 1

    due_today = tuple(buckets.get(date_key(today), ()))
    reminder_count = sum(1 for task in due_today if has_pending_reminder(task, now=now))
    return TodayFocus(
        overdue_count=overdue_count,
        due_today=due_today,
        waiting_count=waiting_count,
        reminder_count=reminder_count,
    )


def format_focus_line(focus: TodayFocus) -> str:
    parts: Iterable[str] = (
        f"today: {focus.due_today_count}",
        f"overdue: {focus.overdue_count}",
        f"waiting: {focus.waiting_count}",
        f"reminders: {focus.reminder_count}",
    )
    return "   ".join(parts)


__all__ = ["TodayFocus", "today_focus", "format_focus_line"]
