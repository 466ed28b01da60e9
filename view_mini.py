#!/usr/bin/env python3
"""Read-only mini month that mirrors the main view's anchor."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from buckets import BucketIndex
from date_ranges import month_weeks
from models import date_key


@dataclass(frozen=True)
class MiniDay:
    day: date
    key: str
    has_tasks: bool
    is_current_month: bool
    is_selected: bool
    is_today: bool


@dataclass(frozen=True)
class MiniCalendar:
    label: str
    days: Tuple[MiniDay, ...]


def project_mini_calendar(anchor: date, buckets: BucketIndex, *, today: date) -> MiniCalendar:
    """No state of its own: the displayed month always comes from ``anchor``."""
    days = []
    for week in month_weeks(anchor):
        for day in week:
            key = date_key(day)
            days.append(
                MiniDay(
                    day=day,
                    key=key,
                    has_tasks=bool(buckets.get(key)),
                    is_current_month=(day.year, day.month) == (anchor.year, anchor.month),
                    is_selected=day == anchor,
                    is_today=day == today,
                )
            )
    return MiniCalendar(
        label=f"{calendar.month_abbr[anchor.month]} {anchor.year}",
        days=tuple(days),
    )


def mini_lines(mini: MiniCalendar) -> list[str]:
    lines = [mini.label.center(20), " S  M  T  W  T  F  S"]
    row = []
    for cell in mini.days:
        if not cell.is_current_month:
            text = "  "
        else:
            text = f"{cell.day.day:2d}"
        row.append(text)
        if len(row) == 7:
            lines.append(" ".join(row))
            row = []
    return lines


__all__ = ["MiniCalendar", "MiniDay", "project_mini_calendar", "mini_lines"]
