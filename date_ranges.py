#!/usr/bin/env python3
"""Date range helpers for calendar views (weeks start on Sunday)."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Literal

Granularity = Literal["day", "week", "month"]
GRANULARITIES = ("day", "week", "month")

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def days(self) -> List[date]:
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=offset) for offset in range(max(0, count))]


def start_of_week(day: date) -> date:
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    next_month = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def add_months(day: date, delta_months: int) -> date:
    year = day.year + ((day.month - 1 + delta_months) // 12)
    month = (day.month - 1 + delta_months) % 12 + 1
    # Clamp day to end of target month
    _, max_day = calendar.monthrange(year, month)
    return date(year, month, min(day.day, max_day))


def shift_anchor(anchor: date, granularity: str, steps: int) -> date:
    if granularity == "day":
        return anchor + timedelta(days=steps)
    if granularity == "week":
        return anchor + timedelta(days=7 * steps)
    if granularity == "month":
        return add_months(anchor, steps)
    raise ValueError(f"Unknown granularity: {granularity}")


def month_weeks(anchor: date) -> List[List[date]]:
    """Sunday-start weeks intersecting the anchor's month, 7 dates per row."""
    grid_start = start_of_week(start_of_month(anchor))
    grid_end = end_of_week(end_of_month(anchor))
    days = DateRange(grid_start, grid_end).days()
    return [days[idx : idx + 7] for idx in range(0, len(days), 7)]


def visible_range(anchor: date, granularity: str) -> DateRange:
    if granularity == "day":
        return DateRange(anchor, anchor)
    if granularity == "week":
        return DateRange(start_of_week(anchor), end_of_week(anchor))
    if granularity == "month":
        return DateRange(
            start_of_week(start_of_month(anchor)),
            end_of_week(end_of_month(anchor)),
        )
    raise ValueError(f"Unknown granularity: {granularity}")


def header_label(anchor: date, granularity: str) -> str:
    if granularity == "month":
        return f"{calendar.month_name[anchor.month]} {anchor.year}"
    if granularity == "week":
        week_start = start_of_week(anchor)
        week_end = end_of_week(anchor)
        start_text = f"{calendar.month_abbr[week_start.month]} {week_start.day}"
        if week_start.month == week_end.month:
            return f"{start_text} – {week_end.day}, {week_end.year}"
        return (
            f"{start_text} – {calendar.month_abbr[week_end.month]} "
            f"{week_end.day}, {week_end.year}"
        )
    if granularity == "day":
        return (
            f"{calendar.day_name[anchor.weekday()]}, "
            f"{calendar.month_name[anchor.month]} {anchor.day}, {anchor.year}"
        )
    raise ValueError(f"Unknown granularity: {granularity}")


def header_key(anchor: date, granularity: str) -> str:
    if granularity == "month":
        return anchor.strftime("%Y-%m")
    if granularity == "week":
        return start_of_week(anchor).strftime("%Y-%m-%d")
    if granularity == "day":
        return anchor.strftime("%Y-%m-%d")
    raise ValueError(f"Unknown granularity: {granularity}")


def short_date_label(day: date) -> str:
    return f"{calendar.month_abbr[day.month]} {day.day}, {day.year}"


__all__ = [
    "DateRange",
    "Granularity",
    "GRANULARITIES",
    "WEEKDAY_NAMES",
    "start_of_week",
    "end_of_week",
    "start_of_month",
    "end_of_month",
    "add_months",
    "shift_anchor",
    "month_weeks",
    "visible_range",
    "header_label",
    "header_key",
    "short_date_label",
]
