#!/usr/bin/env python3
"""Time-range validation for equipment bookings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Union

TimeLike = Union[str, time, datetime]


@dataclass(frozen=True)
class BookingCheck:
    valid: bool
    error: Optional[str] = None


def _parse_time(value: TimeLike) -> Optional[time]:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return time.fromisoformat(text)
    except ValueError:
        return None


def validate_booking_range(start: TimeLike, end: TimeLike) -> BookingCheck:
    """Reject zero-length and inverted ranges before anything is committed.

    Missing fields are not an error yet (the form is still being filled).
    """
    if isinstance(start, datetime) and isinstance(end, datetime):
        start_value: object = start
        end_value: object = end
    else:
        start_value = _parse_time(start)
        end_value = _parse_time(end)
        if start_value is None or end_value is None:
            if str(start or "").strip() and str(end or "").strip():
                return BookingCheck(False, "Start and end times must be HH:MM.")
            return BookingCheck(False)
    if start_value == end_value:
        return BookingCheck(False, "Start and end times cannot be the same.")
    if end_value < start_value:  # type: ignore[operator]
        return BookingCheck(False, "End time must be after start time.")
    return BookingCheck(True)


__all__ = ["BookingCheck", "validate_booking_range"]
