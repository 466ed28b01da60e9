#!/usr/bin/env python3
"""View state machine and terminal app state for labcal."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Literal, Optional

from date_ranges import (
    GRANULARITIES,
    DateRange,
    header_key,
    header_label,
    month_weeks,
    shift_anchor,
    visible_range,
)
from models import Task

logger = logging.getLogger(__name__)

Direction = Literal["left", "right"]
OverlayKind = Literal["none", "help", "error", "message", "quick_add"]

SLIDE_OFFSET = 50


@dataclass(frozen=True)
class ViewTransition:
    """Slide animation descriptor; purely cosmetic, never gates state."""

    key: str
    direction: Direction
    enter_offset: int
    exit_offset: int


@dataclass
class ViewState:
    anchor: date = field(default_factory=date.today)
    granularity: str = "week"
    direction: Direction = "right"

    def __post_init__(self) -> None:
        if self.granularity not in GRANULARITIES:
            raise ValueError(f"Unknown granularity: {self.granularity}")

    def previous(self) -> None:
        self.direction = "left"
        self.anchor = shift_anchor(self.anchor, self.granularity, -1)
        logger.debug("view previous -> %s (%s)", self.anchor, self.granularity)

    def next(self) -> None:
        self.direction = "right"
        self.anchor = shift_anchor(self.anchor, self.granularity, +1)
        logger.debug("view next -> %s (%s)", self.anchor, self.granularity)

    def go_to_today(self, today: Optional[date] = None) -> None:
        self.jump_to_date(today or date.today())

    def jump_to_date(self, target: date) -> None:
        self.direction = "right" if target > self.anchor else "left"
        self.anchor = target

    def set_granularity(self, granularity: str) -> None:
        if granularity not in GRANULARITIES:
            raise ValueError(f"Unknown granularity: {granularity}")
        self.granularity = granularity

    def drill_to_day(self, target: date) -> None:
        self.jump_to_date(target)
        self.granularity = "day"
        logger.debug("drill to day %s", target)

    def visible_range(self) -> DateRange:
        return visible_range(self.anchor, self.granularity)

    def visible_dates(self) -> List[date]:
        return self.visible_range().days()

    def month_weeks(self) -> List[List[date]]:
        return month_weeks(self.anchor)

    def includes(self, day: date) -> bool:
        return day in self.visible_range()

    def includes_today(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        if self.granularity == "month":
            # Month view counts only days of the anchor month itself
            return (today.year, today.month) == (self.anchor.year, self.anchor.month)
        return self.includes(today)

    @property
    def month_key(self) -> tuple[int, int]:
        return (self.anchor.year, self.anchor.month)

    @property
    def label(self) -> str:
        return header_label(self.anchor, self.granularity)

    def transition(self) -> ViewTransition:
        sign = 1 if self.direction == "right" else -1
        return ViewTransition(
            key=header_key(self.anchor, self.granularity),
            direction=self.direction,
            enter_offset=sign * SLIDE_OFFSET,
            exit_offset=-sign * SLIDE_OFFSET,
        )


@dataclass
class AppState:
    overlay: OverlayKind = "none"
    overlay_message: str = ""
    tasks: List[Task] = field(default_factory=list)

    # Index into the focused date's bucket
    selected_task_index: int = 0
    quick_add_text: str = ""
    assignee_cursor: int = -1


__all__ = [
    "AppState",
    "ViewState",
    "ViewTransition",
    "Direction",
    "OverlayKind",
    "SLIDE_OFFSET",
]
