#!/usr/bin/env python3
"""Arrow-key cursor over the month grid."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional

from ui_base import clamp

GRID_COLUMNS = 7

ActivateCallback = Callable[[date], None]
ScrollCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class GridCursor:
    row: int
    col: int


class KeyboardGridNavigator:
    """Cursor automaton over a 7-column grid of dates.

    Up/Down clamp, Left/Right wrap across row boundaries and stop at the
    grid corners.
    """

    def __init__(
        self,
        weeks: List[List[date]],
        *,
        anchor: date,
        on_activate: Optional[ActivateCallback] = None,
        on_scroll: Optional[ScrollCallback] = None,
    ) -> None:
        self.weeks = weeks
        self.anchor = anchor
        self.on_activate = on_activate
        self.on_scroll = on_scroll
        self.cursor: Optional[GridCursor] = None

    @property
    def last_row(self) -> int:
        return max(0, len(self.weeks) - 1)

    def reset(self, weeks: List[List[date]], anchor: date) -> None:
        self.weeks = weeks
        self.anchor = anchor
        self.cursor = None

    def focus(self, today: Optional[date] = None) -> GridCursor:
        if self.cursor is None:
            return self._set(self._initial_cursor(today or date.today()))
        return self.cursor

    def _initial_cursor(self, today: date) -> GridCursor:
        for row, week in enumerate(self.weeks):
            for col, day in enumerate(week):
                if day == today:
                    return GridCursor(row, col)
        for row, week in enumerate(self.weeks):
            for col, day in enumerate(week):
                if (day.year, day.month) == (self.anchor.year, self.anchor.month):
                    return GridCursor(row, col)
        return GridCursor(0, 0)

    def handle_key(self, key: str) -> bool:
        if key == "Escape":
            self.cursor = None
            return True
        if key == "Enter":
            return self.activate()
        if key not in ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight"):
            return False

        current = self.cursor or GridCursor(0, 0)
        row, col = current.row, current.col
        if key == "ArrowUp":
            row = clamp(row - 1, 0, self.last_row)
        elif key == "ArrowDown":
            row = clamp(row + 1, 0, self.last_row)
        elif key == "ArrowLeft":
            if col == 0:
                if row > 0:
                    row -= 1
                    col = GRID_COLUMNS - 1
            else:
                col -= 1
        elif key == "ArrowRight":
            if col == GRID_COLUMNS - 1:
                if row < self.last_row:
                    row += 1
                    col = 0
            else:
                col += 1
        self._set(GridCursor(row, col))
        return True

    def activate(self) -> bool:
        day = self.current_date()
        if day is None:
            return False
        if self.on_activate is not None:
            self.on_activate(day)
        return True

    def current_date(self) -> Optional[date]:
        if self.cursor is None:
            return None
        if self.cursor.row >= len(self.weeks):
            return None
        week = self.weeks[self.cursor.row]
        if self.cursor.col >= len(week):
            return None
        return week[self.cursor.col]

    def _set(self, cursor: GridCursor) -> GridCursor:
        self.cursor = cursor
        if self.on_scroll is not None:
            self.on_scroll(cursor.row, cursor.col)
        return cursor


def scroll_offset_for(row: int, offset: int, viewport_rows: int) -> int:
    """Nearest-edge scrolling: move the viewport only as far as needed."""
    if viewport_rows <= 0:
        return offset
    if row < offset:
        return row
    if row >= offset + viewport_rows:
        return row - viewport_rows + 1
    return offset


__all__ = [
    "GRID_COLUMNS",
    "GridCursor",
    "KeyboardGridNavigator",
    "scroll_offset_for",
]
