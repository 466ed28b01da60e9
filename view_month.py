#!/usr/bin/env python3
"""Month view projection and rendering."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from buckets import BucketIndex
from date_ranges import WEEKDAY_NAMES, header_label, month_weeks
from grid_nav import GridCursor, scroll_offset_for
from models import date_key
from state import ViewTransition
from view_common import (
    HeatLevel,
    PopupList,
    RenderContext,
    TaskChip,
    chip_attr,
    chip_line,
    heat_level,
    make_chip,
    make_chips,
    popup_for,
    write,
)

MONTH_PREVIEW_LIMIT = 3


@dataclass(frozen=True)
class DayCell:
    day: date
    key: str
    row: int
    col: int
    is_today: bool
    is_current_month: bool
    is_focused: bool
    is_drop_target: bool
    task_count: int
    previews: Tuple[TaskChip, ...]
    overflow: int
    heat: HeatLevel

    @property
    def label(self) -> str:
        """Screen-reader style description, e.g. "Monday, June 9, 2025, 3 tasks"."""
        text = f"{self.day:%A}, {self.day:%B} {self.day.day}, {self.day.year}"
        if self.task_count:
            noun = "task" if self.task_count == 1 else "tasks"
            text += f", {self.task_count} {noun}"
        return text


@dataclass(frozen=True)
class MonthProjection:
    label: str
    anchor: date
    transition: ViewTransition
    weeks: Tuple[Tuple[DayCell, ...], ...]
    is_dragging: bool
    drag_overlay: Optional[TaskChip]
    popup: Optional[PopupList]
    selected_key: Optional[str] = None
    selected_chips: Tuple[TaskChip, ...] = ()

    def cell_at(self, row: int, col: int) -> Optional[DayCell]:
        if 0 <= row < len(self.weeks) and 0 <= col < len(self.weeks[row]):
            return self.weeks[row][col]
        return None

    def find(self, key: str) -> Optional[DayCell]:
        for week in self.weeks:
            for cell in week:
                if cell.key == key:
                    return cell
        return None


class MonthView:
    def __init__(
        self,
        buckets: BucketIndex,
        *,
        preview_limit: int = MONTH_PREVIEW_LIMIT,
    ) -> None:
        self.buckets = buckets
        self.preview_limit = preview_limit

    def project(
        self,
        anchor: date,
        ctx: RenderContext,
        *,
        transition: ViewTransition,
        cursor: Optional[GridCursor] = None,
        weeks: Optional[List[List[date]]] = None,
        selected_key: Optional[str] = None,
    ) -> MonthProjection:
        weeks = weeks if weeks is not None else month_weeks(anchor)
        candidate = ctx.drag.candidate_key if ctx.drag is not None else None
        rows: List[Tuple[DayCell, ...]] = []
        popup: Optional[PopupList] = None
        overlay: Optional[TaskChip] = None

        for row_idx, week in enumerate(weeks):
            cells: List[DayCell] = []
            for col_idx, day in enumerate(week):
                key = date_key(day)
                day_tasks = self.buckets.get(key, ())
                is_current_month = (day.year, day.month) == (anchor.year, anchor.month)
                is_today = day == ctx.today
                is_drop_target = candidate == key
                cells.append(
                    DayCell(
                        day=day,
                        key=key,
                        row=row_idx,
                        col=col_idx,
                        is_today=is_today,
                        is_current_month=is_current_month,
                        is_focused=(
                            cursor is not None
                            and cursor.row == row_idx
                            and cursor.col == col_idx
                        ),
                        is_drop_target=is_drop_target,
                        task_count=len(day_tasks),
                        previews=make_chips(day_tasks[: self.preview_limit], ctx),
                        overflow=max(0, len(day_tasks) - self.preview_limit),
                        heat=(
                            heat_level(len(day_tasks))
                            if is_current_month and not is_today and not is_drop_target
                            else "none"
                        ),
                    )
                )
                if popup is None:
                    popup = popup_for(key, day_tasks, ctx)
                if overlay is None and ctx.drag is not None:
                    for task in day_tasks:
                        if task.id == ctx.drag.task_id:
                            overlay = make_chip(task, ctx)
                            break
            rows.append(tuple(cells))

        return MonthProjection(
            label=header_label(anchor, "month"),
            anchor=anchor,
            transition=transition,
            weeks=tuple(rows),
            is_dragging=ctx.is_dragging,
            drag_overlay=overlay,
            popup=popup,
            selected_key=selected_key,
            selected_chips=(
                make_chips(self.buckets.get(selected_key, ()), ctx)
                if selected_key is not None
                else ()
            ),
        )

    # Drawing
    def render(
        self,
        stdscr: "curses.window",  # type: ignore[name-defined]
        projection: MonthProjection,
        *,
        selected_task_index: int,
        scroll_row: int = 0,
    ) -> int:
        """Draw the grid plus the selected day's task list; returns the grid scroll row."""
        h, w = stdscr.getmaxyx()
        body_h = h - 2
        if body_h <= 0 or w <= 0:
            return scroll_row

        write(stdscr, 1, 0, w - 1, projection.label, curses.A_BOLD)
        cell_w = max(4, min(12, (w - 1) // 7))
        for idx, name in enumerate(WEEKDAY_NAMES):
            write(stdscr, 2, idx * cell_w, cell_w, name, curses.A_DIM)

        grid_top = 3
        cell_h = 2
        available_rows = max(1, (body_h - grid_top - 3) // cell_h)
        focused = next(
            (cell for week in projection.weeks for cell in week if cell.is_focused),
            None,
        )
        if focused is not None:
            scroll_row = scroll_offset_for(focused.row, scroll_row, available_rows)
        scroll_row = max(0, min(scroll_row, max(0, len(projection.weeks) - available_rows)))

        y = grid_top
        for week in projection.weeks[scroll_row : scroll_row + available_rows]:
            for cell in week:
                x = cell.col * cell_w
                label = f"{cell.day.day:2d}"
                if cell.task_count:
                    label += f"({min(cell.task_count, 99)})"
                attr = 0
                if cell.is_today:
                    attr |= curses.A_BOLD
                if not cell.is_current_month:
                    attr |= curses.A_DIM
                if cell.key == projection.selected_key or cell.is_focused:
                    attr |= curses.A_REVERSE
                if cell.is_drop_target:
                    attr |= curses.A_UNDERLINE | curses.A_BOLD
                write(stdscr, y, x, cell_w - 1, label, attr)
                preview = ""
                if cell.previews:
                    preview = cell.previews[0].text
                    if cell.overflow or len(cell.previews) > 1:
                        preview = f"+{cell.task_count - 1} {preview}"
                write(stdscr, y + 1, x, cell_w - 1, preview, curses.A_DIM)
            y += cell_h

        selected = projection.find(projection.selected_key or "")
        if selected is not None:
            rows = h - 1 - (y + 1)
            write(stdscr, y + 1, 0, w - 1, selected.label, curses.A_BOLD)
            for idx, chip in enumerate(projection.selected_chips[: max(0, rows - 1)]):
                attr = chip_attr(chip)
                if idx == selected_task_index:
                    attr |= curses.A_REVERSE
                write(stdscr, y + 2 + idx, 2, w - 3, chip_line(chip), attr)
        if projection.drag_overlay is not None:
            write(stdscr, h - 2, 0, w - 1, f"moving: {projection.drag_overlay.text}", curses.A_BOLD)
        return scroll_row


__all__ = ["MonthView", "MonthProjection", "DayCell", "MONTH_PREVIEW_LIMIT"]
