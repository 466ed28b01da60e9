#!/usr/bin/env python3
"""Week view projection and rendering."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from buckets import BucketIndex
from date_ranges import header_label, visible_range
from models import date_key
from state import ViewTransition
from view_common import (
    HeatLevel,
    PopupList,
    RenderContext,
    TaskChip,
    chip_attr,
    chip_markers,
    heat_level,
    make_chip,
    make_chips,
    popup_for,
    write,
)

WEEK_PREVIEW_LIMIT = 6


@dataclass(frozen=True)
class WeekColumn:
    day: date
    key: str
    is_today: bool
    is_weekend: bool
    is_drop_target: bool
    task_count: int
    chips: Tuple[TaskChip, ...]
    overflow: int
    heat: HeatLevel


@dataclass(frozen=True)
class WeekProjection:
    label: str
    transition: ViewTransition
    columns: Tuple[WeekColumn, ...]
    is_dragging: bool
    drag_overlay: Optional[TaskChip]
    popup: Optional[PopupList]


class WeekView:
    def __init__(self, buckets: BucketIndex, *, preview_limit: int = WEEK_PREVIEW_LIMIT) -> None:
        self.buckets = buckets
        self.preview_limit = preview_limit

    def project(
        self,
        anchor: date,
        ctx: RenderContext,
        *,
        transition: ViewTransition,
    ) -> WeekProjection:
        candidate = ctx.drag.candidate_key if ctx.drag is not None else None
        columns = []
        popup: Optional[PopupList] = None
        overlay: Optional[TaskChip] = None
        for day in visible_range(anchor, "week").days():
            key = date_key(day)
            day_tasks = self.buckets.get(key, ())
            columns.append(
                WeekColumn(
                    day=day,
                    key=key,
                    is_today=day == ctx.today,
                    is_weekend=day.weekday() >= 5,
                    is_drop_target=candidate == key,
                    task_count=len(day_tasks),
                    chips=make_chips(day_tasks[: self.preview_limit], ctx),
                    overflow=max(0, len(day_tasks) - self.preview_limit),
                    heat=heat_level(len(day_tasks)),
                )
            )
            if popup is None:
                popup = popup_for(key, day_tasks, ctx)
            if overlay is None and ctx.drag is not None:
                match = next((t for t in day_tasks if t.id == ctx.drag.task_id), None)
                if match is not None:
                    overlay = make_chip(match, ctx)
        return WeekProjection(
            label=header_label(anchor, "week"),
            transition=transition,
            columns=tuple(columns),
            is_dragging=ctx.is_dragging,
            drag_overlay=overlay,
            popup=popup,
        )

    def render(
        self,
        stdscr: "curses.window",  # type: ignore[name-defined]
        projection: WeekProjection,
        *,
        selected_key: str,
        selected_task_index: int,
    ) -> None:
        h, w = stdscr.getmaxyx()
        if h <= 4 or w <= 0:
            return
        write(stdscr, 1, 0, w - 1, projection.label, curses.A_BOLD)
        col_w = max(6, (w - 1) // 7)
        for idx, column in enumerate(projection.columns):
            x = idx * col_w
            head = f"{column.day:%a} {column.day.day}"
            attr = curses.A_BOLD if column.is_today else 0
            if column.is_weekend:
                attr |= curses.A_DIM
            if column.key == selected_key:
                attr |= curses.A_REVERSE
            if column.is_drop_target:
                attr |= curses.A_UNDERLINE
            write(stdscr, 3, x, col_w - 1, head, attr)
            y = 4
            for chip_idx, chip in enumerate(column.chips):
                if y >= h - 2:
                    break
                marks = chip_markers(chip)
                text = f"{marks}{chip.text}" if marks else chip.text
                chip_style = chip_attr(chip)
                if column.key == selected_key and chip_idx == selected_task_index:
                    chip_style |= curses.A_REVERSE
                write(stdscr, y, x, col_w - 1, text, chip_style)
                y += 1
            if column.overflow and y < h - 2:
                write(stdscr, y, x, col_w - 1, f"+{column.overflow} more", curses.A_DIM)
        if projection.drag_overlay is not None:
            write(stdscr, h - 2, 0, w - 1, f"moving: {projection.drag_overlay.text}", curses.A_BOLD)


__all__ = ["WeekView", "WeekProjection", "WeekColumn", "WEEK_PREVIEW_LIMIT"]
