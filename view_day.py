#!/usr/bin/env python3
"""Day view projection and rendering."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from buckets import BucketIndex
from date_ranges import header_label
from grid_nav import scroll_offset_for
from models import CATEGORY_LABELS, date_key
from state import ViewTransition
from view_common import RenderContext, TaskChip, chip_attr, chip_line, make_chips, write


@dataclass(frozen=True)
class DayProjection:
    label: str
    key: str
    transition: ViewTransition
    is_today: bool
    is_drop_target: bool
    chips: Tuple[TaskChip, ...]
    is_dragging: bool
    drag_overlay: Optional[TaskChip]

    @property
    def count_label(self) -> str:
        noun = "task" if len(self.chips) == 1 else "tasks"
        return f"{len(self.chips)} {noun}"


class DayView:
    def __init__(self, buckets: BucketIndex) -> None:
        self.buckets = buckets

    def project(
        self,
        anchor: date,
        ctx: RenderContext,
        *,
        transition: ViewTransition,
    ) -> DayProjection:
        key = date_key(anchor)
        chips = make_chips(self.buckets.get(key, ()), ctx)
        overlay = None
        if ctx.drag is not None:
            overlay = next((chip for chip in chips if chip.task_id == ctx.drag.task_id), None)
        return DayProjection(
            label=header_label(anchor, "day"),
            key=key,
            transition=transition,
            is_today=anchor == ctx.today,
            is_drop_target=ctx.drag is not None and ctx.drag.candidate_key == key,
            chips=chips,
            is_dragging=ctx.is_dragging,
            drag_overlay=overlay,
        )

    def render(
        self,
        stdscr: "curses.window",  # type: ignore[name-defined]
        projection: DayProjection,
        *,
        selected_task_index: int,
        scroll: int = 0,
    ) -> int:
        h, w = stdscr.getmaxyx()
        if h <= 4 or w <= 0:
            return scroll
        title = projection.label
        if projection.is_today:
            title += "  (today)"
        write(stdscr, 1, 0, w - 1, f"{title}  ·  {projection.count_label}", curses.A_BOLD)
        if not projection.chips:
            write(stdscr, 3, 2, w - 3, "No tasks. Press n to add one.", curses.A_DIM)
            return 0
        rows = max(1, h - 5)
        scroll = scroll_offset_for(selected_task_index, scroll, rows)
        for offset, chip in enumerate(projection.chips[scroll : scroll + rows]):
            idx = scroll + offset
            attr = chip_attr(chip)
            if idx == selected_task_index:
                attr |= curses.A_REVERSE
            category = CATEGORY_LABELS.get(chip.category, chip.category)
            priority = chip.priority or "-"
            write(stdscr, 3 + offset, 2, w - 3, f"{priority:<7} {category:<12} {chip_line(chip)}", attr)
        return scroll


__all__ = ["DayView", "DayProjection"]
