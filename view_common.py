#!/usr/bin/env python3
"""Projection types shared by the month, week and day views."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional, Sequence, Tuple

from drag import DragSession
from models import DEFAULT_FOLLOW_UP_HOURS, Task
from task_flags import TaskFlags, compute_flags

HeatLevel = Literal["none", "medium", "high"]

HEAT_MEDIUM = 4
HEAT_HIGH = 7


@dataclass(frozen=True)
class TaskChip:
    task_id: str
    text: str
    category: str
    priority: str
    flags: TaskFlags
    is_in_flight: bool = False


@dataclass(frozen=True)
class PopupList:
    """Full, scrollable task list behind a cell's "+N more"."""

    key: str
    chips: Tuple[TaskChip, ...]
    scroll: int = 0

    def visible(self, rows: int) -> Tuple[TaskChip, ...]:
        return self.chips[self.scroll : self.scroll + max(0, rows)]


@dataclass(frozen=True)
class RenderContext:
    """Per-render inputs shared by every view."""

    now: datetime
    drag: Optional[DragSession] = None
    open_popup_key: Optional[str] = None
    popup_scroll: int = 0
    default_follow_up_hours: float = DEFAULT_FOLLOW_UP_HOURS

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None


def make_chip(task: Task, ctx: RenderContext) -> TaskChip:
    return TaskChip(
        task_id=task.id,
        text=task.text,
        category=task.category_or_default,
        priority=task.priority,
        flags=compute_flags(
            task,
            today=ctx.today,
            now=ctx.now,
            default_follow_up_hours=ctx.default_follow_up_hours,
        ),
        is_in_flight=ctx.drag is not None and ctx.drag.task_id == task.id,
    )


def make_chips(tasks: Sequence[Task], ctx: RenderContext) -> Tuple[TaskChip, ...]:
    return tuple(make_chip(task, ctx) for task in tasks)


def heat_level(count: int) -> HeatLevel:
    if count >= HEAT_HIGH:
        return "high"
    if count >= HEAT_MEDIUM:
        return "medium"
    return "none"


def popup_for(key: str, tasks: Sequence[Task], ctx: RenderContext) -> Optional[PopupList]:
    # Popups never show while a drag is in flight
    if ctx.is_dragging or ctx.open_popup_key != key or not tasks:
        return None
    scroll = max(0, min(ctx.popup_scroll, len(tasks) - 1))
    return PopupList(key=key, chips=make_chips(tasks, ctx), scroll=scroll)


def chip_markers(chip: TaskChip) -> str:
    """Compact flag markers for terminal output."""
    marks = ""
    if chip.flags.is_overdue:
        marks += "!"
    if chip.flags.follow_up_overdue:
        marks += "@"
    if chip.flags.has_pending_reminder:
        marks += "^"
    if chip.flags.has_incomplete_subtasks:
        marks += "+"
    return marks


def chip_line(chip: TaskChip) -> str:
    line = chip.text or "(untitled)"
    marks = chip_markers(chip)
    if marks:
        line = f"{marks} {line}"
    extras = []
    if chip.flags.in_progress:
        extras.append("in progress")
    if chip.flags.subtask_progress:
        extras.append(chip.flags.subtask_progress)
    if chip.flags.initials:
        extras.append(chip.flags.initials)
    if extras:
        line = f"{line} [{', '.join(extras)}]"
    return line


def write(
    stdscr: "curses.window",  # type: ignore[name-defined]
    y: int,
    x: int,
    width: int,
    text: str,
    attr: int = 0,
) -> None:
    if width <= 0:
        return
    try:
        stdscr.addnstr(y, x, (text or "")[:width].ljust(width), width, attr)
    except curses.error:
        pass


def chip_attr(chip: TaskChip) -> int:
    attr = 0
    if chip.flags.is_overdue:
        attr |= curses.A_BOLD
    if chip.is_in_flight:
        attr |= curses.A_DIM
    return attr


__all__ = [
    "TaskChip",
    "PopupList",
    "RenderContext",
    "HeatLevel",
    "make_chip",
    "make_chips",
    "heat_level",
    "popup_for",
    "chip_markers",
    "chip_line",
    "chip_attr",
    "write",
]
