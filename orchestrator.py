#!/usr/bin/env python3
"""Orchestrator for labcal."""
from __future__ import annotations

import curses
import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence

from config import Config, load_config
from date_ranges import short_date_label
from engine import CalendarCallbacks, CalendarEngine, Projection
from focus import format_focus_line
from help_content import HELP_LINES
from keys import (
    FILTER_TOGGLE_KEYS,
    KEY_BACKSPACE,
    KEY_CAP_Q,
    KEY_COMPLETE,
    KEY_ENTER,
    KEY_ESC,
    KEY_FILTERS,
    KEY_GRAB,
    KEY_HELP,
    KEY_MORE,
    KEY_NEXT_TASK,
    KEY_PREV_TASK,
    KEY_Q,
    KEY_QUICK_ADD,
    KEY_TAB,
    KEY_WAITING,
    to_key_event,
)
from models import ALL_CATEGORIES, CATEGORY_LABELS, Task, ValidationError, date_key
from shortcuts import ShortcutContext
from state import AppState
from store import StorageError
from task_service import TaskService
from ui_base import clamp, draw_centered_box, draw_footer, draw_header
from view_common import chip_line
from view_day import DayView
from view_mini import mini_lines
from view_month import MonthView
from view_week import WeekView

logger = logging.getLogger(__name__)

_DRAG_STEPS = {
    curses.KEY_LEFT: -1,
    curses.KEY_RIGHT: 1,
    curses.KEY_UP: -7,
    curses.KEY_DOWN: 7,
}


class Orchestrator:
    """Owns the curses lifecycle and persists what the engine emits."""

    def __init__(self, version: str = "0.0.0", config: Optional[Config] = None) -> None:
        self.version = version
        self.config = config or load_config()
        self.service = TaskService(self.config.data_parquet_path)
        self.state = AppState()
        self.engine = CalendarEngine(
            self.state.tasks,
            CalendarCallbacks(
                on_reschedule=self.reschedule,
                on_task_click=self.show_task,
                on_date_click=self.begin_quick_add,
                on_quick_complete=self.complete,
                on_toggle_waiting=self.set_waiting,
                on_quick_add=self.add_task,
            ),
            granularity=self.config.default_granularity,
            preview_limit=self.config.month_preview_limit,
            activation_distance=self.config.drag_activation_distance,
            follow_up_after_hours=self.config.follow_up_after_hours,
        )
        self.quick_add_day: Optional[date] = None
        self.drag_target: Optional[date] = None
        self.month_scroll = 0
        self.day_scroll = 0

    def run(self) -> int:
        try:
            curses.wrapper(self._curses_main)
        except curses.error:
            logger.exception("curses failure")
            return 1
        finally:
            self.engine.unmount()
        return 0

    def load(self) -> None:
        try:
            self._set_tasks(self.service.load_tasks())
        except StorageError as exc:
            logger.error("initial load failed: %s", exc)
            self._show_overlay(f"Storage error: {exc}")
            self._set_tasks([])
        if self.config.config_error:
            self._show_overlay(self.config.config_error)

    def _curses_main(self, stdscr: "curses.window") -> None:  # type: ignore[name-defined]
        curses.curs_set(0)
        stdscr.keypad(True)
        stdscr.timeout(500)

        self.load()
        self._draw(stdscr)

        while True:
            ch = stdscr.getch()
            if ch in (-1, curses.ERR):
                # Refresh so "today" and follow-up flags track the clock
                self._draw(stdscr)
                continue
            if ch in (KEY_Q, KEY_CAP_Q) and self._can_quit():
                break

            if self.handle_key(ch):
                self._draw(stdscr)

    def _can_quit(self) -> bool:
        return self.state.overlay != "quick_add" and not self.engine.filter_menu_open

    # Host callbacks
    def _set_tasks(self, tasks: List[Task]) -> None:
        self.state.tasks = tasks
        self.engine.set_tasks(tasks)
        self._clamp_selection()

    def _reload_after_failure(self, exc: Exception) -> None:
        logger.warning("command failed: %s", exc)
        prefix = "Storage error: " if isinstance(exc, StorageError) else ""
        self._show_overlay(f"{prefix}{exc}")
        try:
            self._set_tasks(self.service.load_tasks())
        except StorageError as reload_exc:
            logger.error("reload failed: %s", reload_exc)

    def reschedule(self, task_id: str, new_date_key: str) -> None:
        try:
            self._set_tasks(self.service.reschedule(self.state.tasks, task_id, new_date_key))
        except (ValidationError, StorageError) as exc:
            self._reload_after_failure(exc)
            return
        moved_to = date.fromisoformat(new_date_key)
        self._show_overlay(f"Task moved to {short_date_label(moved_to)}", kind="message")

    def complete(self, task_id: str) -> None:
        try:
            self._set_tasks(self.service.complete(self.state.tasks, task_id))
        except (ValidationError, StorageError) as exc:
            self._reload_after_failure(exc)

    def set_waiting(self, task_id: str, waiting: bool) -> None:
        try:
            self._set_tasks(
                self.service.set_waiting(self.state.tasks, task_id, waiting, now=self.engine.now())
            )
        except (ValidationError, StorageError) as exc:
            self._reload_after_failure(exc)

    def add_task(self, key: str, text: str) -> None:
        try:
            self._set_tasks(self.service.quick_add(self.state.tasks, key, text))
        except (ValidationError, StorageError) as exc:
            self._reload_after_failure(exc)

    def show_task(self, task_id: str) -> None:
        task = next((t for t in self.state.tasks if t.id == task_id), None)
        if task is None:
            return
        lines = [
            task.text,
            "",
            f"due:       {task.due_date or '-'}",
            f"status:    {task.status}",
            f"priority:  {task.priority or '-'}",
            f"category:  {CATEGORY_LABELS.get(task.category_or_default, task.category_or_default)}",
            f"assigned:  {task.assigned_to or '-'}",
        ]
        if task.waiting_for_response:
            lines.append(f"waiting since {task.waiting_since or '?'}")
        for subtask in task.subtasks:
            lines.append(f"[{'x' if subtask.completed else ' '}] {subtask.text}")
        self._show_overlay("\n".join(lines), kind="message")

    def begin_quick_add(self, day: date) -> None:
        self.quick_add_day = day
        self.state.quick_add_text = ""
        self.state.overlay = "quick_add"

    # Selection helpers
    def focused_day(self) -> date:
        if self.engine.view.granularity == "month":
            current = self.engine.grid.current_date()
            if current is not None:
                return current
        return self.engine.view.anchor

    def focused_tasks(self) -> Sequence[Task]:
        return self.engine.tasks_on(self.focused_day())

    def selected_task(self) -> Optional[Task]:
        tasks = self.focused_tasks()
        if not tasks:
            return None
        return tasks[clamp(self.state.selected_task_index, 0, len(tasks) - 1)]

    def _clamp_selection(self) -> None:
        count = len(self.focused_tasks())
        self.state.selected_task_index = clamp(self.state.selected_task_index, 0, max(0, count - 1))

    # Key handling
    def handle_key(self, ch: int) -> bool:
        if self.state.overlay == "quick_add":
            return self._handle_quick_add_key(ch)
        if self.state.overlay in ("error", "message"):
            self.state.overlay = "none"
            return True
        if self.state.overlay == "help":
            if ch in (KEY_ESC, KEY_HELP):
                self.state.overlay = "none"
            return True
        if self.engine.filter_menu_open:
            return self._handle_filter_key(ch)
        if self.engine.drag.is_dragging:
            return self._handle_drag_key(ch)
        if self.engine.open_popup_key is not None:
            handled = self._handle_popup_key(ch)
            if handled:
                return True

        if ch == KEY_HELP:
            self.state.overlay = "help"
            return True
        if ch == KEY_TAB:
            if self.engine.grid_focused:
                self.engine.blur_grid()
            else:
                self.engine.focus_grid()
            self._clamp_selection()
            return True
        if ch == KEY_FILTERS:
            self.engine.toggle_filter_menu()
            return True
        if ch == KEY_NEXT_TASK:
            self.state.selected_task_index += 1
            self._clamp_selection()
            return True
        if ch == KEY_PREV_TASK:
            self.state.selected_task_index = max(0, self.state.selected_task_index - 1)
            return True
        if ch == KEY_GRAB:
            return self._begin_drag()
        if ch == KEY_MORE:
            self.engine.toggle_popup(date_key(self.focused_day()))
            return True
        if ch == KEY_QUICK_ADD:
            self.engine.add_task_on(self.focused_day())
            return True
        if ch == KEY_COMPLETE:
            task = self.selected_task()
            if task is not None:
                self.engine.quick_complete(task.id)
            return True
        if ch == KEY_WAITING:
            task = self.selected_task()
            if task is not None:
                self.engine.toggle_waiting(task.id, not task.waiting_for_response)
            return True

        event = to_key_event(ch)
        if event is None:
            return False
        before = self.focused_day()
        handled = self.engine.handle_key(event, ShortcutContext())
        if handled and self.focused_day() != before:
            self.state.selected_task_index = 0
        return handled

    def _handle_quick_add_key(self, ch: int) -> bool:
        if ch == KEY_ESC:
            self.state.overlay = "none"
            self.quick_add_day = None
            return True
        if ch in KEY_ENTER:
            day = self.quick_add_day or self.focused_day()
            text = self.state.quick_add_text
            self.state.overlay = "none"
            self.quick_add_day = None
            self.state.quick_add_text = ""
            self.engine.quick_add(date_key(day), text)
            return True
        if ch in KEY_BACKSPACE:
            self.state.quick_add_text = self.state.quick_add_text[:-1]
            return True
        if ch < 32 or ch >= curses.KEY_MIN:
            return False
        char = chr(ch)
        if not char.isprintable():
            return False
        self.state.quick_add_text += char
        return True

    def _handle_filter_key(self, ch: int) -> bool:
        if ch == KEY_ESC:
            self.engine.escape()
            return True
        if ch == KEY_FILTERS:
            self.engine.toggle_filter_menu()
            return True
        if 0 < ch < 256:
            char = chr(ch)
            if char in FILTER_TOGGLE_KEYS:
                idx = FILTER_TOGGLE_KEYS.index(char)
                if idx < len(ALL_CATEGORIES):
                    self.engine.toggle_category(ALL_CATEGORIES[idx])
                return True
            if char == "*":
                self.engine.select_all_categories()
                return True
            if char == "-":
                self.engine.clear_categories()
                return True
            if char == "u":
                self._cycle_assignee()
                return True
        return False

    def _cycle_assignee(self) -> None:
        assignees = self.engine.assignees()
        self.engine.clear_assignees()
        cursor = self.state.assignee_cursor + 1
        if cursor >= len(assignees):
            self.state.assignee_cursor = -1
            return
        self.state.assignee_cursor = cursor
        self.engine.toggle_assignee(assignees[cursor])

    def _handle_popup_key(self, ch: int) -> bool:
        if ch == KEY_NEXT_TASK:
            self.engine.scroll_popup(1)
            return True
        if ch == KEY_PREV_TASK:
            self.engine.scroll_popup(-1)
            return True
        if ch == KEY_ESC:
            self.engine.escape()
            return True
        return False

    def _begin_drag(self) -> bool:
        task = self.selected_task()
        if task is None:
            return False
        if not self.engine.start_drag(task.id):
            return False
        self.drag_target = self.focused_day()
        self.engine.drag_over(date_key(self.drag_target))
        return True

    def _handle_drag_key(self, ch: int) -> bool:
        if ch == KEY_ESC:
            self.engine.escape()
            self.drag_target = None
            return True
        if ch in KEY_ENTER:
            self.drag_target = None
            self.engine.drop_on_candidate()
            return True
        step = _DRAG_STEPS.get(ch)
        if step is None or self.drag_target is None:
            return False
        target = self.drag_target + timedelta(days=step)
        if not self.engine.view.includes(target):
            self.engine.jump_to_date(target)
        self.drag_target = target
        self.engine.drag_over(date_key(target))
        return True

    # Rendering
    def _draw(self, stdscr: "curses.window") -> None:  # type: ignore[name-defined]
        stdscr.erase()
        h, w = stdscr.getmaxyx()
        view = self.engine.view
        filtered = "  [filtered]" if self.engine.filters.is_active else ""
        today = self.engine.today()
        right = today.isoformat() if view.includes_today(today) else f"t: back to {today.isoformat()}"
        draw_header(stdscr, f"labcal · {view.granularity} · {view.label}{filtered}", right)
        draw_footer(
            stdscr,
            format_focus_line(self.engine.today_focus()),
            "?: help  q: quit",
        )

        selected_key = date_key(self.focused_day())
        projection: Projection
        if view.granularity == "month":
            projection = self.engine.project_month(selected_key=selected_key)
            self.month_scroll = MonthView(self.engine.filtered_buckets).render(
                stdscr,
                projection,
                selected_task_index=self.state.selected_task_index,
                scroll_row=self.month_scroll,
            )
        elif view.granularity == "week":
            projection = self.engine.project_week()
            WeekView(self.engine.filtered_buckets).render(
                stdscr,
                projection,
                selected_key=selected_key,
                selected_task_index=self.state.selected_task_index,
            )
        else:
            projection = self.engine.project_day()
            self.day_scroll = DayView(self.engine.filtered_buckets).render(
                stdscr,
                projection,
                selected_task_index=self.state.selected_task_index,
                scroll=self.day_scroll,
            )
            if w >= 80 and h >= 12:
                for offset, line in enumerate(mini_lines(self.engine.project_mini())):
                    try:
                        stdscr.addnstr(3 + offset, w - 22, line, 21, curses.A_DIM)
                    except curses.error:
                        break

        popup = getattr(projection, "popup", None)
        if popup is not None and self.state.overlay == "none":
            draw_centered_box(
                stdscr,
                [chip_line(chip) for chip in popup.chips],
                title=popup.key,
                scroll=popup.scroll,
            )

        if self.engine.filter_menu_open:
            self._render_filter_menu(stdscr)
        if self.state.overlay != "none":
            self._render_overlay(stdscr)
        stdscr.refresh()

    def _render_filter_menu(self, stdscr: "curses.window") -> None:  # type: ignore[name-defined]
        counts = self.engine.category_counts()
        selected = self.engine.filters.selected_categories
        lines = []
        for key, category in zip(FILTER_TOGGLE_KEYS, ALL_CATEGORIES):
            mark = "x" if category in selected else " "
            lines.append(f"{key} [{mark}] {CATEGORY_LABELS[category]:<12} {counts.get(category, 0):>3}")
        assignees = self.engine.filters.selected_assignees
        lines += [
            "",
            f"u  assignee: {', '.join(sorted(assignees)) or 'everyone'}",
            "*  all    -  none    Esc  close",
        ]
        draw_centered_box(stdscr, lines, title="Filters")

    def _render_overlay(self, stdscr: "curses.window") -> None:  # type: ignore[name-defined]
        if self.state.overlay == "help":
            draw_centered_box(stdscr, list(HELP_LINES) + ["", "Esc to dismiss"], title="labcal help")
        elif self.state.overlay == "quick_add":
            day = self.quick_add_day or self.focused_day()
            draw_centered_box(
                stdscr,
                [f"> {self.state.quick_add_text}_", "", "Enter: add   Esc: cancel"],
                title=f"New task on {short_date_label(day)}",
            )
        elif self.state.overlay in ("error", "message"):
            lines = self.state.overlay_message.splitlines() + ["", "Press any key to dismiss"]
            title = "Error" if self.state.overlay == "error" else ""
            draw_centered_box(stdscr, lines, title=title)

    def _show_overlay(self, message: str, kind: str = "error") -> None:
        self.state.overlay = "error" if kind == "error" else "message"
        self.state.overlay_message = message


__all__ = ["Orchestrator"]
