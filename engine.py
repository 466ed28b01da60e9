#!/usr/bin/env python3
"""Calendar engine: derived data, view state and input handlers behind one facade."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

from buckets import BucketIndex, build_date_buckets
from drag import DEFAULT_ACTIVATION_DISTANCE, DragRescheduleController
from filters import FilterState, apply_filters, category_counts, unique_assignees
from focus import TodayFocus, today_focus
from grid_nav import KeyboardGridNavigator
from models import DEFAULT_FOLLOW_UP_HOURS, Task, date_key
from shortcuts import KeyEvent, ShortcutContext, resolve_shortcut
from state import ViewState
from view_common import RenderContext
from view_day import DayProjection, DayView
from view_mini import MiniCalendar, project_mini_calendar
from view_month import MONTH_PREVIEW_LIMIT, MonthProjection, MonthView
from view_week import WeekProjection, WeekView

logger = logging.getLogger(__name__)

Projection = Union[DayProjection, WeekProjection, MonthProjection]

_GRID_KEYS = {
    "previous": "ArrowLeft",
    "next": "ArrowRight",
    "grid_up": "ArrowUp",
    "grid_down": "ArrowDown",
    "activate": "Enter",
}


@dataclass
class CalendarCallbacks:
    """Fire-and-forget notifications to the host; all optional."""

    on_reschedule: Optional[Callable[[str, str], None]] = None
    on_task_click: Optional[Callable[[str], None]] = None
    on_date_click: Optional[Callable[[date], None]] = None
    on_quick_complete: Optional[Callable[[str], None]] = None
    on_toggle_waiting: Optional[Callable[[str, bool], None]] = None
    on_quick_add: Optional[Callable[[str, str], None]] = None
    on_scroll_to_cell: Optional[Callable[[int, int], None]] = None


class CalendarEngine:
    """Owns ViewState, the drag session and the keyboard cursor.

    The task list belongs to the host: the engine only reads it and emits
    commands, and the host answers with a new list through ``set_tasks``.
    """

    def __init__(
        self,
        tasks: Sequence[Task] = (),
        callbacks: Optional[CalendarCallbacks] = None,
        *,
        anchor: Optional[date] = None,
        granularity: str = "week",
        clock: Callable[[], datetime] = datetime.now,
        preview_limit: int = MONTH_PREVIEW_LIMIT,
        activation_distance: float = DEFAULT_ACTIVATION_DISTANCE,
        follow_up_after_hours: float = DEFAULT_FOLLOW_UP_HOURS,
    ) -> None:
        self.callbacks = callbacks or CalendarCallbacks()
        self._clock = clock
        self.preview_limit = preview_limit
        self.follow_up_after_hours = follow_up_after_hours
        self.view = ViewState(anchor=anchor or self.today(), granularity=granularity)

        self._tasks: Optional[Sequence[Task]] = None
        self._buckets: BucketIndex = {}
        self._filters = FilterState()
        self._filtered_source: Optional[BucketIndex] = None
        self._filtered_filters: Optional[FilterState] = None
        self._filtered: BucketIndex = {}

        self.drag = DragRescheduleController(
            on_reschedule=self._emit_reschedule if self.callbacks.on_reschedule else None,
            activation_distance=activation_distance,
        )
        self.drag.subscribe(self.close_popup)
        self.grid = KeyboardGridNavigator(
            self.view.month_weeks(),
            anchor=self.view.anchor,
            on_activate=self.activate_date,
            on_scroll=self._on_cursor_moved,
        )
        self.grid_focused = False
        self.filter_menu_open = False
        self.open_popup_key: Optional[str] = None
        self.popup_scroll = 0

        self.set_tasks(tasks)

    # Clock
    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # Task input and derived data
    @property
    def tasks(self) -> Sequence[Task]:
        return self._tasks or ()

    def set_tasks(self, tasks: Sequence[Task]) -> None:
        if tasks is self._tasks:
            return
        self._tasks = tasks
        self._buckets = build_date_buckets(tasks)
        logger.debug("bucketed %d task(s) into %d date(s)", len(tasks), len(self._buckets))
        self._refresh_drag_index()

    @property
    def buckets(self) -> BucketIndex:
        return self._buckets

    @property
    def filtered_buckets(self) -> BucketIndex:
        if self._filtered_source is not self._buckets or self._filtered_filters is not self._filters:
            self._filtered = apply_filters(self._buckets, self._filters)
            self._filtered_source = self._buckets
            self._filtered_filters = self._filters
        return self._filtered

    def visible_buckets(self) -> Dict[str, Sequence[Task]]:
        filtered = self.filtered_buckets
        out: Dict[str, Sequence[Task]] = {}
        for day in self.view.visible_dates():
            key = date_key(day)
            if key in filtered:
                out[key] = filtered[key]
        return out

    def tasks_on(self, day: Union[date, str]) -> Sequence[Task]:
        key = day if isinstance(day, str) else date_key(day)
        return self.filtered_buckets.get(key, ())

    def _refresh_drag_index(self) -> None:
        self.drag.update_index(self.visible_buckets())

    # Filters
    @property
    def filters(self) -> FilterState:
        return self._filters

    def set_filters(self, filters: FilterState) -> None:
        self._filters = filters
        self._refresh_drag_index()

    def toggle_category(self, category: str) -> None:
        self.set_filters(self._filters.toggle_category(category))

    def select_all_categories(self) -> None:
        self.set_filters(self._filters.select_all_categories())

    def clear_categories(self) -> None:
        self.set_filters(self._filters.clear_categories())

    def toggle_assignee(self, assignee: str) -> None:
        self.set_filters(self._filters.toggle_assignee(assignee))

    def clear_assignees(self) -> None:
        self.set_filters(self._filters.clear_assignees())

    def toggle_filter_menu(self) -> None:
        self.filter_menu_open = not self.filter_menu_open

    def category_counts(self) -> Dict[str, int]:
        return category_counts(self.tasks, self.view.anchor)

    def assignees(self) -> List[str]:
        return unique_assignees(self.tasks)

    def today_focus(self) -> TodayFocus:
        return today_focus(self.tasks, buckets=self._buckets, now=self.now())

    # View navigation
    def previous(self) -> None:
        self._navigate(self.view.previous)

    def next(self) -> None:
        self._navigate(self.view.next)

    def go_to_today(self) -> None:
        self._navigate(lambda: self.view.go_to_today(self.today()))

    def jump_to_date(self, target: date) -> None:
        self._navigate(lambda: self.view.jump_to_date(target))

    def set_granularity(self, granularity: str) -> None:
        self._navigate(lambda: self.view.set_granularity(granularity))

    def drill_to_day(self, target: date) -> None:
        self._navigate(lambda: self.view.drill_to_day(target))

    def _navigate(self, action: Callable[[], None]) -> None:
        before_granularity = self.view.granularity
        before_month = self.view.month_key
        action()
        if self.view.granularity != before_granularity:
            # The previous view is gone; nothing it owned may linger
            self.drag.on_cancel()
            self.close_popup()
            self.grid_focused = False
            self.grid.reset(self.view.month_weeks(), self.view.anchor)
        elif self.view.month_key != before_month:
            self.grid.reset(self.view.month_weeks(), self.view.anchor)
        self._refresh_drag_index()

    def unmount(self) -> None:
        self.drag.on_cancel()
        self.close_popup()
        self.grid_focused = False
        self.grid.cursor = None

    # Date and task activation
    def activate_date(self, day: date) -> None:
        """Drill from month/week into the given day."""
        self.drill_to_day(day)

    def click_cell(self, day: date) -> None:
        """Pointer click on a month cell: toggle its task list, or drill in if empty."""
        key = date_key(day)
        if self.tasks_on(key):
            self.toggle_popup(key)
        else:
            self.activate_date(day)

    def add_task_on(self, day: date) -> None:
        if self.callbacks.on_date_click is not None:
            self.callbacks.on_date_click(day)

    def click_task(self, task_id: str) -> None:
        if self.callbacks.on_task_click is not None:
            self.callbacks.on_task_click(task_id)

    def quick_complete(self, task_id: str) -> None:
        if self.callbacks.on_quick_complete is not None:
            self.callbacks.on_quick_complete(task_id)

    def toggle_waiting(self, task_id: str, waiting: bool) -> None:
        if self.callbacks.on_toggle_waiting is not None:
            self.callbacks.on_toggle_waiting(task_id, waiting)

    def quick_add(self, key: str, text: str) -> bool:
        trimmed = (text or "").strip()
        if not trimmed or self.callbacks.on_quick_add is None:
            return False
        self.callbacks.on_quick_add(key, trimmed)
        return True

    # Popups
    def open_popup(self, key: str) -> None:
        if self.drag.is_dragging or not self.tasks_on(key):
            return
        self.open_popup_key = key
        self.popup_scroll = 0

    def toggle_popup(self, key: str) -> None:
        if self.open_popup_key == key:
            self.close_popup()
        else:
            self.open_popup(key)

    def close_popup(self) -> None:
        self.open_popup_key = None
        self.popup_scroll = 0

    def scroll_popup(self, delta: int) -> None:
        if self.open_popup_key is None:
            return
        count = len(self.tasks_on(self.open_popup_key))
        self.popup_scroll = max(0, min(self.popup_scroll + delta, max(0, count - 1)))

    # Drag and drop
    def start_drag(self, task_id: str) -> bool:
        return self.drag.on_drag_start(task_id)

    def drag_over(self, key: Optional[str]) -> None:
        self.drag.on_drag_over(key)

    def drop(self, key: Optional[str]) -> bool:
        """Drop on ``key``; None means released outside any date cell."""
        return self.drag.on_drop(key)

    def drop_on_candidate(self) -> bool:
        session = self.drag.session
        return self.drag.on_drop(session.candidate_key if session is not None else None)

    def cancel_drag(self) -> None:
        self.drag.on_cancel()

    def _emit_reschedule(self, task_id: str, key: str) -> None:
        logger.info("reschedule %s -> %s", task_id, key)
        if self.callbacks.on_reschedule is not None:
            self.callbacks.on_reschedule(task_id, key)

    # Keyboard grid
    def focus_grid(self) -> bool:
        if self.view.granularity != "month":
            return False
        self.grid_focused = True
        self.grid.focus(self.today())
        return True

    def blur_grid(self) -> None:
        self.grid_focused = False

    def _on_cursor_moved(self, row: int, col: int) -> None:
        if self.callbacks.on_scroll_to_cell is not None:
            self.callbacks.on_scroll_to_cell(row, col)

    def handle_key(self, event: KeyEvent, context: Optional[ShortcutContext] = None) -> bool:
        command = resolve_shortcut(event, context or ShortcutContext())
        if command is None:
            return False
        if command == "escape":
            return self.escape()
        if self.view.granularity == "month" and self.grid_focused and command in _GRID_KEYS:
            return self.grid.handle_key(_GRID_KEYS[command])
        if command == "granularity_day":
            self.set_granularity("day")
        elif command == "granularity_week":
            self.set_granularity("week")
        elif command == "granularity_month":
            self.set_granularity("month")
        elif command == "today":
            self.go_to_today()
        elif command == "previous":
            self.previous()
        elif command == "next":
            self.next()
        else:
            return False
        return True

    def escape(self) -> bool:
        if self.filter_menu_open:
            self.filter_menu_open = False
            return True
        if self.drag.is_dragging:
            self.drag.on_cancel()
            return True
        if self.open_popup_key is not None:
            self.close_popup()
            return True
        if self.grid.cursor is not None:
            return self.grid.handle_key("Escape")
        return False

    # Projections
    def render_context(self) -> RenderContext:
        return RenderContext(
            now=self.now(),
            drag=self.drag.session,
            open_popup_key=self.open_popup_key,
            popup_scroll=self.popup_scroll,
            default_follow_up_hours=self.follow_up_after_hours,
        )

    def project_month(self, selected_key: Optional[str] = None) -> MonthProjection:
        view = MonthView(self.filtered_buckets, preview_limit=self.preview_limit)
        return view.project(
            self.view.anchor,
            self.render_context(),
            transition=self.view.transition(),
            cursor=self.grid.cursor,
            weeks=self.grid.weeks,
            selected_key=selected_key,
        )

    def project_week(self) -> WeekProjection:
        return WeekView(self.filtered_buckets).project(
            self.view.anchor,
            self.render_context(),
            transition=self.view.transition(),
        )

    def project_day(self) -> DayProjection:
        return DayView(self.filtered_buckets).project(
            self.view.anchor,
            self.render_context(),
            transition=self.view.transition(),
        )

    def project_mini(self) -> MiniCalendar:
        return project_mini_calendar(self.view.anchor, self.filtered_buckets, today=self.today())

    def project(self) -> Projection:
        if self.view.granularity == "month":
            return self.project_month()
        if self.view.granularity == "week":
            return self.project_week()
        return self.project_day()


__all__ = ["CalendarEngine", "CalendarCallbacks", "Projection"]
