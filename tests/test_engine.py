from datetime import date, datetime

from engine import CalendarCallbacks, CalendarEngine
from models import Task
from shortcuts import KeyEvent, ShortcutContext
from view_month import MonthProjection
from view_week import WeekProjection

NOW = datetime(2026, 3, 18, 9, 0)


def _make_engine(tasks=None, **kwargs):
    events = {"reschedule": [], "date": [], "task": [], "complete": [], "waiting": [], "add": []}
    callbacks = CalendarCallbacks(
        on_reschedule=lambda task_id, key: events["reschedule"].append((task_id, key)),
        on_date_click=events["date"].append,
        on_task_click=events["task"].append,
        on_quick_complete=events["complete"].append,
        on_toggle_waiting=lambda task_id, waiting: events["waiting"].append((task_id, waiting)),
        on_quick_add=lambda key, text: events["add"].append((key, text)),
    )
    if tasks is None:
        tasks = [
            Task(id="a", text="Write intro", due_date="2026-03-18", category="writing"),
            Task(id="b", text="Lab meeting", due_date="2026-03-18", category="meeting", priority="high"),
            Task(id="c", text="Submit abstract", due_date="2026-04-02", category="submission"),
        ]
    engine = CalendarEngine(tasks, callbacks, clock=lambda: NOW, **kwargs)
    return engine, events


def test_set_tasks_rebuilds_only_for_a_new_list() -> None:
    engine, _ = _make_engine()
    tasks = engine.tasks
    before = engine.buckets

    engine.set_tasks(tasks)
    assert engine.buckets is before

    engine.set_tasks(list(tasks))
    assert engine.buckets is not before
    assert engine.buckets == before


def test_filtered_buckets_memoised() -> None:
    engine, _ = _make_engine()
    assert engine.filtered_buckets is engine.buckets

    engine.toggle_category("meeting")
    first = engine.filtered_buckets

    assert engine.filtered_buckets is first
    assert [task.id for task in first["2026-03-18"]] == ["a"]


def test_drag_and_drop_emits_one_reschedule() -> None:
    engine, events = _make_engine()

    assert engine.start_drag("a")
    engine.drag_over("2026-03-20")
    assert engine.drop_on_candidate()
    assert not engine.drop_on_candidate()

    assert events["reschedule"] == [("a", "2026-03-20")]


def test_drop_outside_cells_emits_nothing() -> None:
    engine, events = _make_engine()

    engine.start_drag("a")
    engine.drag_over("2026-03-20")

    assert not engine.drop(None)
    assert events["reschedule"] == []
    assert not engine.drag.is_dragging


def test_granularity_change_cancels_drag_and_popup() -> None:
    engine, events = _make_engine()
    engine.open_popup("2026-03-18")
    engine.start_drag("a")

    engine.set_granularity("month")

    assert not engine.drag.is_dragging
    assert engine.open_popup_key is None
    assert events["reschedule"] == []


def test_popup_closes_when_drag_ends() -> None:
    engine, _ = _make_engine()
    engine.open_popup("2026-03-18")
    engine.start_drag("b")

    engine.cancel_drag()

    assert engine.open_popup_key is None


def test_popup_blocked_while_dragging_or_empty() -> None:
    engine, _ = _make_engine()

    engine.open_popup("2026-03-19")
    assert engine.open_popup_key is None

    engine.start_drag("a")
    engine.open_popup("2026-03-18")
    assert engine.open_popup_key is None


def test_popup_scroll_is_clamped() -> None:
    engine, _ = _make_engine()
    engine.open_popup("2026-03-18")

    engine.scroll_popup(5)
    assert engine.popup_scroll == 1
    engine.scroll_popup(-5)
    assert engine.popup_scroll == 0


def test_filtered_out_task_cannot_be_dragged() -> None:
    engine, _ = _make_engine()
    engine.clear_categories()

    assert not engine.start_drag("a")


def test_task_outside_visible_range_cannot_be_dragged() -> None:
    engine, _ = _make_engine()

    assert not engine.start_drag("c")
    engine.set_granularity("month")
    engine.next()
    assert engine.start_drag("c")


def test_month_grid_keyboard_moves_and_drills() -> None:
    engine, _ = _make_engine()
    engine.set_granularity("month")

    assert engine.focus_grid()
    assert engine.grid.current_date() == date(2026, 3, 18)

    assert engine.handle_key(KeyEvent("ArrowRight"))
    assert engine.grid.current_date() == date(2026, 3, 19)
    assert engine.view.anchor == date(2026, 3, 18)

    assert engine.handle_key(KeyEvent("Enter"))
    assert engine.view.granularity == "day"
    assert engine.view.anchor == date(2026, 3, 19)
    assert not engine.grid_focused


def test_arrows_paginate_without_grid_focus() -> None:
    engine, _ = _make_engine(granularity="month")

    engine.handle_key(KeyEvent("ArrowRight"))
    assert engine.view.anchor == date(2026, 4, 18)

    engine.handle_key(KeyEvent("ArrowLeft", ctrl=True))
    assert engine.view.anchor == date(2026, 3, 18)


def test_grid_focus_only_in_month_view() -> None:
    engine, _ = _make_engine()

    assert not engine.focus_grid()
    assert engine.grid.cursor is None


def test_month_change_resets_grid_cursor() -> None:
    engine, _ = _make_engine(granularity="month")
    engine.focus_grid()

    engine.next()

    assert engine.grid.cursor is None


def test_shortcuts_respect_context() -> None:
    engine, _ = _make_engine()

    assert not engine.handle_key(KeyEvent("m"), ShortcutContext(focused_element="input"))
    assert engine.view.granularity == "week"
    assert engine.handle_key(KeyEvent("m"))
    assert engine.view.granularity == "month"


def test_escape_unwinds_one_layer_at_a_time() -> None:
    engine, _ = _make_engine()
    engine.toggle_filter_menu()
    engine.start_drag("a")

    assert engine.escape()
    assert not engine.filter_menu_open
    assert engine.drag.is_dragging

    assert engine.escape()
    assert not engine.drag.is_dragging
    assert not engine.escape()


def test_click_cell_toggles_popup_or_drills_in() -> None:
    engine, _ = _make_engine(granularity="month")

    engine.click_cell(date(2026, 3, 18))
    assert engine.open_popup_key == "2026-03-18"
    engine.click_cell(date(2026, 3, 18))
    assert engine.open_popup_key is None

    engine.click_cell(date(2026, 3, 19))
    assert engine.view.granularity == "day"
    assert engine.view.anchor == date(2026, 3, 19)


def test_host_notifications_forwarded() -> None:
    engine, events = _make_engine()

    engine.add_task_on(date(2026, 3, 19))
    engine.click_task("a")
    engine.quick_complete("b")
    engine.toggle_waiting("a", True)

    assert events["date"] == [date(2026, 3, 19)]
    assert events["task"] == ["a"]
    assert events["complete"] == ["b"]
    assert events["waiting"] == [("a", True)]


def test_quick_add_trims_and_rejects_blank() -> None:
    engine, events = _make_engine()

    assert engine.quick_add("2026-03-19", "  order reagents ")
    assert not engine.quick_add("2026-03-19", "   ")
    assert events["add"] == [("2026-03-19", "order reagents")]


def test_today_focus_ignores_filters() -> None:
    engine, _ = _make_engine()
    engine.clear_categories()

    assert engine.today_focus().due_today_count == 2
    assert engine.filtered_buckets == {}


def test_category_counts_and_assignees() -> None:
    tasks = [
        Task(id="a", due_date="2026-03-02", category="grant", assigned_to="Grace"),
        Task(id="b", due_date="2026-04-02", category="grant", assigned_to="Ada"),
    ]
    engine, _ = _make_engine(tasks)

    assert engine.category_counts()["grant"] == 1
    assert engine.assignees() == ["Ada", "Grace"]


def test_project_dispatches_on_granularity() -> None:
    engine, _ = _make_engine()
    assert isinstance(engine.project(), WeekProjection)

    engine.set_granularity("month")
    projection = engine.project_month(selected_key="2026-03-18")

    assert isinstance(projection, MonthProjection)
    assert [chip.task_id for chip in projection.selected_chips] == ["b", "a"]
    assert engine.project_mini().label == "Mar 2026"


def test_unmount_clears_transient_state() -> None:
    engine, events = _make_engine(granularity="month")
    engine.focus_grid()
    engine.start_drag("a")

    engine.unmount()

    assert not engine.drag.is_dragging
    assert engine.grid.cursor is None
    assert events["reschedule"] == []


def test_cursor_moves_request_scroll() -> None:
    cells = []
    engine = CalendarEngine(
        [],
        CalendarCallbacks(on_scroll_to_cell=lambda row, col: cells.append((row, col))),
        clock=lambda: NOW,
        granularity="month",
    )

    engine.focus_grid()
    engine.handle_key(KeyEvent("ArrowDown"))

    assert cells == [(2, 3), (3, 3)]
