from datetime import date

import pytest

from date_ranges import header_label, month_weeks, short_date_label
from state import ViewState


def test_month_next_clamps_day_and_slides_right() -> None:
    view = ViewState(anchor=date(2026, 1, 31), granularity="month")

    view.next()

    assert view.anchor == date(2026, 2, 28)
    assert view.direction == "right"


def test_previous_shifts_by_granularity() -> None:
    view = ViewState(anchor=date(2026, 3, 18), granularity="week")
    view.previous()
    assert view.anchor == date(2026, 3, 11)
    assert view.direction == "left"

    view.set_granularity("day")
    view.previous()
    assert view.anchor == date(2026, 3, 10)


def test_go_to_today_direction_follows_anchor() -> None:
    view = ViewState(anchor=date(2026, 12, 1))
    view.go_to_today(date(2026, 10, 19))
    assert view.direction == "left"

    view = ViewState(anchor=date(2026, 1, 1))
    view.go_to_today(date(2026, 10, 19))
    assert view.direction == "right"
    assert view.anchor == date(2026, 10, 19)


def test_drill_to_day_then_back_to_month() -> None:
    view = ViewState(anchor=date(2026, 3, 1), granularity="month")

    view.drill_to_day(date(2026, 3, 20))
    assert view.granularity == "day"
    assert view.anchor == date(2026, 3, 20)

    view.set_granularity("month")
    assert view.month_key == (2026, 3)


def test_unknown_granularity_rejected() -> None:
    with pytest.raises(ValueError):
        ViewState(granularity="year")
    with pytest.raises(ValueError):
        ViewState().set_granularity("quarter")


def test_week_range_starts_on_sunday() -> None:
    view = ViewState(anchor=date(2026, 10, 21), granularity="week")

    visible = view.visible_range()

    assert visible.start == date(2026, 10, 18)
    assert visible.end == date(2026, 10, 24)
    assert len(view.visible_dates()) == 7


def test_month_grid_row_counts() -> None:
    # February 2026 starts on a Sunday and fills exactly four rows
    assert len(month_weeks(date(2026, 2, 10))) == 4
    weeks = month_weeks(date(2026, 4, 10))
    assert weeks[0][0] == date(2026, 3, 29)
    assert weeks[-1][-1] == date(2026, 5, 2)
    assert all(len(week) == 7 for week in weeks)


def test_includes_today_in_month_view_ignores_spill_days() -> None:
    view = ViewState(anchor=date(2026, 4, 10), granularity="month")

    assert view.includes(date(2026, 3, 29))
    assert not view.includes_today(date(2026, 3, 29))
    assert view.includes_today(date(2026, 4, 30))


def test_header_labels() -> None:
    assert header_label(date(2026, 3, 18), "month") == "March 2026"
    assert header_label(date(2026, 10, 21), "week") == "Oct 18 – 24, 2026"
    assert header_label(date(2026, 9, 30), "week") == "Sep 27 – Oct 3, 2026"
    assert header_label(date(2026, 10, 19), "day") == "Monday, October 19, 2026"
    assert short_date_label(date(2026, 3, 9)) == "Mar 9, 2026"


def test_transition_key_tracks_period() -> None:
    view = ViewState(anchor=date(2026, 3, 18), granularity="month")
    before = view.transition()
    view.previous()
    after = view.transition()

    assert before.key == "2026-03"
    assert after.key == "2026-02"
    assert after.direction == "left"
    assert after.enter_offset == -before.enter_offset
