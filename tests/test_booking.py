from datetime import datetime, time

from booking import validate_booking_range


def test_same_start_and_end_rejected() -> None:
    check = validate_booking_range("10:00", "10:00")

    assert not check.valid
    assert check.error == "Start and end times cannot be the same."


def test_end_before_start_rejected() -> None:
    check = validate_booking_range("14:30", "09:15")

    assert not check.valid
    assert check.error == "End time must be after start time."


def test_valid_ranges() -> None:
    assert validate_booking_range("09:00", "09:30").valid
    assert validate_booking_range(time(8), time(17)).valid
    assert validate_booking_range(datetime(2026, 3, 18, 23), datetime(2026, 3, 19, 1)).valid


def test_incomplete_form_has_no_error_yet() -> None:
    check = validate_booking_range("09:00", "")

    assert not check.valid
    assert check.error is None


def test_unparseable_times_reported() -> None:
    check = validate_booking_range("nine", "ten")

    assert not check.valid
    assert check.error is not None
