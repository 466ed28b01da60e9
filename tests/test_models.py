from datetime import datetime

import pytest

from models import (
    Task,
    ValidationError,
    normalize_task_payload,
    parse_date_key,
    parse_datetime,
    task_to_jsonable,
)


def _sample_payload() -> dict:
    return {
        "id": "t-1",
        "text": "Draft methods section",
        "due_date": "2026-03-05T14:00:00",
        "status": "in_progress",
        "priority": "HIGH",
        "category": "Writing",
        "assigned_to": "Ada Lovelace",
        "waiting_for_response": "yes",
        "waiting_since": "2026-03-01 09:00:00",
        "follow_up_after_hours": "72",
        "reminders": [{"id": "r1", "status": "pending"}],
        "subtasks": [
            {"id": "s1", "text": "figures", "completed": True},
            {"id": "s2", "text": "tables"},
        ],
    }


def test_normalize_task_payload_creates_task() -> None:
    task = normalize_task_payload(_sample_payload())

    assert task.id == "t-1"
    assert task.priority == "high"
    assert task.category == "writing"
    assert task.waiting_for_response is True
    assert task.follow_up_after_hours == pytest.approx(72.0)
    assert [s.completed for s in task.subtasks] == [True, False]
    # Due date is kept verbatim; only the calendar derives a date key
    assert task.due_date == "2026-03-05T14:00:00"

    jsonable = task_to_jsonable(task)
    assert jsonable["reminders"] == [{"id": "r1", "status": "pending", "remind_at": None}]


def test_normalize_task_payload_rejects_unknown_status() -> None:
    payload = _sample_payload()
    payload["status"] = "blocked"

    with pytest.raises(ValidationError):
        normalize_task_payload(payload)


def test_normalize_task_payload_requires_id() -> None:
    payload = _sample_payload()
    del payload["id"]

    with pytest.raises(ValidationError):
        normalize_task_payload(payload)


def test_missing_priority_and_category_default() -> None:
    task = normalize_task_payload({"id": "x"})

    assert task.priority == ""
    assert task.category is None
    assert task.category_or_default == "other"
    assert task.status == "todo"


def test_parse_date_key_handles_timestamps_and_garbage() -> None:
    assert parse_date_key("2026-03-05") == "2026-03-05"
    assert parse_date_key("2026-03-05T23:59:00Z") == "2026-03-05"
    assert parse_date_key("2026-03-05 08:00") == "2026-03-05"
    assert parse_date_key("2026-02-30") is None
    assert parse_date_key("soon") is None
    assert parse_date_key("") is None
    assert parse_date_key(None) is None


def test_is_done_covers_completed_flag_and_status() -> None:
    assert Task(id="a", completed=True).is_done
    assert Task(id="b", status="done").is_done
    assert not Task(id="c", status="in_progress").is_done


def test_with_updated_keeps_other_fields() -> None:
    task = normalize_task_payload(_sample_payload())
    moved = task.with_updated(due_date="2026-03-09")

    assert moved.due_date == "2026-03-09"
    assert moved.text == task.text
    assert moved.subtasks == task.subtasks
    assert task.due_date == "2026-03-05T14:00:00"


def test_parse_datetime_accepts_short_form() -> None:
    assert parse_datetime("2026-03-05 08:30") == datetime(2026, 3, 5, 8, 30)
    with pytest.raises(ValidationError):
        parse_datetime("05/03/2026")
