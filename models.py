#!/usr/bin/env python3
"""Core task models and validation helpers for labcal."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Literal, Optional, Sequence

logger = logging.getLogger(__name__)

DATE_KEY_FMT = "%Y-%m-%d"
DATETIME_FMT = "%Y-%m-%d %H:%M:%S"

TaskStatus = Literal["todo", "in_progress", "done"]
TASK_STATUSES: Sequence[str] = ("todo", "in_progress", "done")

TaskPriority = Literal["urgent", "high", "medium", "low"]
PRIORITY_ORDER = {
    "urgent": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}
UNKNOWN_PRIORITY_WEIGHT = 4

ALL_CATEGORIES: Sequence[str] = (
    "research",
    "meeting",
    "analysis",
    "submission",
    "revision",
    "presentation",
    "writing",
    "reading",
    "coursework",
    "admin",
    "grant",
    "teaching",
    "fieldwork",
    "other",
)
DEFAULT_CATEGORY = "other"

CATEGORY_LABELS = {name: name.capitalize() for name in ALL_CATEGORIES}

DEFAULT_FOLLOW_UP_HOURS = 48.0


@dataclass
class Subtask:
    id: str
    text: str
    completed: bool = False


@dataclass
class TaskReminder:
    id: str
    status: str = "pending"
    remind_at: Optional[str] = None


@dataclass
class Task:
    id: str
    text: str = ""
    due_date: Optional[str] = None
    completed: bool = False
    status: str = "todo"
    priority: str = ""
    category: Optional[str] = None
    assigned_to: Optional[str] = None
    waiting_for_response: bool = False
    waiting_since: Optional[str] = None
    follow_up_after_hours: Optional[float] = None
    reminder_at: Optional[str] = None
    reminders: List[TaskReminder] = field(default_factory=list)
    subtasks: List[Subtask] = field(default_factory=list)

    @property
    def is_done(self) -> bool:
        return self.completed or self.status == "done"

    @property
    def category_or_default(self) -> str:
        return self.category or DEFAULT_CATEGORY

    def with_updated(
        self,
        *,
        due_date: Optional[str] = None,
        completed: Optional[bool] = None,
        status: Optional[str] = None,
        waiting_for_response: Optional[bool] = None,
        waiting_since: Optional[str] = None,
    ) -> "Task":
        return Task(
            id=self.id,
            text=self.text,
            due_date=due_date if due_date is not None else self.due_date,
            completed=completed if completed is not None else self.completed,
            status=status if status is not None else self.status,
            priority=self.priority,
            category=self.category,
            assigned_to=self.assigned_to,
            waiting_for_response=(
                waiting_for_response
                if waiting_for_response is not None
                else self.waiting_for_response
            ),
            waiting_since=waiting_since if waiting_since is not None else self.waiting_since,
            follow_up_after_hours=self.follow_up_after_hours,
            reminder_at=self.reminder_at,
            reminders=list(self.reminders),
            subtasks=list(self.subtasks),
        )


class ValidationError(Exception):
    pass


def date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FMT)


def parse_date_key(value: object) -> Optional[str]:
    """Return the ``YYYY-MM-DD`` portion of a due date, or None if unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return date_key(value.date())
    if isinstance(value, date):
        return date_key(value)
    text = str(value).strip()
    if not text:
        return None
    candidate = text.split("T")[0].split(" ")[0]
    try:
        return date_key(date.fromisoformat(candidate))
    except ValueError:
        return None


def due_date_key(task: Task) -> Optional[str]:
    return parse_date_key(task.due_date)


def parse_datetime(value: str) -> datetime:
    value = value.strip()

    # Accept ISO-8601 formats like YYYY-MM-DDTHH:MM[:SS][Z|+HH:MM]
    iso_candidate = value
    if iso_candidate.endswith("Z"):
        iso_candidate = iso_candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(iso_candidate)
    except ValueError:
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is not None:
            # Compare against naive local "now"
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    # Accept YYYY-MM-DD HH:MM and normalize seconds
    try:
        if len(value) == 16 and "T" not in value:  # YYYY-MM-DD HH:MM
            value = f"{value}:00"
        return datetime.strptime(value, DATETIME_FMT)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid datetime format: '{value}'. Expected YYYY-MM-DD HH:MM[:SS]"
        ) from exc


def parse_optional_datetime(value: Optional[str]) -> Optional[datetime]:
    """Lenient variant used by predicates: unparseable timestamps become None."""
    if not value:
        return None
    try:
        return parse_datetime(str(value))
    except ValidationError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object, label: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0", ""):
            return False
    raise ValidationError(f"Field '{label}' must be a boolean")


def _coerce_hours(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("Field 'follow_up_after_hours' must be numeric")
    try:
        hours = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError("Field 'follow_up_after_hours' must be numeric") from exc
    if hours < 0:
        raise ValidationError("Field 'follow_up_after_hours' cannot be negative")
    return hours


def _normalize_status(raw: object) -> str:
    status = str(raw or "todo").strip().lower()
    if status not in TASK_STATUSES:
        valid = ", ".join(TASK_STATUSES)
        raise ValidationError(f"Invalid status '{status}'. Expected one of: {valid}")
    return status


def _normalize_category(raw: object) -> Optional[str]:
    category = _optional_str(raw)
    if category is None:
        return None
    category = category.lower()
    if category not in ALL_CATEGORIES:
        valid = ", ".join(ALL_CATEGORIES)
        raise ValidationError(f"Invalid category '{category}'. Expected one of: {valid}")
    return category


def _extract_reminders(raw: object) -> List[TaskReminder]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("'reminders' must be a list")
    reminders: List[TaskReminder] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"Reminder #{idx} must be an object")
        reminders.append(
            TaskReminder(
                id=str(item.get("id") or idx),
                status=str(item.get("status") or "pending").strip().lower(),
                remind_at=_optional_str(item.get("remind_at")),
            )
        )
    return reminders


def _extract_subtasks(raw: object) -> List[Subtask]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("'subtasks' must be a list")
    subtasks: List[Subtask] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"Subtask #{idx} must be an object")
        subtasks.append(
            Subtask(
                id=str(item.get("id") or idx),
                text=str(item.get("text") or ""),
                completed=_coerce_bool(item.get("completed"), "completed"),
            )
        )
    return subtasks


def normalize_task_payload(data: dict) -> Task:
    """Build a Task from a host payload.

    The due date is kept verbatim; a malformed one is not an error here
    because the calendar treats it as "no due date".
    """
    if not isinstance(data, dict):
        raise ValidationError("Task payload must be an object")
    task_id = _optional_str(data.get("id"))
    if task_id is None:
        raise ValidationError("Missing 'id' field")

    priority = str(data.get("priority") or "").strip().lower()

    return Task(
        id=task_id,
        text=str(data.get("text") or ""),
        due_date=_optional_str(data.get("due_date")),
        completed=_coerce_bool(data.get("completed"), "completed"),
        status=_normalize_status(data.get("status")),
        priority=priority,
        category=_normalize_category(data.get("category")),
        assigned_to=_optional_str(data.get("assigned_to")),
        waiting_for_response=_coerce_bool(
            data.get("waiting_for_response"), "waiting_for_response"
        ),
        waiting_since=_optional_str(data.get("waiting_since")),
        follow_up_after_hours=_coerce_hours(data.get("follow_up_after_hours")),
        reminder_at=_optional_str(data.get("reminder_at")),
        reminders=_extract_reminders(data.get("reminders")),
        subtasks=_extract_subtasks(data.get("subtasks")),
    )


def task_to_jsonable(task: Task) -> dict:
    return {
        "id": task.id,
        "text": task.text,
        "due_date": task.due_date,
        "completed": task.completed,
        "status": task.status,
        "priority": task.priority,
        "category": task.category,
        "assigned_to": task.assigned_to,
        "waiting_for_response": task.waiting_for_response,
        "waiting_since": task.waiting_since,
        "follow_up_after_hours": task.follow_up_after_hours,
        "reminder_at": task.reminder_at,
        "reminders": [
            {"id": r.id, "status": r.status, "remind_at": r.remind_at}
            for r in task.reminders
        ],
        "subtasks": [
            {"id": s.id, "text": s.text, "completed": s.completed}
            for s in task.subtasks
        ],
    }


__all__ = [
    "Task",
    "Subtask",
    "TaskReminder",
    "ValidationError",
    "TaskStatus",
    "TaskPriority",
    "TASK_STATUSES",
    "PRIORITY_ORDER",
    "UNKNOWN_PRIORITY_WEIGHT",
    "ALL_CATEGORIES",
    "CATEGORY_LABELS",
    "DEFAULT_CATEGORY",
    "DEFAULT_FOLLOW_UP_HOURS",
    "DATE_KEY_FMT",
    "DATETIME_FMT",
    "date_key",
    "parse_date_key",
    "due_date_key",
    "parse_datetime",
    "parse_optional_datetime",
    "normalize_task_payload",
    "task_to_jsonable",
]
