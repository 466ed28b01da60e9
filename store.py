#!/usr/bin/env python3
"""PyArrow-backed storage for labcal tasks."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

import pyarrow as pa
import pyarrow.parquet as pq

from models import Task, ValidationError, normalize_task_payload, task_to_jsonable

logger = logging.getLogger(__name__)

_REMINDER_TYPE = pa.struct(
    [
        ("id", pa.string()),
        ("status", pa.string()),
        ("remind_at", pa.string()),
    ]
)
_SUBTASK_TYPE = pa.struct(
    [
        ("id", pa.string()),
        ("text", pa.string()),
        ("completed", pa.bool_()),
    ]
)

_SCHEMA = pa.schema(
    [
        ("id", pa.string()),
        ("text", pa.string()),
        ("due_date", pa.string()),
        ("completed", pa.bool_()),
        ("status", pa.string()),
        ("priority", pa.string()),
        ("category", pa.string()),
        ("assigned_to", pa.string()),
        ("waiting_for_response", pa.bool_()),
        ("waiting_since", pa.string()),
        ("follow_up_after_hours", pa.float64()),
        ("reminder_at", pa.string()),
        ("reminders", pa.list_(_REMINDER_TYPE)),
        ("subtasks", pa.list_(_SUBTASK_TYPE)),
    ]
)


class StorageError(Exception):
    pass


def _tasks_to_table(tasks: Iterable[Task]) -> pa.Table:
    rows = [task_to_jsonable(task) for task in tasks]
    columns = {name: [row[name] for row in rows] for name in _SCHEMA.names}
    return pa.Table.from_pydict(columns, schema=_SCHEMA)


def _table_to_tasks(table: pa.Table) -> List[Task]:
    # Validate schema shape explicitly
    if table.schema != _SCHEMA:
        raise StorageError("Parquet schema mismatch for tasks.parquet")
    tasks: List[Task] = []
    for row in table.to_pylist():
        try:
            tasks.append(normalize_task_payload(row))
        except ValidationError as exc:
            logger.warning("Skipping stored task %r: %s", row.get("id"), exc)
    return tasks


def load_tasks(path: Path) -> List[Task]:
    if not path.exists():
        return []
    try:
        table = pq.read_table(path)
        return _table_to_tasks(table)
    except StorageError:
        raise
    except Exception as exc:
        raise StorageError(f"Failed to read tasks from {path}: {exc}") from exc


def _write_atomic(path: Path, table: pa.Table) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(dir=str(path.parent), delete=False) as tmp:
        tmp_path = Path(tmp.name)
    try:
        pq.write_table(table, tmp_path)
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            try:
                os.remove(tmp_path)
            except OSError:
                pass


def save_tasks(path: Path, tasks: Iterable[Task]) -> None:
    seen = set()
    ordered: List[Task] = []
    for task in tasks:
        if task.id in seen:
            raise ValidationError(f"Duplicate task id detected: {task.id}")
        seen.add(task.id)
        ordered.append(task)
    table = _tasks_to_table(ordered)
    try:
        _write_atomic(path, table)
    except OSError as exc:
        raise StorageError(f"Failed to write tasks to {path}: {exc}") from exc
    logger.debug("saved %d task(s) to %s", len(ordered), path)


def replace_task(path: Path, tasks: List[Task], updated: Task) -> List[Task]:
    """Swap in ``updated`` by id, persist, and return the new list."""
    out: List[Task] = []
    found = False
    for task in tasks:
        if task.id == updated.id:
            out.append(updated)
            found = True
        else:
            out.append(task)
    if not found:
        raise ValidationError(f"No task with id '{updated.id}'")
    save_tasks(path, out)
    return out


def append_task(path: Path, tasks: List[Task], new_task: Task) -> List[Task]:
    if any(task.id == new_task.id for task in tasks):
        raise ValidationError(f"A task with id '{new_task.id}' already exists")
    out = list(tasks) + [new_task]
    save_tasks(path, out)
    return out


__all__ = [
    "load_tasks",
    "save_tasks",
    "replace_task",
    "append_task",
    "StorageError",
]
