#!/usr/bin/env python3
"""Host-side task commands backed by the Parquet store."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from models import DATETIME_FMT, Task, ValidationError, parse_date_key
from store import StorageError, append_task, load_tasks, replace_task

logger = logging.getLogger(__name__)


class TaskService:
    """Applies calendar commands to persistent storage.

    Every command returns a fresh task list; callers hand it back to the
    engine instead of mutating tasks in place.
    """

    def __init__(self, data_path: Path) -> None:
        self._data_path = data_path

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_tasks(self) -> List[Task]:
        """Load all tasks from storage."""
        return load_tasks(self._data_path)

    @staticmethod
    def find(tasks: List[Task], task_id: str) -> Task:
        for task in tasks:
            if task.id == task_id:
                return task
        raise ValidationError(f"No task with id '{task_id}'")

    def reschedule(self, tasks: List[Task], task_id: str, new_date_key: str) -> List[Task]:
        key = parse_date_key(new_date_key)
        if key is None:
            raise ValidationError(f"Invalid date '{new_date_key}'. Expected YYYY-MM-DD")
        task = self.find(tasks, task_id)
        logger.info("rescheduling %s from %s to %s", task_id, task.due_date, key)
        return replace_task(self._data_path, tasks, task.with_updated(due_date=key))

    def complete(self, tasks: List[Task], task_id: str) -> List[Task]:
        task = self.find(tasks, task_id)
        return replace_task(
            self._data_path, tasks, task.with_updated(completed=True, status="done")
        )

    def set_waiting(
        self,
        tasks: List[Task],
        task_id: str,
        waiting: bool,
        *,
        now: Optional[datetime] = None,
    ) -> List[Task]:
        task = self.find(tasks, task_id)
        since = (now or datetime.now()).strftime(DATETIME_FMT) if waiting else None
        updated = replace(task, waiting_for_response=waiting, waiting_since=since)
        return replace_task(self._data_path, tasks, updated)

    def quick_add(self, tasks: List[Task], date_key: str, text: str) -> List[Task]:
        key = parse_date_key(date_key)
        if key is None:
            raise ValidationError(f"Invalid date '{date_key}'. Expected YYYY-MM-DD")
        title = text.strip()
        if not title:
            raise ValidationError("Task text cannot be empty")
        new_task = Task(id=uuid.uuid4().hex, text=title, due_date=key)
        return append_task(self._data_path, tasks, new_task)


__all__ = ["TaskService", "StorageError"]
