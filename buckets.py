#!/usr/bin/env python3
"""Date-keyed task buckets for the calendar views."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

from models import Task, due_date_key
from task_flags import priority_weight

logger = logging.getLogger(__name__)

BucketIndex = Mapping[str, Sequence[Task]]


def is_schedulable(task: Task) -> bool:
    """Whether a task may appear on the calendar grid at all."""
    return not task.is_done and due_date_key(task) is not None


def build_date_buckets(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """Group open, dated tasks by ``YYYY-MM-DD`` and order each day by priority.

    ``list.sort`` is stable, so equal priorities keep their input order.
    """
    out: Dict[str, List[Task]] = {}
    skipped = 0
    for task in tasks:
        if task.is_done:
            continue
        key = due_date_key(task)
        if key is None:
            if task.due_date:
                skipped += 1
            continue
        out.setdefault(key, []).append(task)
    for day_tasks in out.values():
        day_tasks.sort(key=priority_weight)
    if skipped:
        logger.warning("Skipped %d task(s) with malformed due dates", skipped)
    return out


def flat_task_index(buckets: BucketIndex) -> Dict[str, Task]:
    index: Dict[str, Task] = {}
    for day_tasks in buckets.values():
        for task in day_tasks:
            index[task.id] = task
    return index


def bucket_for(buckets: BucketIndex, key: str) -> Sequence[Task]:
    return buckets.get(key, ())


__all__ = [
    "BucketIndex",
    "is_schedulable",
    "build_date_buckets",
    "flat_task_index",
    "bucket_for",
]
