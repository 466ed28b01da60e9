#!/usr/bin/env python3
"""Category and assignee filtering over the bucket index."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List

from buckets import BucketIndex
from models import ALL_CATEGORIES, DEFAULT_CATEGORY, Task

_ALL_CATEGORY_SET: FrozenSet[str] = frozenset(ALL_CATEGORIES)


@dataclass(frozen=True)
class FilterState:
    """Immutable filter selection; every toggle returns a new state.

    An empty assignee set means "no assignee filter", not "match nothing".
    """

    selected_categories: FrozenSet[str] = field(default_factory=lambda: _ALL_CATEGORY_SET)
    selected_assignees: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def all_categories_selected(self) -> bool:
        return self.selected_categories >= _ALL_CATEGORY_SET

    @property
    def assignee_filter_active(self) -> bool:
        return bool(self.selected_assignees)

    @property
    def is_active(self) -> bool:
        return not self.all_categories_selected or self.assignee_filter_active

    def toggle_category(self, category: str) -> "FilterState":
        if category in self.selected_categories:
            selected = self.selected_categories - {category}
        else:
            selected = self.selected_categories | {category}
        return FilterState(frozenset(selected), self.selected_assignees)

    def select_all_categories(self) -> "FilterState":
        return FilterState(_ALL_CATEGORY_SET, self.selected_assignees)

    def clear_categories(self) -> "FilterState":
        return FilterState(frozenset(), self.selected_assignees)

    def toggle_assignee(self, assignee: str) -> "FilterState":
        if assignee in self.selected_assignees:
            selected = self.selected_assignees - {assignee}
        else:
            selected = self.selected_assignees | {assignee}
        return FilterState(self.selected_categories, frozenset(selected))

    def clear_assignees(self) -> "FilterState":
        return FilterState(self.selected_categories, frozenset())

    def matches(self, task: Task) -> bool:
        category_match = (
            self.all_categories_selected
            or task.category_or_default in self.selected_categories
        )
        assignee_match = not self.selected_assignees or (
            task.assigned_to is not None and task.assigned_to in self.selected_assignees
        )
        return category_match and assignee_match


def apply_filters(buckets: BucketIndex, filters: FilterState) -> BucketIndex:
    """Narrow the bucket index; dates left empty are dropped.

    With no active filter the input mapping is returned as-is.
    """
    if not filters.is_active:
        return buckets

    filtered: Dict[str, List[Task]] = {}
    for key, day_tasks in buckets.items():
        matching = [task for task in day_tasks if filters.matches(task)]
        if matching:
            filtered[key] = matching
    return filtered


def category_counts(tasks: Iterable[Task], anchor: date) -> Dict[str, int]:
    """Per-category counts of tasks due in the anchor's month.

    Compares the ``YYYY-MM`` prefix of the raw due date string.
    """
    counts = {category: 0 for category in ALL_CATEGORIES}
    year_month = anchor.strftime("%Y-%m")
    for task in tasks:
        if not task.due_date:
            continue
        if task.due_date[:7] != year_month:
            continue
        category = task.category_or_default
        counts[category if category in counts else DEFAULT_CATEGORY] += 1
    return counts


def unique_assignees(tasks: Iterable[Task]) -> List[str]:
    return sorted({task.assigned_to for task in tasks if task.assigned_to})


__all__ = [
    "FilterState",
    "apply_filters",
    "category_counts",
    "unique_assignees",
]
