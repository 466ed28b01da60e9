#!/usr/bin/env python3
"""Drag-to-reschedule controller shared by the day, week and month views."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from buckets import BucketIndex, flat_task_index
from models import Task, due_date_key

logger = logging.getLogger(__name__)

DEFAULT_ACTIVATION_DISTANCE = 8.0

RescheduleCallback = Callable[[str, str], None]
IdleListener = Callable[[], None]


@dataclass(frozen=True)
class DragSession:
    task_id: str
    source_key: str
    candidate_key: Optional[str] = None


@dataclass(frozen=True)
class _PendingPointer:
    task_id: str
    origin_x: float
    origin_y: float


class DragRescheduleController:
    """Idle/dragging state machine emitting at most one reschedule per drop.

    ``session`` is the one shared value every renderer reads; nothing else
    tracks drag state.
    """

    def __init__(
        self,
        *,
        on_reschedule: Optional[RescheduleCallback] = None,
        activation_distance: float = DEFAULT_ACTIVATION_DISTANCE,
    ) -> None:
        self.on_reschedule = on_reschedule
        self.activation_distance = activation_distance
        self._index: Dict[str, Task] = {}
        self._session: Optional[DragSession] = None
        self._pending: Optional[_PendingPointer] = None
        self._idle_listeners: List[IdleListener] = []

    # Shared state
    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def active_task(self) -> Optional[Task]:
        if self._session is None:
            return None
        return self._index.get(self._session.task_id)

    @property
    def enabled(self) -> bool:
        return self.on_reschedule is not None

    def subscribe(self, listener: IdleListener) -> Callable[[], None]:
        """Call ``listener`` whenever a drag returns to idle."""
        self._idle_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._idle_listeners:
                self._idle_listeners.remove(listener)

        return unsubscribe

    def update_index(self, visible_buckets: BucketIndex) -> None:
        self._index = flat_task_index(visible_buckets)

    # Transitions
    def on_drag_start(self, task_id: str) -> bool:
        if self._session is not None:
            return False
        task = self._index.get(task_id)
        if task is None:
            logger.debug("drag start ignored: unknown task %s", task_id)
            return False
        source_key = due_date_key(task)
        if source_key is None:
            return False
        self._session = DragSession(task_id=task_id, source_key=source_key)
        logger.debug("drag start %s from %s", task_id, source_key)
        return True

    def on_drag_over(self, target_key: Optional[str]) -> None:
        if self._session is None:
            return
        self._session = DragSession(
            task_id=self._session.task_id,
            source_key=self._session.source_key,
            candidate_key=target_key,
        )

    def on_drop(self, target_key: Optional[str]) -> bool:
        """Finish the drag; returns True iff a reschedule was emitted."""
        session = self._session
        if session is None:
            return False
        self._end()
        if not target_key or self.on_reschedule is None:
            logger.debug("drop of %s without target", session.task_id)
            return False
        logger.debug("drop %s onto %s", session.task_id, target_key)
        self.on_reschedule(session.task_id, target_key)
        return True

    def on_cancel(self) -> None:
        self._pending = None
        if self._session is None:
            return
        logger.debug("drag cancel %s", self._session.task_id)
        self._end()

    # Pointer gesture with activation distance
    def pointer_down(self, task_id: str, x: float, y: float) -> None:
        if self._session is not None or not self.enabled:
            return
        self._pending = _PendingPointer(task_id, x, y)

    def pointer_move(self, x: float, y: float, target_key: Optional[str] = None) -> None:
        pending = self._pending
        if pending is not None:
            distance = math.hypot(x - pending.origin_x, y - pending.origin_y)
            if distance < self.activation_distance:
                return
            self._pending = None
            if not self.on_drag_start(pending.task_id):
                return
        if self._session is not None:
            self.on_drag_over(target_key)

    def pointer_up(self, target_key: Optional[str]) -> bool:
        """Release the pointer; a release before activation is a plain click."""
        if self._pending is not None:
            self._pending = None
            return False
        return self.on_drop(target_key)

    def _end(self) -> None:
        self._session = None
        self._pending = None
        for listener in list(self._idle_listeners):
            listener()


__all__ = [
    "DragSession",
    "DragRescheduleController",
    "DEFAULT_ACTIVATION_DISTANCE",
]
