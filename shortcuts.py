#!/usr/bin/env python3
"""Global calendar shortcuts and the context in which they apply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

TEXT_INPUT_KINDS = frozenset({"input", "textarea", "select", "contenteditable"})

# Keys still honoured while Ctrl/Alt/Meta is held
_MODIFIER_PASSTHROUGH = frozenset({"Escape", "ArrowLeft", "ArrowRight"})

SHORTCUT_COMMANDS = {
    "d": "granularity_day",
    "w": "granularity_week",
    "m": "granularity_month",
    "t": "today",
    "ArrowLeft": "previous",
    "ArrowRight": "next",
    "ArrowUp": "grid_up",
    "ArrowDown": "grid_down",
    "Enter": "activate",
    "Escape": "escape",
}


@dataclass(frozen=True)
class ShortcutContext:
    """Where keyboard focus is when a key event arrives."""

    calendar_visible: bool = True
    modal_open: bool = False
    focused_element: Optional[str] = None


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta


def shortcut_context_active(context: ShortcutContext) -> bool:
    if not context.calendar_visible:
        return False
    if context.modal_open:
        return False
    focused = (context.focused_element or "").lower()
    return focused not in TEXT_INPUT_KINDS


def resolve_shortcut(event: KeyEvent, context: ShortcutContext) -> Optional[str]:
    """Map a key event to a command name, or None if it should be ignored."""
    if not shortcut_context_active(context):
        return None
    if event.has_modifier and event.key not in _MODIFIER_PASSTHROUGH:
        return None
    key = event.key if len(event.key) > 1 else event.key.lower()
    return SHORTCUT_COMMANDS.get(key)


__all__ = [
    "KeyEvent",
    "ShortcutContext",
    "SHORTCUT_COMMANDS",
    "shortcut_context_active",
    "resolve_shortcut",
]
