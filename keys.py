#!/usr/bin/env python3
"""Key constants and curses-to-engine key mapping."""
from __future__ import annotations

import curses
from typing import Optional

from shortcuts import KeyEvent

# Key constants
KEY_Q = ord("q")
KEY_CAP_Q = ord("Q")
KEY_HELP = ord("?")
KEY_ESC = 27
KEY_TAB = 9
KEY_ENTER = (10, 13, curses.KEY_ENTER)
KEY_BACKSPACE = (8, 127, curses.KEY_BACKSPACE)

KEY_GRAB = ord("g")
KEY_FILTERS = ord("f")
KEY_QUICK_ADD = ord("n")
KEY_COMPLETE = ord("x")
KEY_WAITING = ord("z")
KEY_MORE = ord("o")
KEY_NEXT_TASK = ord("j")
KEY_PREV_TASK = ord("k")

_ARROWS = {
    curses.KEY_LEFT: "ArrowLeft",
    curses.KEY_RIGHT: "ArrowRight",
    curses.KEY_UP: "ArrowUp",
    curses.KEY_DOWN: "ArrowDown",
}

# Filter menu: digits then letters toggle categories in display order
FILTER_TOGGLE_KEYS = "1234567890abcd"


def to_key_event(ch: int) -> Optional[KeyEvent]:
    if ch in _ARROWS:
        return KeyEvent(_ARROWS[ch])
    if ch in KEY_ENTER:
        return KeyEvent("Enter")
    if ch == KEY_ESC:
        return KeyEvent("Escape")
    if 0 < ch < 256 and chr(ch).isprintable():
        return KeyEvent(chr(ch))
    return None


__all__ = [
    "KEY_Q",
    "KEY_CAP_Q",
    "KEY_HELP",
    "KEY_ESC",
    "KEY_TAB",
    "KEY_ENTER",
    "KEY_BACKSPACE",
    "KEY_GRAB",
    "KEY_FILTERS",
    "KEY_QUICK_ADD",
    "KEY_COMPLETE",
    "KEY_WAITING",
    "KEY_MORE",
    "KEY_NEXT_TASK",
    "KEY_PREV_TASK",
    "FILTER_TOGGLE_KEYS",
    "to_key_event",
]
