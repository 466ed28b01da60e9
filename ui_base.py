#!/usr/bin/env python3
"""Basic UI helpers for curses rendering."""

from __future__ import annotations

import curses
from typing import Sequence


_BOX_COLOR_PAIR: int | None = None


def _box_color_attr() -> int:
    global _BOX_COLOR_PAIR
    if _BOX_COLOR_PAIR is not None:
        return _BOX_COLOR_PAIR
    if not curses.has_colors():
        _BOX_COLOR_PAIR = 0
        return _BOX_COLOR_PAIR
    try:
        curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLACK)
    except curses.error:
        _BOX_COLOR_PAIR = 0
        return _BOX_COLOR_PAIR
    _BOX_COLOR_PAIR = curses.color_pair(1)
    return _BOX_COLOR_PAIR


def _draw_bar(stdscr: "curses.window", y: int, left: str, right: str) -> None:  # type: ignore[name-defined]
    h, w = stdscr.getmaxyx()
    if w <= 1 or h <= 0:
        return
    width = w - 1
    text = left
    if right and len(left) + len(right) + 1 <= width:
        text = left + right.rjust(width - len(left))
    try:
        stdscr.addnstr(y, 0, text.ljust(width), width, curses.A_REVERSE)
    except curses.error:
        pass


def draw_header(stdscr: "curses.window", text: str, right: str = "") -> None:  # type: ignore[name-defined]
    _draw_bar(stdscr, 0, text, right)


def draw_footer(stdscr: "curses.window", text: str, right: str = "") -> None:  # type: ignore[name-defined]
    h, _ = stdscr.getmaxyx()
    _draw_bar(stdscr, h - 1, text, right)


def draw_centered_box(
    stdscr: "curses.window",  # type: ignore[name-defined]
    lines: Sequence[str],
    *,
    title: str = "",
    scroll: int = 0,
) -> None:
    """Draw a bordered box; ``scroll`` skips that many body lines."""
    h, w = stdscr.getmaxyx()
    if h < 5 or w < 10:
        return
    lines_list = list(lines) or [""]
    max_body = h - 4
    body = lines_list[scroll : scroll + max_body]
    win_h = len(body) + 2
    widest = max([len(line) for line in body] + [len(title) + 2])
    win_w = min(widest + 4, w - 2)
    win_y = (h - win_h) // 2
    win_x = (w - win_w) // 2
    win = stdscr.derwin(win_h, win_w, win_y, win_x)
    attr = _box_color_attr()
    if attr:
        win.bkgd(" ", attr)
        win.attrset(attr)
    win.erase()
    win.border()
    if title:
        win.addnstr(0, 2, f" {title} "[: win_w - 4], win_w - 4, attr | curses.A_BOLD)
    for idx, line in enumerate(body, start=1):
        win.addnstr(idx, 2, line[: win_w - 4], win_w - 4, attr)
    if scroll + len(body) < len(lines_list):
        win.addnstr(win_h - 1, win_w - 6, " … ", 3, attr)
    win.refresh()


def clamp(value: int, min_value: int, max_value: int) -> int:
    return max(min_value, min(value, max_value))


__all__ = ["draw_header", "draw_footer", "draw_centered_box", "clamp"]
