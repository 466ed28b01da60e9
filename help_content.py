"""Help and cheatsheet content for the labcal TUI."""

from __future__ import annotations

HELP_LINES: tuple[str, ...] = (
    "Views",
    "",
    "d / w / m    day / week / month view",
    "t            jump to today",
    "←  →         previous / next period",
    "Tab          month view: focus grid (arrows move, Enter opens day)",
    "",
    "Tasks",
    "",
    "j / k        select task on the focused day",
    "g            pick up selected task; arrows choose a day, Enter drops",
    "Esc          cancel drag / close menu / clear grid cursor",
    "o            show all tasks of the focused day",
    "n            quick-add a task on the focused day",
    "x            mark selected task complete",
    "z            toggle waiting-for-response",
    "f            filters (1-9,0,a-d categories, * all, - none, u assignee)",
    "",
    "Markers: ! overdue  @ follow-up due  ^ reminder  + open subtasks",
    "",
    "q            quit",
    "?            toggle this help",
)

__all__ = ["HELP_LINES"]
