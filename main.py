#!/usr/bin/env python3
"""Thin entrypoint for labcal."""

from __future__ import annotations

import logging
import os
import sys
from typing import Sequence

from _version import __version__
from config import Config, load_config
from models import ValidationError
from orchestrator import Orchestrator

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _print_help() -> None:
    print(
        "labcal - terminal calendar for lab tasks\n\n"
        "Usage:\n"
        "  labcal           Launch curses UI\n"
        "  labcal -h        Show this help\n"
        "  labcal -v        Show installed version\n"
    )


def parse_args(argv: Sequence[str]) -> tuple[bool, bool]:
    show_version = False
    show_help = False
    for arg in argv:
        if arg == "-h":
            show_help = True
            continue
        if arg == "-v":
            show_version = True
            continue
        raise ValidationError(f"Unknown flag '{arg}'")
    return show_version, show_help


def configure_logging(config: Config) -> None:
    """Send log records to the configured file; curses owns the terminal."""
    level = getattr(logging, config.log_level, logging.INFO)
    try:
        config.log_path.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=str(config.log_path), level=level, format=LOG_FORMAT)
    except OSError:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    # Make ESC detection snappy inside curses.
    os.environ.setdefault("ESCDELAY", "25")

    if argv is None:
        argv = sys.argv[1:]

    try:
        show_version, show_help = parse_args(argv)
    except ValidationError as exc:
        print(str(exc))
        return 1

    if show_version:
        print(__version__)
        return 0

    if show_help:
        _print_help()
        return 0

    config = load_config()
    configure_logging(config)
    logging.getLogger(__name__).info("labcal %s starting", __version__)
    return Orchestrator(version=__version__, config=config).run()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
