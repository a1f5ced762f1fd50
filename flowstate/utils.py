"""Logging utilities for flowstate.

Status output goes to stdout, warnings and errors to stderr, and debug
lines only appear when ``FLOWSTATE_DEBUG=1``. The core primitives log at
debug level only, since they run inside other commands whose output
must stay clean.
"""

from __future__ import annotations

import os
import sys


def _should_use_colors() -> bool:
    """Check if colors should be used based on TERM environment variable."""
    term = os.environ.get("TERM", "")
    if not term or term == "dumb":
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()

DIM = "\033[2m" if _USE_COLORS else ""
RESET = "\033[0m" if _USE_COLORS else ""


def debug_enabled() -> bool:
    """Return True when FLOWSTATE_DEBUG=1 is set."""
    return os.environ.get("FLOWSTATE_DEBUG") == "1"


def log_info(msg: str) -> None:
    """Log an info message to stdout.

    Args:
        msg: The message to log.
    """
    print(msg)


def log_debug(msg: str) -> None:
    """Log a debug message to stderr (only if FLOWSTATE_DEBUG=1).

    Args:
        msg: The message to log.
    """
    if debug_enabled():
        print(f"{DIM}DEBUG: {msg}{RESET}", file=sys.stderr)


def log_warn(msg: str) -> None:
    """Log a warning message to stderr.

    Args:
        msg: The message to log.
    """
    print(f"Warning: {msg}", file=sys.stderr)


def log_error(msg: str) -> None:
    """Log an error message to stderr.

    Args:
        msg: The message to log.
    """
    print(f"Error: {msg}", file=sys.stderr)


def log_step(msg: str) -> None:
    """Log an indented step message (2 spaces indent)."""
    print(f"  {msg}")


def format_kv(key: str, value: str) -> str:
    """Format a key-value pair with 2 spaces indent.

    Args:
        key: The key name.
        value: The value.

    Returns:
        Formatted string "  {key}: {value}".
    """
    return f"  {key}: {value}"
