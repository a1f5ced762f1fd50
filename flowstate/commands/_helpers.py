"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click

from flowstate.constants import EXIT_TEMPFAIL
from flowstate.utils import log_error

CONTENTION_MESSAGE = "another process is using this resource; retry later"


def parse_json_argument(raw: str, what: str = "value") -> Any:
    """Parse a JSON literal given on the command line.

    Exits with status 1 on malformed input.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        log_error(f"Invalid JSON {what}: {exc}")
        sys.exit(1)


def echo_json(value: Any) -> None:
    """Print *value* the way documents are stored on disk."""
    click.echo(json.dumps(value, indent=2))


def fail(error: str | None, *, timed_out: bool = False) -> NoReturn:
    """Report a failed operation and exit.

    Contention timeouts are expected and transient, so they get a
    retry hint and EX_TEMPFAIL instead of a hard error.
    """
    if timed_out:
        log_error(f"{CONTENTION_MESSAGE} ({error})")
        sys.exit(EXIT_TEMPFAIL)
    log_error(error or "unknown error")
    sys.exit(1)
