"""Set command - lock-guarded update of one top-level key."""

from __future__ import annotations

from typing import Any

import click

from flowstate.commands._helpers import echo_json, fail, parse_json_argument
from flowstate.rmw import atomic_read_modify_write


@click.command("set")
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("key")
@click.argument("value")
@click.option("--timeout-ms", type=click.IntRange(min=0), default=None, help="Lock wait bound")
@click.option("--quiet", "-q", is_flag=True, help="Do not print the updated document")
def set_cmd(path: str, key: str, value: str, timeout_ms: int | None, quiet: bool) -> None:
    """Set KEY to the JSON literal VALUE in the existing document at PATH."""
    new_value = parse_json_argument(value)

    def _assign(doc: Any) -> Any:
        if not isinstance(doc, dict):
            raise TypeError(f"{path} does not contain a JSON object")
        doc[key] = new_value
        return doc

    result = atomic_read_modify_write(path, _assign, lock_timeout_ms=timeout_ms)
    if not result.success:
        fail(result.error, timed_out="timeout" in (result.error or "").lower())
    if not quiet:
        echo_json(result.data)
