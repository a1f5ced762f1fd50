"""Write command - atomically replace a JSON document."""

from __future__ import annotations

import click

from flowstate.atomic_io import atomic_write_json
from flowstate.commands._helpers import fail, parse_json_argument
from flowstate.utils import log_debug


@click.command("write")
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("value")
@click.option("--force", is_flag=True, help="Skip the lock (caller already holds it)")
@click.option("--timeout-ms", type=click.IntRange(min=0), default=None, help="Lock wait bound")
def write(path: str, value: str, force: bool, timeout_ms: int | None) -> None:
    """Write the JSON literal VALUE to PATH atomically."""
    data = parse_json_argument(value)
    result = atomic_write_json(path, data, force=force, lock_timeout_ms=timeout_ms)
    if not result.success:
        fail(result.error)
    log_debug(f"Wrote {path}")
