"""Lock commands - inspect and clear lock markers."""

from __future__ import annotations

import json
import sys

import click

from flowstate.maintenance import clear_stale_lock, inspect_lock
from flowstate.utils import format_kv, log_error, log_info


@click.group("lock")
def lock_cmd() -> None:
    """Inspect or clear lock markers."""


@lock_cmd.command("status")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def status(path: str, json_output: bool) -> None:
    """Show who holds the lock on PATH."""
    info = inspect_lock(path)
    if json_output:
        payload = info.model_dump()
        payload["stale"] = info.stale
        click.echo(json.dumps(payload, indent=2))
        return

    if not info.exists:
        log_info(f"{path}: unlocked")
        return
    state = "stale" if info.stale else ("being created" if info.pending else "held")
    log_info(f"{path}: {state}")
    click.echo(format_kv("Lock file", info.lock_path))
    click.echo(format_kv("Holder PID", str(info.pid) if info.pid is not None else "(unreadable)"))
    click.echo(format_kv("Holder alive", "yes" if info.alive else "no"))


@lock_cmd.command("clear")
@click.argument("path", type=click.Path(dir_okay=False))
def clear(path: str) -> None:
    """Remove the lock on PATH if its holder is no longer running."""
    info = inspect_lock(path)
    if not info.exists:
        log_info(f"{path}: unlocked")
        return
    if not info.stale:
        holder = f"running process {info.pid}" if info.alive else "a process still creating it"
        log_error(f"Lock on {path} is held by {holder}; not removing")
        sys.exit(1)
    try:
        removed = clear_stale_lock(path)
    except OSError as exc:
        log_error(f"Could not remove {info.lock_path}: {exc}")
        sys.exit(1)
    if removed:
        log_info(f"Removed stale lock {info.lock_path}")
    else:
        log_info(f"Lock on {path} was released or retaken meanwhile; nothing removed")
