"""Sweep command - remove temp files left behind by crashed writers."""

from __future__ import annotations

import click

from flowstate.maintenance import sweep_orphaned_temp_files
from flowstate.utils import log_info, log_step


@click.command("sweep")
@click.argument("directory", type=click.Path(file_okay=False, exists=True))
@click.option(
    "--older-than",
    type=click.FloatRange(min=0),
    default=None,
    help="Only remove temp files older than this many seconds",
)
@click.option("--dry-run", is_flag=True, help="List files without removing them")
def sweep(directory: str, older_than: float | None, dry_run: bool) -> None:
    """Remove orphaned *.tmp-* files under DIRECTORY."""
    removed = sweep_orphaned_temp_files(directory, older_than, dry_run=dry_run)
    if not removed:
        log_info("No orphaned temp files found")
        return
    verb = "Would remove" if dry_run else "Removed"
    log_info(f"{verb} {len(removed)} orphaned temp file(s):")
    for path in removed:
        log_step(str(path))
