"""Inspection and cleanup of lock markers and abandoned temp files.

``acquire()`` already reclaims stale markers on contention; these
helpers are for operators and housekeeping commands that want to see
or tidy up state without taking a lock themselves.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from flowstate.constants import (
    LOCK_SUFFIX,
    MARKER_WRITE_GRACE_MS,
    ORPHAN_TEMP_AGE_SECONDS,
    TEMP_INFIX,
)
from flowstate.liveness import is_pid_alive
from flowstate.lock import (
    PathLike,
    lock_path_for,
    marker_age_ms,
    parse_marker_pid,
    read_marker,
    remove_stale_marker,
)
from flowstate.models import LockStatus
from flowstate.utils import log_debug, log_warn


def _inspect(target_path: PathLike) -> tuple[LockStatus, Optional[str]]:
    """Return the lock status and the raw marker content it was judged on."""
    lock_path = lock_path_for(target_path)
    status = LockStatus(target_path=str(target_path), lock_path=lock_path)
    try:
        content = read_marker(lock_path)
    except FileNotFoundError:
        return status, None

    status.exists = True
    status.pid = parse_marker_pid(content)
    status.alive = status.pid is not None and is_pid_alive(status.pid)
    status.pending = content == "" and marker_age_ms(lock_path) < MARKER_WRITE_GRACE_MS
    return status, content


def inspect_lock(target_path: PathLike) -> LockStatus:
    """Describe the lock marker of *target_path* without modifying it."""
    status, _ = _inspect(target_path)
    return status


def clear_stale_lock(target_path: PathLike) -> bool:
    """Remove the marker of *target_path* if its holder is gone.

    The marker is only deleted if its content is unchanged since it was
    judged stale, so a lock freshly taken by another process survives.

    Returns:
        True if a stale marker was removed, False if there was nothing
        to remove, the holder is still alive or the marker changed.

    Raises:
        OSError: The stale marker exists but could not be deleted.
    """
    status, content = _inspect(target_path)
    if not status.stale:
        return False
    if not remove_stale_marker(status.lock_path, content):
        return False
    log_debug(f"Removed stale lock {status.lock_path} (holder: {status.pid})")
    return True


def find_orphaned_temp_files(
    directory: PathLike, older_than_seconds: Optional[float] = None
) -> list[Path]:
    """List temp files under *directory* abandoned by crashed writers.

    Only ``<name>.tmp-<hex>`` files older than *older_than_seconds* are
    reported; younger ones may belong to a write still in progress.
    """
    if older_than_seconds is None:
        older_than_seconds = ORPHAN_TEMP_AGE_SECONDS
    root = Path(directory)
    if not root.is_dir():
        return []

    cutoff = time.time() - older_than_seconds
    orphans: list[Path] = []
    for candidate in sorted(root.rglob(f"*{TEMP_INFIX}*")):
        if not _is_temp_name(candidate.name):
            continue
        try:
            st = candidate.stat()
        except FileNotFoundError:
            continue
        if st.st_mtime <= cutoff and candidate.is_file():
            orphans.append(candidate)
    return orphans


def sweep_orphaned_temp_files(
    directory: PathLike,
    older_than_seconds: Optional[float] = None,
    *,
    dry_run: bool = False,
) -> list[Path]:
    """Delete the files ``find_orphaned_temp_files()`` reports.

    Returns:
        The files removed (or that would be removed with *dry_run*).
    """
    removed: list[Path] = []
    for orphan in find_orphaned_temp_files(directory, older_than_seconds):
        if dry_run:
            removed.append(orphan)
            continue
        try:
            orphan.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            log_warn(f"Could not remove {orphan}: {exc}")
            continue
        log_debug(f"Removed orphaned temp file {orphan}")
        removed.append(orphan)
    return removed


def _is_temp_name(name: str) -> bool:
    """True for ``<stem>.tmp-<hex>`` names, excluding lock markers."""
    if name.endswith(LOCK_SUFFIX):
        return False
    _, sep, suffix = name.rpartition(TEMP_INFIX)
    if not sep or not suffix:
        return False
    return all(ch in "0123456789abcdef" for ch in suffix)
