"""Lock-guarded read-modify-write of an existing JSON document.

Use this when an update depends on the current content (incrementing a
counter, appending to a list, moving a story between states). The whole
read -> transform -> write cycle runs under the target's lock, so two
commands updating the same document never lose each other's changes.

FAIL-OPEN: when the lock cannot be acquired the document is left alone
and the current on-disk content is handed back with ``success=False``,
so readers still get usable data while the writer backs off.
"""

from __future__ import annotations

import copy
import os
from typing import Any, Callable, Optional

from flowstate.atomic_io import atomic_write_json, read_json
from flowstate.errors import DocumentError
from flowstate.lock import PathLike, acquire, release
from flowstate.models import ReadModifyWriteResult
from flowstate.utils import log_debug

Transform = Callable[[Any], Any]


def atomic_read_modify_write(
    target_path: PathLike,
    transform: Transform,
    *,
    lock_timeout_ms: Optional[int] = None,
) -> ReadModifyWriteResult:
    """Apply *transform* to the document at *target_path* under its lock.

    Never raises. The lock is released on every exit path.

    Args:
        target_path: An existing JSON document. It is never created here.
        transform: Called with the parsed document; returns the new value.
            It may mutate its argument and return it.
        lock_timeout_ms: How long to wait on a live holder.

    Returns:
        ReadModifyWriteResult. ``data`` is the new value on success, the
        last good on-disk value when the lock was unavailable or the
        transform/write failed, and None when nothing could be read.
    """
    if not os.path.exists(target_path):
        return ReadModifyWriteResult(success=False, error=f"{target_path} does not exist")

    lock = acquire(target_path, lock_timeout_ms)
    if not lock.acquired:
        log_debug(f"Read-only fallback for {target_path}: {lock.error}")
        try:
            current = read_json(target_path)
        except DocumentError as exc:
            return ReadModifyWriteResult(
                success=False,
                error=f"Could not acquire lock ({lock.error}); {exc}",
            )
        return ReadModifyWriteResult(
            success=False,
            data=current,
            error=f"Could not acquire lock ({lock.error}), returning last known good data",
        )

    try:
        try:
            current = read_json(target_path)
        except DocumentError as exc:
            return ReadModifyWriteResult(success=False, error=str(exc))

        # The transform may mutate in place; keep a pristine copy to report on failure
        last_good = copy.deepcopy(current)
        try:
            updated = transform(current)
        except Exception as exc:
            return ReadModifyWriteResult(
                success=False,
                data=last_good,
                error=f"Transform failed: {exc}",
            )

        written = atomic_write_json(target_path, updated, force=True)
        if not written.success:
            return ReadModifyWriteResult(success=False, data=last_good, error=written.error)
        return ReadModifyWriteResult(success=True, data=updated)
    except Exception as exc:
        return ReadModifyWriteResult(success=False, error=f"Unexpected error: {exc}")
    finally:
        release(lock.lock_path)
