"""Advisory lock markers for cross-process access to shared documents.

A lock is a sidecar file ``<target>.lock`` created with ``O_EXCL`` and
holding the owner's pid. Contenders that find a marker check whether the
recorded pid is still running: a dead or unidentifiable holder is
reclaimed at once, a live one is waited on until the timeout.

There is no lease or heartbeat. A holder that is alive but hung keeps
its lock and contenders time out.

WARNING: like any advisory scheme this only protects against processes
that go through ``acquire()``. ``O_EXCL`` is unreliable on some networked
filesystems; keep protected files on local disk.
"""

from __future__ import annotations

import contextlib
import os
import random
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Optional, Union

from flowstate.constants import (
    DEFAULT_LOCK_TIMEOUT_MS,
    LOCK_RETRY_INTERVAL_MS,
    LOCK_RETRY_MIN_MS,
    LOCK_SUFFIX,
    MARKER_WRITE_GRACE_MS,
    MAX_STALE_RECLAIMS,
)
from flowstate.errors import LockError, LockTimeoutError
from flowstate.liveness import is_pid_alive
from flowstate.models import LockAcquisitionResult
from flowstate.utils import log_debug

PathLike = Union[str, Path]


def lock_path_for(target_path: PathLike) -> str:
    """Return the lock marker path for *target_path*."""
    return str(target_path) + LOCK_SUFFIX


# ============================================================================
# Marker I/O
# ============================================================================


def _create_marker(lock_path: str) -> None:
    """Exclusively create *lock_path* and record our pid in it.

    Raises:
        FileExistsError: The marker already exists.
        OSError: Any other filesystem fault.
    """
    fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    try:
        os.write(fd, f"{os.getpid()}\n".encode("ascii"))
    except OSError:
        os.close(fd)
        with contextlib.suppress(OSError):
            os.unlink(lock_path)
        raise
    os.close(fd)


def read_marker(lock_path: PathLike) -> Optional[str]:
    """Return the raw marker content, or None if it cannot be read.

    Raises:
        FileNotFoundError: The marker does not exist.
    """
    try:
        with open(lock_path, encoding="ascii", errors="replace") as f:
            return f.read()
    except FileNotFoundError:
        raise
    except OSError:
        return None


def parse_marker_pid(content: Optional[str]) -> Optional[int]:
    """Extract the holder pid from marker content, None if malformed."""
    if not content:
        return None
    try:
        return int(content.strip())
    except ValueError:
        return None


def remove_stale_marker(lock_path: str, judged_content: Optional[str]) -> bool:
    """Delete a stale marker, unless it changed since it was judged stale.

    Another contender may already have reclaimed the marker and written
    its own pid; that fresh marker must survive.

    Returns:
        True if this call deleted the marker.

    Raises:
        OSError: Deletion failed for a reason other than the file being gone.
    """
    try:
        current = read_marker(lock_path)
    except FileNotFoundError:
        return False
    if current != judged_content:
        return False
    try:
        os.unlink(lock_path)
    except FileNotFoundError:
        return False
    return True


def marker_age_ms(lock_path: str) -> float:
    """Milliseconds since the marker was last modified, 0 if it vanished."""
    try:
        return max(0.0, (time.time() - os.stat(lock_path).st_mtime) * 1000)
    except OSError:
        return 0.0


def _backoff_seconds(remaining_ms: float) -> float:
    """Jittered poll delay, never sleeping past the deadline."""
    delay_ms = random.uniform(LOCK_RETRY_MIN_MS, max(LOCK_RETRY_MIN_MS, LOCK_RETRY_INTERVAL_MS))
    return max(0.0, min(delay_ms, remaining_ms + 1)) / 1000.0


# ============================================================================
# Public API
# ============================================================================


def acquire(
    target_path: PathLike, timeout_ms: Optional[int] = None
) -> LockAcquisitionResult:
    """Acquire the lock marker for *target_path*.

    Retries immediately after reclaiming a stale marker and backs off
    while a live process holds it. Only waiting on a live holder counts
    against the timeout, so a dead holder's marker is reclaimed even
    with ``timeout_ms=0``. Never raises.

    Args:
        target_path: The document being protected (not the marker path).
        timeout_ms: How long to wait on a live holder. Defaults to
            ``DEFAULT_LOCK_TIMEOUT_MS``.

    Returns:
        A LockAcquisitionResult. On contention the error contains "timeout".
    """
    if timeout_ms is None:
        timeout_ms = DEFAULT_LOCK_TIMEOUT_MS
    lock_path = lock_path_for(target_path)

    try:
        start = time.monotonic()
        reclaims = 0
        while True:
            try:
                _create_marker(lock_path)
                return LockAcquisitionResult(acquired=True, lock_path=lock_path)
            except FileExistsError:
                pass
            except OSError as exc:
                return LockAcquisitionResult(
                    acquired=False,
                    lock_path=lock_path,
                    error=f"Failed to create lock: {exc}",
                )

            holder: Optional[int] = None
            stale = False
            wait = False
            try:
                content = read_marker(lock_path)
            except FileNotFoundError:
                # Released between our create attempt and the read
                content = ""
            else:
                holder = parse_marker_pid(content)
                if holder is not None:
                    stale = not is_pid_alive(holder)
                    wait = not stale
                elif content == "" and marker_age_ms(lock_path) < MARKER_WRITE_GRACE_MS:
                    # Creator has not written its pid yet
                    wait = True
                else:
                    stale = True

            if stale:
                log_debug(f"Reclaiming stale lock {lock_path} (holder: {holder})")
                try:
                    remove_stale_marker(lock_path, content)
                except OSError as exc:
                    return LockAcquisitionResult(
                        acquired=False,
                        lock_path=lock_path,
                        error=f"Failed to remove stale lock: {exc}",
                    )

            if not wait:
                # Stale or vanished marker: retry the create at once
                reclaims += 1
                if reclaims <= MAX_STALE_RECLAIMS:
                    continue
                return LockAcquisitionResult(
                    acquired=False,
                    lock_path=lock_path,
                    error=f"Failed to create lock: marker kept reappearing after "
                    f"{MAX_STALE_RECLAIMS} reclaims",
                )

            elapsed_ms = (time.monotonic() - start) * 1000
            if elapsed_ms > timeout_ms:
                held_by = f" (held by PID {holder})" if holder is not None else ""
                return LockAcquisitionResult(
                    acquired=False,
                    lock_path=lock_path,
                    error=f"Lock timeout after {timeout_ms}ms{held_by}",
                )
            time.sleep(_backoff_seconds(timeout_ms - elapsed_ms))
    except Exception as exc:
        return LockAcquisitionResult(
            acquired=False,
            lock_path=lock_path,
            error=f"Unexpected error: {exc}",
        )


def release(lock_path: PathLike) -> bool:
    """Remove a lock marker. Best-effort, never raises.

    Args:
        lock_path: The marker path, as returned in ``LockAcquisitionResult``.

    Returns:
        True if the marker is gone (removed now or already absent),
        False if removal failed.
    """
    try:
        os.unlink(lock_path)
    except FileNotFoundError:
        return True
    except Exception as exc:
        log_debug(f"Could not release lock {lock_path}: {exc}")
        return False
    return True


@contextlib.contextmanager
def locked(
    target_path: PathLike, timeout_ms: Optional[int] = None
) -> Iterator[LockAcquisitionResult]:
    """Hold the lock on *target_path* for the duration of a ``with`` block.

    Raises:
        LockTimeoutError: A live process held the lock past *timeout_ms*.
        LockError: The marker could not be created for any other reason.
    """
    result = acquire(target_path, timeout_ms)
    if not result.acquired:
        if result.timed_out:
            raise LockTimeoutError(result.error)
        raise LockError(result.error)
    try:
        yield result
    finally:
        release(result.lock_path)
