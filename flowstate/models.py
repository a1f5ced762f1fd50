from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class LockAcquisitionResult(BaseModel):
    """Outcome of a single ``acquire()`` call.

    Returned, never raised. Truthy exactly when the lock was acquired.
    """

    acquired: bool
    """Whether the caller now owns the lock marker."""

    lock_path: str
    """Path of the lock marker (``<target>.lock``)."""

    error: Optional[str] = None
    """Human-readable reason when ``acquired`` is False."""

    @property
    def timed_out(self) -> bool:
        """True when acquisition failed because a live process held the lock."""
        return not self.acquired and "timeout" in (self.error or "").lower()

    def __bool__(self) -> bool:
        return self.acquired


class WriteResult(BaseModel):
    """Outcome of ``atomic_write_json()``."""

    success: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class ReadModifyWriteResult(BaseModel):
    """Outcome of ``atomic_read_modify_write()``.

    ``data`` is the new document on success. On failure it is the last
    known good on-disk content when that could be read, else None.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class LockStatus(BaseModel):
    """Snapshot of a lock marker as seen by ``inspect_lock()``."""

    target_path: str
    lock_path: str

    exists: bool = False
    """Whether the marker file is present."""

    pid: Optional[int] = None
    """Holder pid recorded in the marker, None when absent or malformed."""

    alive: bool = False
    """Whether the recorded holder is a running process."""

    pending: bool = False
    """Marker was just created and its pid is not written yet."""

    @property
    def stale(self) -> bool:
        """True when a marker exists but nothing live holds it."""
        return self.exists and not self.alive and not self.pending
