"""Process liveness probe used to detect stale lock holders.

Uncertain outcomes are reported as alive: a lock is never reclaimed from
a process that might still be running.
"""

from __future__ import annotations

import os
from typing import Any


def is_pid_alive(pid: Any) -> bool:
    """Return True if a process with *pid* currently exists.

    Uses ``os.kill(pid, 0)``, which checks for existence without
    delivering a signal.

    Args:
        pid: Process id. Anything that is not a positive ``int`` (floats and
            NaN included) is rejected without probing.

    Returns:
        False for invalid ids and for "no such process"; True otherwise,
        including when the process exists but belongs to another user.
    """
    if isinstance(pid, bool) or not isinstance(pid, int):
        return False
    if pid <= 0:
        return False

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, we just may not signal it
        return True
    except (OSError, OverflowError):
        return True
    return True
