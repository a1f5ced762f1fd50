"""Configuration defaults for flowstate.

Every tunable can be overridden from the environment so that
independently-invoked commands agree on the same values without a
shared config file.
"""

from __future__ import annotations

import os


def _env_int(key: str, default: int) -> int:
    """Read an integer from an environment variable, returning default on parse failure."""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


# ============================================================================
# On-disk Naming
# ============================================================================

LOCK_SUFFIX: str = ".lock"
"""Suffix appended to a target path to form its lock marker."""

TEMP_INFIX: str = ".tmp-"
"""Infix between a target path and the random suffix of its temp file."""

TEMP_SUFFIX_BYTES: int = 8
"""Random bytes (rendered as hex) in a temp file suffix."""

# ============================================================================
# Lock Timing (milliseconds)
# ============================================================================

DEFAULT_LOCK_TIMEOUT_MS: int = _env_int("FLOWSTATE_LOCK_TIMEOUT_MS", 5000)
"""How long acquire() waits on a live holder before giving up."""

LOCK_RETRY_INTERVAL_MS: int = _env_int("FLOWSTATE_LOCK_RETRY_MS", 50)
"""Upper bound on a single back-off sleep while polling a held lock."""

LOCK_RETRY_MIN_MS: int = 10
"""Lower bound on a single back-off sleep."""

MARKER_WRITE_GRACE_MS: int = 1000
"""An empty marker younger than this is still being written, not malformed."""

MAX_STALE_RECLAIMS: int = 100
"""Immediate retries after stale or vanished markers before acquire() gives up."""

# ============================================================================
# Maintenance
# ============================================================================

ORPHAN_TEMP_AGE_SECONDS: int = _env_int("FLOWSTATE_ORPHAN_TEMP_AGE", 300)
"""Temp files older than this are considered abandoned by a crashed writer."""

# ============================================================================
# CLI Exit Codes
# ============================================================================

EXIT_TEMPFAIL: int = 75
"""Exit status for contention timeouts (EX_TEMPFAIL: retry later)."""
