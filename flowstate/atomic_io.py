"""Crash-safe JSON document writes.

Documents are written to a private sibling temp file and then moved
over the target with ``os.replace()``, so a reader sees either the old
document or the new one and never a partial write. The temp file lives
in the target's directory so the rename never crosses filesystems.
"""

from __future__ import annotations

import json
import os
import secrets
from pathlib import Path
from typing import Any, Optional

from flowstate.constants import TEMP_INFIX, TEMP_SUFFIX_BYTES
from flowstate.errors import DocumentError
from flowstate.lock import PathLike, acquire, release
from flowstate.models import WriteResult
from flowstate.utils import log_debug


def serialize_document(value: Any) -> str:
    """Render *value* as the on-disk document text.

    Two-space indentation and a trailing newline, so diffs of
    committed state files stay stable.

    Raises:
        DocumentError: *value* is not JSON-serializable.
    """
    try:
        return json.dumps(value, indent=2, allow_nan=False) + "\n"
    except (TypeError, ValueError) as exc:
        raise DocumentError(f"Cannot serialize document: {exc}") from exc


def temp_path_for(target_path: PathLike) -> str:
    """Return a fresh, randomly-suffixed temp path beside *target_path*."""
    return f"{target_path}{TEMP_INFIX}{secrets.token_hex(TEMP_SUFFIX_BYTES)}"


def read_json(path: PathLike) -> Any:
    """Read and parse a JSON document.

    Raises:
        DocumentError: The file is missing, unreadable, or not valid JSON.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise DocumentError(f"{path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise DocumentError(f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Cannot read {path}: {exc}") from exc


def _write_via_temp(target_path: PathLike, content: str) -> None:
    """Write *content* to a temp sibling and rename it over *target_path*.

    The temp file is removed if anything fails before the rename.
    """
    tmp_path = temp_path_for(target_path)
    try:
        with open(tmp_path, "x", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, target_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def atomic_write_json(
    target_path: PathLike,
    value: Any,
    *,
    force: bool = False,
    lock_timeout_ms: Optional[int] = None,
) -> WriteResult:
    """Persist *value* to *target_path* atomically. Never raises.

    Unless *force* is set, the write is guarded by the target's lock.
    If the lock cannot be acquired the write still goes ahead unlocked:
    callers that need strict mutual exclusion use
    ``atomic_read_modify_write()`` instead.

    Args:
        target_path: Document to write. Parent directories are created.
        value: Any JSON-serializable value.
        force: Skip locking, e.g. when the caller already holds the lock.
        lock_timeout_ms: Lock wait bound; defaults to the configured timeout.

    Returns:
        WriteResult with ``success`` and, on failure, ``error``.
    """
    lock_path: Optional[str] = None
    try:
        content = serialize_document(value)
        Path(target_path).parent.mkdir(parents=True, exist_ok=True)

        if not force:
            lock = acquire(target_path, lock_timeout_ms)
            if lock.acquired:
                lock_path = lock.lock_path
            else:
                log_debug(
                    f"Writing {os.path.basename(str(target_path))} without lock: {lock.error}"
                )

        _write_via_temp(target_path, content)
        return WriteResult(success=True)
    except (OSError, DocumentError) as exc:
        return WriteResult(success=False, error=str(exc))
    except Exception as exc:
        return WriteResult(success=False, error=f"Unexpected error: {exc}")
    finally:
        if lock_path is not None:
            release(lock_path)
