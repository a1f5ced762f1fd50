"""Parse cache for frequently read JSON documents.

A ``DocumentCache`` is an ordinary object: each caller creates and owns
its instance, so tests and independent commands never share cached
state by accident. Entries are keyed by resolved path and invalidated
when the file's inode, modification time or size changes, which covers
replacements made by ``atomic_write_json()`` in other processes.
"""

from __future__ import annotations

import copy
import os
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Optional

from flowstate.atomic_io import read_json
from flowstate.lock import PathLike


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


@dataclass
class _Entry:
    ino: int
    mtime_ns: int
    size: int
    value: Any


@dataclass
class DocumentCache:
    """mtime-validated cache of parsed JSON documents.

    Args:
        max_entries: Evict the least recently used entry beyond this many.
            ``None`` means unbounded.
    """

    max_entries: Optional[int] = 100
    stats: CacheStats = field(default_factory=CacheStats)
    _entries: "OrderedDict[str, _Entry]" = field(default_factory=OrderedDict, init=False, repr=False)

    def get(self, path: PathLike) -> Any:
        """Return the parsed document at *path*, re-reading it only if it changed.

        The caller receives a copy; mutating it does not affect the cache.

        Raises:
            DocumentError: The file is missing or malformed.
        """
        key = os.path.realpath(path)
        try:
            st = os.stat(key)
        except FileNotFoundError:
            self._entries.pop(key, None)
            # read_json produces the canonical "does not exist" error
            return read_json(path)

        entry = self._entries.get(key)
        if entry is not None and (entry.ino, entry.mtime_ns, entry.size) == (
            st.st_ino, st.st_mtime_ns, st.st_size
        ):
            self._entries.move_to_end(key)
            self.stats.hits += 1
            return copy.deepcopy(entry.value)

        self.stats.misses += 1
        value = read_json(key)
        self._entries[key] = _Entry(
            ino=st.st_ino, mtime_ns=st.st_mtime_ns, size=st.st_size, value=value
        )
        self._entries.move_to_end(key)
        self._evict()
        return copy.deepcopy(value)

    def invalidate(self, path: Optional[PathLike] = None) -> None:
        """Drop the entry for *path*, or every entry when *path* is None."""
        if path is None:
            self._entries.clear()
            return
        self._entries.pop(os.path.realpath(path), None)

    def __contains__(self, path: PathLike) -> bool:
        return os.path.realpath(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self.stats.evictions += 1
