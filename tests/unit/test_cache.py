"""Unit tests for flowstate/cache.py."""

from __future__ import annotations

import json
import os

import pytest

from flowstate.atomic_io import atomic_write_json
from flowstate.cache import DocumentCache
from flowstate.errors import DocumentError


@pytest.fixture
def doc(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps({"version": 1}))
    return path


def _bump_mtime(path, seconds=5):
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


class TestDocumentCache:
    def test_first_read_is_a_miss(self, doc):
        cache = DocumentCache()
        assert cache.get(doc) == {"version": 1}
        assert cache.stats.misses == 1
        assert cache.stats.hits == 0
        assert doc in cache

    def test_unchanged_file_is_a_hit(self, doc):
        cache = DocumentCache()
        cache.get(doc)
        assert cache.get(doc) == {"version": 1}
        assert cache.stats.hits == 1

    def test_modified_file_is_reread(self, doc):
        cache = DocumentCache()
        cache.get(doc)
        doc.write_text(json.dumps({"version": 22}))
        _bump_mtime(doc)
        assert cache.get(doc) == {"version": 22}
        assert cache.stats.misses == 2

    def test_atomic_replacement_is_detected(self, doc):
        cache = DocumentCache()
        cache.get(doc)
        assert atomic_write_json(doc, {"version": 2}).success
        assert cache.get(doc) == {"version": 2}

    def test_returned_value_is_a_copy(self, doc):
        cache = DocumentCache()
        first = cache.get(doc)
        first["version"] = "mutated"
        assert cache.get(doc) == {"version": 1}

    def test_instances_are_isolated(self, doc):
        a = DocumentCache()
        b = DocumentCache()
        a.get(doc)
        assert doc not in b
        assert b.stats.misses == 0

    def test_missing_file_raises_and_drops_entry(self, doc):
        cache = DocumentCache()
        cache.get(doc)
        doc.unlink()
        with pytest.raises(DocumentError, match="does not exist"):
            cache.get(doc)
        assert doc not in cache

    def test_malformed_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(DocumentError):
            DocumentCache().get(path)

    def test_invalidate_single_path(self, doc):
        cache = DocumentCache()
        cache.get(doc)
        cache.invalidate(doc)
        assert doc not in cache
        cache.get(doc)
        assert cache.stats.misses == 2

    def test_invalidate_all(self, doc, tmp_path):
        other = tmp_path / "other.json"
        other.write_text("[]")
        cache = DocumentCache()
        cache.get(doc)
        cache.get(other)
        cache.invalidate()
        assert len(cache) == 0

    def test_lru_eviction(self, tmp_path):
        paths = []
        for i in range(3):
            p = tmp_path / f"doc{i}.json"
            p.write_text(json.dumps(i))
            paths.append(p)

        cache = DocumentCache(max_entries=2)
        cache.get(paths[0])
        cache.get(paths[1])
        cache.get(paths[0])  # doc0 is now most recently used
        cache.get(paths[2])

        assert paths[0] in cache
        assert paths[1] not in cache
        assert paths[2] in cache
        assert cache.stats.evictions == 1

    def test_unbounded(self, tmp_path):
        cache = DocumentCache(max_entries=None)
        for i in range(150):
            p = tmp_path / f"doc{i}.json"
            p.write_text("{}")
            cache.get(p)
        assert len(cache) == 150
        assert cache.stats.evictions == 0
