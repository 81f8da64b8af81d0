import pytest

from core.exceptions import InvalidArgumentError
from utils.offline_cache import OfflineCache


def _failing():
    raise ConnectionError("offline")


def test_live_fetch_is_stored_and_marked_live():
    cache = OfflineCache()
    result = cache.fetch("courses", lambda: [{"id": 1}])
    assert result.is_live
    assert result.data == [{"id": 1}]
    assert cache.get("courses").fetched_at == result.fetched_at


def test_failed_fetch_serves_last_copy_marked_stale():
    cache = OfflineCache()
    live = cache.fetch("progress", lambda: {"progress": [40]})

    fallback = cache.fetch("progress", _failing)
    assert not fallback.is_live
    assert fallback.data == {"progress": [40]}
    assert fallback.fetched_at == live.fetched_at


def test_failed_fetch_without_copy_reraises():
    with pytest.raises(ConnectionError):
        OfflineCache().fetch("assignments", _failing)


def test_successful_fetch_replaces_entry_wholesale():
    cache = OfflineCache()
    cache.fetch("courses", lambda: [{"id": 1}, {"id": 2}])
    cache.fetch("courses", lambda: [{"id": 3}])
    assert cache.fetch("courses", _failing).data == [{"id": 3}]


def test_unknown_key_is_rejected():
    with pytest.raises(InvalidArgumentError):
        OfflineCache().fetch("grades", lambda: [])


def test_pluggable_storage():
    storage = {}
    cache = OfflineCache(storage=storage)
    cache.fetch("courses", lambda: ["x"])
    assert "courses" in storage
    cache.clear()
    assert storage == {}
    assert cache.get_stats() == {"size": 0, "keys": []}
