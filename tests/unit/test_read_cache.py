# =============================================================================
# tests/unit/test_read_cache.py
# Unit Tests for ReadCache
# =============================================================================

import pytest

from maintenance_core.offline.cache_manager import ReadCache, cache_key


class TestCacheKey:
    """Test cache key construction"""

    def test_entity_only(self):
        assert cache_key("jobs") == "jobs"

    def test_entity_with_filter_parts(self):
        assert cache_key("daily_expenses", 2569, 3, "MTN") == "daily_expenses:2569:3:MTN"


class TestReadCacheFreshness:
    """Test TTL behaviour"""

    def test_fresh_entry_is_returned(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("jobs", [{"id": "1"}])

        clock.advance(29.9)
        assert cache.get("jobs") == [{"id": "1"}]

    def test_expired_entry_is_dropped(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("jobs", [{"id": "1"}])

        clock.advance(30)
        assert cache.get("jobs") is None
        assert len(cache) == 0

    def test_contains_respects_ttl(self, clock):
        cache = ReadCache(10, clock=clock)
        cache.set("settings", {"id": 1})
        assert "settings" in cache

        clock.advance(11)
        assert "settings" not in cache


class TestReadCacheIsolation:
    """Cached payloads are copies"""

    def test_mutating_result_does_not_touch_cache(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("jobs", [{"id": "1", "costs": []}])

        first = cache.get("jobs")
        first[0]["costs"].append({"totalPrice": 5})
        first.append({"id": "2"})

        assert cache.get("jobs") == [{"id": "1", "costs": []}]

    def test_mutating_source_after_set_does_not_touch_cache(self, clock):
        cache = ReadCache(30, clock=clock)
        payload = [{"id": "1"}]
        cache.set("jobs", payload)
        payload[0]["id"] = "changed"

        assert cache.get("jobs") == [{"id": "1"}]


class TestReadCacheInvalidation:
    """Test prefix invalidation"""

    def test_invalidate_removes_entity_and_filtered_views(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("budgets:2569", [1])
        cache.set("budgets:all", [2])
        cache.set("budgets", [3])
        cache.set("daily_expenses:2569:3:MTN", [4])

        removed = cache.invalidate("budgets")

        assert removed == 3
        assert cache.get("budgets:2569") is None
        assert cache.get("daily_expenses:2569:3:MTN") == [4]

    def test_invalidate_does_not_match_longer_entity_names(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("jobs_archive", [1])

        assert cache.invalidate("jobs") == 0
        assert cache.get("jobs_archive") == [1]

    def test_clear(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0


class TestReadCacheStats:

    def test_hits_and_misses_are_counted(self, clock):
        cache = ReadCache(30, clock=clock)
        cache.get("jobs")
        cache.set("jobs", [])
        cache.get("jobs")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["entries"] == 1
        assert stats["ttl_seconds"] == 30

    @pytest.mark.parametrize("payload", [[], {}, 0, ""])
    def test_falsy_payloads_are_cache_hits(self, clock, payload):
        cache = ReadCache(30, clock=clock)
        cache.set("k", payload)
        assert cache.get("k") == payload
        assert cache.stats()["hits"] == 1
