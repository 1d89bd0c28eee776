"""Tests for ConditionalCache."""

from github_api.api.cache import ConditionalCache
from github_api.models.types import CacheEntry


class TestConditionalCache:
    """Test ConditionalCache storage."""

    def test_get_missing_key(self):
        cache = ConditionalCache()
        assert cache.get("/user") is None

    def test_put_overwrites(self):
        cache = ConditionalCache()
        cache.put("/user", CacheEntry(etag='"a"', body={"v": 1}, status_text="OK"))
        cache.put("/user", CacheEntry(etag='"b"', body={"v": 2}, status_text="OK"))

        assert len(cache) == 1
        assert cache.get("/user").etag == '"b"'
        assert cache.get("/user").body == {"v": 2}

    def test_clear(self):
        cache = ConditionalCache()
        cache.put("/a", CacheEntry(etag='"a"', body="", status_text="OK"))
        cache.put("/b", CacheEntry(etag='"b"', body="", status_text="OK"))

        cache.clear()

        assert len(cache) == 0
        assert "/a" not in cache
