"""Tests for the in-memory response cache."""

from datetime import datetime, timedelta

from freezegun import freeze_time

from whitehatlink.api.state import ResponseCache


def test_get_set():
    cache = ResponseCache()
    cache.set("/api/inventory", "k", {"items": []}, ttl=60)

    assert cache.get("/api/inventory", "k") == {"items": []}
    assert cache.get("/api/inventory", "other") is None


def test_entries_expire():
    cache = ResponseCache()
    with freeze_time("2026-01-01 12:00:00") as frozen:
        cache.set("/api/inventory", "", "value", ttl=300)
        frozen.tick(timedelta(seconds=299))
        assert cache.get("/api/inventory") == "value"
        frozen.tick(timedelta(seconds=2))
        assert cache.get("/api/inventory") is None
        assert len(cache) == 0


def test_zero_ttl_not_stored():
    cache = ResponseCache()
    cache.set("/x", "", "value", ttl=0)
    assert len(cache) == 0


def test_invalidate_path_includes_nested():
    cache = ResponseCache()
    cache.set("/api/inventory", "", 1, ttl=60)
    cache.set("/api/inventory/niches", "", 2, ttl=60)
    cache.set("/api/inventory-archive", "", 3, ttl=60)

    assert cache.invalidate_path("/api/inventory/") == 2
    assert cache.get("/api/inventory-archive") == 3


def test_invalidate_root_only_matches_root():
    cache = ResponseCache()
    cache.set("/", "", "home", ttl=60)
    cache.set("/blog", "", "blog", ttl=60)

    assert cache.invalidate_path("/") == 1
    assert cache.get("/blog") == "blog"


def test_invalidate_tag():
    cache = ResponseCache()
    cache.set("/a", "", 1, ttl=60, tags=("inventory",))
    cache.set("/b", "", 2, ttl=60, tags=("inventory", "home"))
    cache.set("/c", "", 3, ttl=60, tags=("blog",))

    assert cache.invalidate_tag("inventory") == 2
    assert len(cache) == 1


def test_oldest_entries_evicted():
    cache = ResponseCache(max_entries=2)
    cache.set("/a", "", 1, ttl=60)
    cache.set("/b", "", 2, ttl=60)
    cache.set("/c", "", 3, ttl=60)

    assert cache.get("/a") is None
    assert cache.get("/c") == 3


def test_clear():
    cache = ResponseCache()
    cache.set("/a", "", 1, ttl=60)
    cache.clear()
    assert len(cache) == 0
