"""Tests for the snapshot TTL cache."""

from __future__ import annotations

from toolshed.cache import TTLCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_staleness_window():
    clock = _Clock()
    cache = TTLCache(default_stale_seconds=30, clock=clock)
    cache.set("inventory:snapshot", ["drill"])

    clock.now = 30
    assert cache.get("inventory:snapshot") == ["drill"]
    assert cache.get("inventory:snapshot", stale_seconds=10) is None

    clock.now = 31
    assert cache.get("inventory:snapshot") is None
    assert cache.get("never-set") is None


def test_invalidate_exact_key_or_prefix():
    cache = TTLCache()
    cache.set("inventory:snapshot", 1)
    cache.set("inventory:search:drill", 2)
    cache.set("inventory:search", 3)
    cache.set("reminders:counts", 4)

    cache.invalidate("inventory:search")
    assert cache.get("inventory:search") is None
    assert cache.get("inventory:search:drill") == 2

    cache.invalidate("inventory:")
    assert len(cache) == 1
    assert cache.get("reminders:counts") == 4

    cache.clear()
    assert len(cache) == 0
