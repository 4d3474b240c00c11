"""Tests for the TTL response cache."""

import pytest

from short_put_analytics.data.cache import TTLCache


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entry_served_until_ttl_then_evicted() -> None:
    clock = _FakeClock()
    cache = TTLCache(ttl_seconds=60, clock=clock)
    cache.set(("AAPL", "spot"), 187.5)

    clock.now += 60
    assert cache.get(("AAPL", "spot")) == 187.5

    clock.now += 0.5
    assert cache.get(("AAPL", "spot")) is None
    assert len(cache) == 0


def test_overwrite_refreshes_timestamp() -> None:
    clock = _FakeClock()
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("k", 1)
    clock.now += 8
    cache.set("k", 2)
    clock.now += 8
    assert cache.get("k") == 2


def test_missing_key_and_clear() -> None:
    cache = TTLCache()
    assert cache.get("absent") is None
    cache.set("a", 1)
    cache.set("b", 2)
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


def test_non_positive_ttl_rejected() -> None:
    with pytest.raises(ValueError):
        TTLCache(ttl_seconds=0)
