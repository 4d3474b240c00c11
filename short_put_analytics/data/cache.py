"""Time-bounded key-value store for provider responses."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Hashable

from short_put_analytics.config import QUOTE_CACHE_TTL_SECONDS


LOGGER = logging.getLogger(__name__)


class TTLCache:
    """In-memory cache whose entries expire ``ttl_seconds`` after writing.

    Expired entries are evicted when read. The clock is injectable so that
    expiry can be tested without sleeping.
    """

    def __init__(
        self,
        ttl_seconds: float = QUOTE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            LOGGER.debug("Cache entry expired: %s", key)
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
