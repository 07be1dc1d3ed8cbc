"""In-memory permission cache.

Process-local implementation of the PermissionCache protocol for
development, tests and single-instance deployments.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from loguru import logger

from ..entities import FlatPermissionSet, PermissionGrant


@dataclass(frozen=True)
class _CacheEntry:
    grants: FlatPermissionSet
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryPermissionCache:
    """TTL cache of flat permission sets keyed by principal id.

    Bounded by ``max_size``: expired entries are swept on write at most once
    per ``cleanup_interval_seconds``, and the oldest entries are evicted when
    the cache is still over its size limit.
    """

    def __init__(
        self,
        max_size: int = 10000,
        cleanup_interval_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic
    ):
        if max_size <= 0:
            raise ValueError("Max size must be positive")
        if cleanup_interval_seconds <= 0:
            raise ValueError("Cleanup interval must be positive")

        self.max_size = max_size
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, _CacheEntry]" = OrderedDict()
        self._last_cleanup = clock()
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "invalidations": 0, "evictions": 0}

    async def get(self, principal_id: str) -> Optional[FlatPermissionSet]:
        entry = self._entries.get(principal_id)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if entry.is_expired(self._clock()):
            self._entries.pop(principal_id, None)
            self._stats["misses"] += 1
            return None

        self._stats["hits"] += 1
        return entry.grants

    async def put(
        self,
        principal_id: str,
        grants: Iterable[PermissionGrant],
        ttl_seconds: int
    ) -> None:
        now = self._clock()
        if now - self._last_cleanup >= self.cleanup_interval_seconds:
            self._cleanup_expired(now)

        # Re-inserting moves the principal to the newest end
        self._entries.pop(principal_id, None)
        self._entries[principal_id] = _CacheEntry(
            grants=frozenset(grants),
            expires_at=now + ttl_seconds,
        )
        self._stats["sets"] += 1
        self._evict_if_needed()

    async def invalidate(self, principal_id: str) -> None:
        self._entries.pop(principal_id, None)
        self._stats["invalidations"] += 1

    async def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()

    def get_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        return {**self._stats, "size": len(self._entries), "max_size": self.max_size}

    def _cleanup_expired(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._last_cleanup = now

        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired permission cache entries")
        return len(expired)

    def _evict_if_needed(self) -> int:
        evicted = 0
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            evicted += 1

        if evicted:
            self._stats["evictions"] += evicted
            logger.debug(f"Evicted {evicted} permission cache entries over max size {self.max_size}")
        return evicted
