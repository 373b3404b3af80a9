"""Bounded, least-recently-used cache of client address locations.

Failed lookups are cached as ``None`` and never retried while their slot
survives, which bounds the number of outbound lookups. Entries are only
removed when the cache is full; there is no time-based expiry.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from .providers import UpstreamLookupFailed
from .schemas import CacheSlot, GeoEntry

if TYPE_CHECKING:
    from .providers import GeoProvider


logger = logging.getLogger(__name__)


class GeoCache:
    """Maps client addresses to GeoEntry values, evicting the least recently used.

    All reads and writes of the slot map happen under a single lock. The
    provider call on a miss runs outside it, so a slow lookup never blocks
    other requests' cache access. Two concurrent misses for one address may
    both call the provider; the last result wins.

    Example:
        cache = GeoCache(provider, max_entries=100)
        entry = await cache.lookup("8.8.8.8")
    """

    def __init__(
        self,
        provider: "GeoProvider",
        max_entries: int = 100,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            provider: Backend used to resolve addresses on a miss.
            max_entries: Maximum number of cached addresses, at least 1.
            clock: Source of access timestamps.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.provider: GeoProvider = provider
        self.max_entries: int = max_entries
        self._clock: Callable[[], float] = clock
        self._slots: dict[str, CacheSlot] = {}
        self._lock = asyncio.Lock()

        # Statistics
        self.hits: int = 0
        self.misses: int = 0
        self.evictions: int = 0
        self.failed_lookups: int = 0

    @property
    def size(self) -> int:
        """Return the number of cached addresses."""
        return len(self._slots)

    def __contains__(self, address: object) -> bool:
        return address in self._slots

    def last_access(self, address: str) -> float | None:
        """Return when the address was last looked up, or None if not cached."""
        slot = self._slots.get(address)
        return slot.last_access if slot else None

    async def lookup(self, address: str) -> GeoEntry | None:
        """Return the location of an address, resolving it on a miss.

        Returns:
            The cached or freshly resolved GeoEntry, or None if the lookup
            failed now or on an earlier attempt.
        """
        async with self._lock:
            slot = self._slots.get(address)
            if slot is not None:
                slot.last_access = self._clock()
                self.hits += 1
                return slot.entry
            self.misses += 1

        entry: GeoEntry | None
        try:
            entry = await self.provider.fetch(address)
        except UpstreamLookupFailed as e:
            logger.debug("%s", e)
            self.failed_lookups += 1
            entry = None

        async with self._lock:
            if address not in self._slots and len(self._slots) >= self.max_entries:
                self._evict_oldest()
            self._slots[address] = CacheSlot(entry=entry, last_access=self._clock())

        return entry

    def _evict_oldest(self) -> None:
        """Drop the slot with the oldest access time. Caller holds the lock."""
        oldest = min(self._slots, key=lambda cached: self._slots[cached].last_access)
        del self._slots[oldest]
        self.evictions += 1
        logger.debug("Evicted %s from geo cache", oldest)

    def stats(self) -> dict[str, int]:
        """Return cache statistics."""
        return {
            "size": self.size,
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "failed_lookups": self.failed_lookups,
        }

    async def aclose(self) -> None:
        """Release the provider's resources."""
        await self.provider.aclose()
