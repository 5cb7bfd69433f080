"""In-memory key/value cache with TTL expiry and batched age eviction."""

from __future__ import annotations

import heapq
import math
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from ..schemas.models import CacheStats


T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ITEMS = 500
EVICTION_FRACTION = 0.1


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float
    sequence: int


class TTLCache(Generic[T]):
    """Bounded cache whose entries expire ``ttl_seconds`` after insertion.

    When a new key arrives at capacity, the oldest tenth of the entries (at
    least one) is dropped in a single sweep. Entries are ordered by a
    timestamp min-heap; heap items left behind by overwrites or deletions
    are skipped lazily and the heap is rebuilt once it grows too stale.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_items: int = DEFAULT_MAX_ITEMS,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.name = name
        self._ttl_seconds = max(0.0, float(ttl_seconds))
        self._max_items = max(1, int(max_items))
        self._clock = clock or time.monotonic
        self._items: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._heap: List[Tuple[float, int, str]] = []
        self._sequence = 0
        self._lock = Lock()

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def eviction_batch_size(self) -> int:
        return max(1, math.floor(self._max_items * EVICTION_FRACTION))

    def _is_expired(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.timestamp > self._ttl_seconds

    def get(self, key: str) -> Optional[T]:
        now = self._clock()
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, now):
                self._items.pop(key, None)
                return None
            return entry.data

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        with self._lock:
            if key not in self._items and len(self._items) >= self._max_items:
                self._evict_oldest()
            self._sequence += 1
            entry = CacheEntry(data=value, timestamp=now, sequence=self._sequence)
            self._items.pop(key, None)
            self._items[key] = entry
            heapq.heappush(self._heap, (entry.timestamp, entry.sequence, key))
            self._maybe_compact()

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._heap.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def cleanup(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._items.items() if self._is_expired(entry, now)
            ]
            for key in expired:
                self._items.pop(key, None)
            if expired:
                self._rebuild_heap()
            return len(expired)

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            live = [
                entry.timestamp
                for entry in self._items.values()
                if not self._is_expired(entry, now)
            ]
            size = len(self._items)
        if not live:
            return CacheStats(size=size)
        return CacheStats(
            size=size,
            oldest_age=now - min(live),
            newest_age=now - max(live),
        )

    def _evict_oldest(self) -> None:
        remaining = self.eviction_batch_size
        while remaining > 0 and self._heap:
            timestamp, sequence, key = heapq.heappop(self._heap)
            entry = self._items.get(key)
            if entry is None or entry.sequence != sequence:
                continue
            del self._items[key]
            remaining -= 1

    def _maybe_compact(self) -> None:
        if len(self._heap) > 2 * len(self._items) + self._max_items:
            self._rebuild_heap()

    def _rebuild_heap(self) -> None:
        self._heap = [
            (entry.timestamp, entry.sequence, key) for key, entry in self._items.items()
        ]
        heapq.heapify(self._heap)
