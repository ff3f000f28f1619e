"""
In-memory TTL cache for category lookups.

One instance is owned by a pipeline (or injected and shared between
pipelines). Entries are held in a `cachetools.TTLCache` and expire `ttl`
seconds after they were stored; expired entries are evicted when the cache
is read. There is no size bound.
"""

import logging
import math
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from cachetools import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_TTL = 300.0


@dataclass(frozen=True)
class CategoryCacheEntry:
    """Cached category payload and the time it was fetched."""

    id: str
    data: dict[str, Any]
    fetched_at: float

    @property
    def name(self) -> str | None:
        return self.data.get("name")


class CategoryCache:
    """Maps category id to category data with time-based expiry.

    Args:
        ttl: Entry lifetime in seconds.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CATEGORY_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl < 0:
            raise ValueError("Cache TTL must be non-negative")
        self.ttl = ttl
        self._clock = clock
        self._store: TTLCache = TTLCache(maxsize=math.inf, ttl=ttl, timer=clock)

    def __len__(self) -> int:
        return len(self._store)

    def get(self, category_id: Any) -> dict[str, Any] | None:
        """
        Return cached data for `category_id`, or None on a miss.

        An entry whose age has reached the TTL is evicted and reported as a miss.
        """
        key = str(category_id)
        expired = self._store.expire()
        if expired:
            logger.debug(f"Category cache evicted {len(expired)} expired entries")
        entry = self._store.get(key)
        return entry.data if entry is not None else None

    def set(self, category_id: Any, data: dict[str, Any]) -> None:
        key = str(category_id)
        self._store[key] = CategoryCacheEntry(id=key, data=data, fetched_at=self._clock())

    def build_map_from_cache(self, category_ids: Iterable[Any]) -> dict[str, dict[str, Any]]:
        """Return ``{id: data}`` for the ids that are cached and fresh; absent ids are omitted."""
        category_map: dict[str, dict[str, Any]] = {}
        for category_id in category_ids:
            data = self.get(category_id)
            if data is not None:
                category_map[str(category_id)] = data
        return category_map

    def prune(self) -> int:
        """Evict every expired entry. Returns the number removed."""
        return len(self._store.expire())

    def clear(self) -> None:
        self._store.clear()

    def stats(self) -> dict[str, Any]:
        self._store.expire()
        return {"size": len(self._store), "keys": list(self._store.keys())}
