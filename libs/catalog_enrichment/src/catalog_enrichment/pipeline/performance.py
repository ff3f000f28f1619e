"""
Performance tracking for enrichment runs.

`PerformanceTracker` is a passive accumulator: fetchers report calls and
cache outcomes, and the pipeline takes a `PerformanceSnapshot` at the end.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

SOURCES = ("products", "categories", "inventory")


@dataclass
class PerformanceSnapshot:
    """Counters and timings of one enrichment run.

    Attributes:
        product_calls: Product page requests issued.
        category_calls: Single-category requests issued.
        inventory_calls: Batched inventory requests issued.
        categories_cached: Distinct category ids served from cache.
        categories_fetched: Distinct category ids that needed a request.
        start_time: Unix timestamp when tracking started.
        end_time: Unix timestamp when the snapshot was taken.
        product_count: Products returned by the run.
        sku_count: SKUs submitted for inventory lookup.
        unique_categories: Distinct category ids referenced by the products.
    """

    product_calls: int = 0
    category_calls: int = 0
    inventory_calls: int = 0
    categories_cached: int = 0
    categories_fetched: int = 0
    start_time: float = 0.0
    end_time: float = 0.0
    product_count: int = 0
    sku_count: int = 0
    unique_categories: int = 0
    optimizations: list[str] = field(default_factory=list)

    @property
    def total_calls(self) -> int:
        return self.product_calls + self.category_calls + self.inventory_calls

    @property
    def execution_time(self) -> float:
        """Elapsed seconds between start and snapshot."""
        return max(0.0, self.end_time - self.start_time)

    @property
    def cache_hit_rate(self) -> int:
        """Percentage of category lookups served from cache (0 when none occurred)."""
        lookups = self.categories_cached + self.categories_fetched
        if lookups == 0:
            return 0
        return round(100 * self.categories_cached / lookups)

    @property
    def data_sources_unified(self) -> int:
        used = 0
        if self.product_calls > 0:
            used += 1
        if self.category_calls > 0 or self.categories_cached > 0:
            used += 1
        if self.inventory_calls > 0:
            used += 1
        return used

    @property
    def query_consolidation(self) -> str:
        return f"{self.total_calls}:1"

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping of counters, timings and derived metrics."""
        return {
            "product_calls": self.product_calls,
            "category_calls": self.category_calls,
            "inventory_calls": self.inventory_calls,
            "total_calls": self.total_calls,
            "categories_cached": self.categories_cached,
            "categories_fetched": self.categories_fetched,
            "cache_hit_rate": self.cache_hit_rate,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "execution_time": self.execution_time,
            "product_count": self.product_count,
            "sku_count": self.sku_count,
            "unique_categories": self.unique_categories,
            "data_sources_unified": self.data_sources_unified,
            "query_consolidation": self.query_consolidation,
            "optimizations": list(self.optimizations),
        }


class PerformanceTracker:
    """Accumulates call counts and cache outcomes for one run."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self.start_time = clock()
        self._calls = dict.fromkeys(SOURCES, 0)
        self.categories_cached = 0
        self.categories_fetched = 0

    def record_call(self, source: str, count: int = 1) -> None:
        if source not in self._calls:
            raise ValueError(f"Unknown data source: {source}")
        self._calls[source] += count

    def record_cache_hit(self, count: int = 1) -> None:
        self.categories_cached += count

    def record_cache_fetch(self, count: int = 1) -> None:
        self.categories_fetched += count

    def calls(self, source: str) -> int:
        return self._calls[source]

    def snapshot(
        self, product_count: int = 0, sku_count: int = 0, unique_categories: int = 0
    ) -> PerformanceSnapshot:
        """Freeze the current counters with the end time set to now."""
        snapshot = PerformanceSnapshot(
            product_calls=self._calls["products"],
            category_calls=self._calls["categories"],
            inventory_calls=self._calls["inventory"],
            categories_cached=self.categories_cached,
            categories_fetched=self.categories_fetched,
            start_time=self.start_time,
            end_time=self._clock(),
            product_count=product_count,
            sku_count=sku_count,
            unique_categories=unique_categories,
        )
        if snapshot.categories_cached > 0:
            snapshot.optimizations.append("Category Caching")
        if snapshot.data_sources_unified > 1:
            snapshot.optimizations.append("Multi-Source Integration")
        if snapshot.category_calls > 0 and snapshot.inventory_calls > 0:
            snapshot.optimizations.append("Parallel Data Fetching")
        return snapshot
