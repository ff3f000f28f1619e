"""
Category lookup with cache-first resolution.

Cached ids are served from `CategoryCache`; the rest are fetched one request
per id, `batch_size` requests at a time. A lookup that fails after its
retries is logged and left out of the result.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..auth.base import Authenticator
from ..cache import CategoryCache
from ..config import RetryPolicy
from ..events import EventKind, FetchEvent, FetchObserver, LoggingObserver
from ..exceptions import ExhaustedRetriesError, MalformedResponseError, TransportError
from ..http.client import RequestSpec, RetryingHttpClient
from ..utils.batching import chunked
from .endpoints import CatalogEndpoints

if TYPE_CHECKING:
    from ..pipeline.performance import PerformanceTracker

logger = logging.getLogger(__name__)

SOURCE = "categories"


class CategoryBatchFetcher:
    """Resolves category ids to category data."""

    def __init__(
        self,
        client: RetryingHttpClient,
        endpoints: CatalogEndpoints,
        authenticator: Authenticator,
        cache: CategoryCache,
        policy: RetryPolicy | None = None,
        tracker: "PerformanceTracker | None" = None,
        observer: FetchObserver | None = None,
    ):
        self.client = client
        self.endpoints = endpoints
        self.authenticator = authenticator
        self.cache = cache
        self.policy = policy
        self.tracker = tracker
        self.observer = observer or LoggingObserver()

    async def fetch_category(self, category_id: str) -> dict[str, Any]:
        """Fetch a single category. Raises ExhaustedRetriesError on failure."""
        spec = RequestSpec(
            method="GET",
            url=self.endpoints.category(category_id),
            source=SOURCE,
            auth=self.authenticator,
        )
        if self.tracker is not None:
            self.tracker.record_call(SOURCE)
        body = await self.client.execute(spec, self.policy)
        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"Category {category_id} returned {type(body).__name__}, expected object"
            )
        return body

    async def _fetch_or_omit(self, category_id: str) -> dict[str, Any] | None:
        try:
            data = await self.fetch_category(category_id)
        except (ExhaustedRetriesError, TransportError) as e:
            logger.warning(f"Omitting category {category_id}: {e}")
            return None
        self.cache.set(category_id, data)
        return data

    async def resolve(self, category_ids: Iterable[Any], batch_size: int) -> dict[str, dict[str, Any]]:
        """
        Resolve `category_ids` and return ``{id: data}`` for every id that could be resolved.

        Ids are compared as strings and de-duplicated. Chunks of uncached ids
        run one after another; the requests inside a chunk run concurrently.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        unique_ids = list(dict.fromkeys(str(category_id) for category_id in category_ids))
        category_map = self.cache.build_map_from_cache(unique_ids)
        uncached = [category_id for category_id in unique_ids if category_id not in category_map]

        for category_id in unique_ids:
            kind = EventKind.CACHE_HIT if category_id in category_map else EventKind.CACHE_MISS
            self.observer.on_event(FetchEvent(kind, SOURCE, category_id))

        if self.tracker is not None:
            self.tracker.record_cache_hit(len(category_map))
            self.tracker.record_cache_fetch(len(uncached))

        logger.info(
            f"Categories: {len(category_map)} cached, {len(uncached)} to fetch "
            f"in chunks of {batch_size}"
        )

        for chunk in chunked(uncached, batch_size):
            results = await asyncio.gather(*(self._fetch_or_omit(category_id) for category_id in chunk))
            for category_id, data in zip(chunk, results):
                if data is not None:
                    category_map[category_id] = data

        omitted = len(unique_ids) - len(category_map)
        if omitted:
            logger.warning(f"{omitted} categories could not be resolved")
        return category_map
