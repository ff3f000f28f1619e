"""
Paged product collection fetcher.

Drains the catalog's product collection page by page. Every page request is
signed and retried by the HTTP client; a page that still fails after its
retries aborts the whole fetch.
"""

import logging
from typing import TYPE_CHECKING, Any

from ..auth.base import Authenticator
from ..config import RetryPolicy
from ..exceptions import MalformedResponseError
from ..http.client import RequestSpec, RetryingHttpClient
from .endpoints import CatalogEndpoints

if TYPE_CHECKING:
    from ..pipeline.performance import PerformanceTracker

logger = logging.getLogger(__name__)

SOURCE = "products"


class PaginatedFetcher:
    """Fetches every product page up to a page limit."""

    def __init__(
        self,
        client: RetryingHttpClient,
        endpoints: CatalogEndpoints,
        authenticator: Authenticator,
        policy: RetryPolicy | None = None,
        tracker: "PerformanceTracker | None" = None,
    ):
        self.client = client
        self.endpoints = endpoints
        self.authenticator = authenticator
        self.policy = policy
        self.tracker = tracker

    async def fetch_page(self, page_size: int, current_page: int) -> dict[str, Any]:
        """Fetch one page and return its decoded body."""
        spec = RequestSpec(
            method="GET",
            url=self.endpoints.products_page(page_size, current_page),
            source=SOURCE,
            auth=self.authenticator,
        )
        if self.tracker is not None:
            self.tracker.record_call(SOURCE)
        body = await self.client.execute(spec, self.policy)
        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"Product page {current_page} returned {type(body).__name__}, expected object"
            )
        return body

    async def fetch_all(self, page_size: int, max_pages: int) -> list[dict[str, Any]]:
        """
        Fetch product pages 1..max_pages and return all items in page order.

        Stops after a page shorter than `page_size`, once the accumulated
        count reaches the reported ``total_count``, or when `max_pages`
        pages have been requested.

        Raises:
            ExhaustedRetriesError: If a page request fails after all retries.
            SigningError: If the request cannot be signed.
        """
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")

        products: list[dict[str, Any]] = []
        total_count: int | None = None

        for current_page in range(1, max_pages + 1):
            body = await self.fetch_page(page_size, current_page)
            items = body.get("items") or []
            products.extend(items)

            reported = body.get("total_count")
            if isinstance(reported, int):
                total_count = reported

            logger.debug(
                f"Product page {current_page}: {len(items)} items "
                f"({len(products)}/{total_count if total_count is not None else '?'})"
            )

            if len(items) < page_size:
                break
            if total_count is not None and len(products) >= total_count:
                break
        else:
            if total_count is not None and len(products) < total_count:
                logger.warning(
                    f"Stopped at page limit {max_pages} with {len(products)} of {total_count} products"
                )

        logger.info(f"Fetched {len(products)} products")
        return products
