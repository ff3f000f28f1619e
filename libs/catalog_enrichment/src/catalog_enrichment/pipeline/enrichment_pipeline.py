"""
Catalog enrichment pipeline.
Fetches every product page, resolves categories and inventory concurrently,
and joins them into enriched product records.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, TypeVar

import aiohttp

from ..api_helpers.categories import CategoryBatchFetcher
from ..api_helpers.endpoints import CatalogEndpoints
from ..api_helpers.inventory import InventoryBatchFetcher
from ..api_helpers.products import PaginatedFetcher
from ..auth.bearer import BearerAuthenticator
from ..auth.oauth_signer import OAuthAuthenticator
from ..cache import CategoryCache
from ..config import EnrichmentConfig, RetryPolicy
from ..events import FetchObserver, LoggingObserver
from ..exceptions import CatalogEnrichmentError, PipelineError
from ..http.client import RetryingHttpClient
from ..models import CredentialBundle
from .id_extractor import extract_identifiers
from .joiner import EnrichmentJoiner
from .performance import PerformanceSnapshot, PerformanceTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class EnrichmentResult:
    """Enriched products (in fetch order) and the run's performance snapshot."""

    products: list[dict[str, Any]]
    performance: PerformanceSnapshot

    def to_dict(self) -> dict[str, Any]:
        return {"products": self.products, "performance": self.performance.to_dict()}


class CatalogEnrichmentPipeline:
    """
    Orchestrates one enrichment run per `run()` call.

    The category cache outlives individual runs: it is built from the
    configured TTL unless one is injected, in which case it can be shared
    between pipelines.
    """

    def __init__(
        self,
        config: EnrichmentConfig | None = None,
        credentials: CredentialBundle | None = None,
        bearer_token: str | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        cache: CategoryCache | None = None,
        observer: FetchObserver | None = None,
    ):
        self.config = config or EnrichmentConfig()
        self.credentials = credentials
        self.bearer_token = bearer_token
        self.cache = cache if cache is not None else CategoryCache(ttl=self.config.category_cache_ttl)
        self.observer = observer or LoggingObserver()

        self._session = session
        self._owns_session = session is None

        self.endpoints = CatalogEndpoints(self.config)
        self.joiner = EnrichmentJoiner(
            attribute_code=self.config.category_attribute_code,
            media_base_url=self.config.media_base_url,
        )

        # Performance tracking
        self.timing_breakdown: dict[str, float] = {}
        self.last_performance: PerformanceSnapshot | None = None

        if self.config.verbose_logging:
            self.config.log_configuration()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this pipeline created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    @staticmethod
    async def _run_step(step: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except CatalogEnrichmentError as e:
            logger.error(f"Step '{step}' failed: {e}")
            raise PipelineError(step, e) from e

    async def run(
        self,
        *,
        page_size: int | None = None,
        max_pages: int | None = None,
        category_batch_size: int | None = None,
        inventory_batch_size: int | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> EnrichmentResult:
        """
        Run the enrichment once.

        Keyword overrides replace the matching configuration values for this
        run only.

        Returns:
            EnrichmentResult with enriched products in fetch order and the
            performance snapshot of this run.

        Raises:
            PipelineError: When credentials are invalid (step ``authenticate``)
                or a product page fails after all retries (step
                ``fetch_products``). Category and inventory failures only
                degrade the affected fields.
        """
        if page_size is None:
            page_size = self.config.page_size
        if max_pages is None:
            max_pages = self.config.max_pages
        if category_batch_size is None:
            category_batch_size = self.config.category_batch_size
        if inventory_batch_size is None:
            inventory_batch_size = self.config.inventory_batch_size
        policy = retry_policy if retry_policy is not None else self.config.retry_policy()

        self.timing_breakdown = {}
        tracker = PerformanceTracker()
        start_time = time.time()
        logger.info(f"Starting catalog enrichment from {self.config.base_url}")

        # Step 1: Validate credentials
        step_start = time.time()
        try:
            authenticator = OAuthAuthenticator(self.credentials)
            BearerAuthenticator(self.bearer_token)
        except CatalogEnrichmentError as e:
            logger.error(f"Authentication setup failed: {e}")
            raise PipelineError("authenticate", e) from e
        self.timing_breakdown["authenticate"] = time.time() - step_start

        client = RetryingHttpClient(self._get_session(), policy=policy, observer=self.observer)

        # Step 2: Fetch all product pages
        step_start = time.time()
        product_fetcher = PaginatedFetcher(client, self.endpoints, authenticator, policy, tracker)
        products = await self._run_step("fetch_products", product_fetcher.fetch_all(page_size, max_pages))
        self.timing_breakdown["fetch_products"] = time.time() - step_start
        logger.info(
            f"Step 2 complete: Fetched {len(products)} products in {self.timing_breakdown['fetch_products']:.2f}s"
        )

        # Step 3: Extract SKUs and category ids
        identifiers = extract_identifiers(products, self.config.category_attribute_code)

        # Step 4: Resolve categories and inventory concurrently
        step_start = time.time()
        category_fetcher = CategoryBatchFetcher(
            client,
            self.endpoints,
            authenticator,
            self.cache,
            policy,
            tracker,
            self.observer,
        )
        inventory_fetcher = InventoryBatchFetcher(
            client,
            self.endpoints,
            policy,
            tracker,
            parallel=self.config.parallel_inventory_batches,
        )
        tasks = [
            asyncio.ensure_future(
                self._run_step(
                    "fetch_categories",
                    category_fetcher.resolve(identifiers.category_ids, category_batch_size),
                )
            ),
            asyncio.ensure_future(
                self._run_step(
                    "fetch_inventory",
                    inventory_fetcher.resolve(identifiers.skus, self.bearer_token, inventory_batch_size),
                )
            ),
        ]
        try:
            category_map, inventory_map = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        self.timing_breakdown["fetch_enrichment"] = time.time() - step_start
        logger.info(
            f"Step 4 complete: Resolved {len(category_map)}/{len(identifiers.category_ids)} categories "
            f"and {len(inventory_map)}/{len(identifiers.skus)} SKUs in {self.timing_breakdown['fetch_enrichment']:.2f}s"
        )

        # Step 5: Join
        step_start = time.time()
        enriched = self.joiner.merge(products, category_map, inventory_map)
        self.timing_breakdown["join"] = time.time() - step_start

        performance = tracker.snapshot(
            product_count=len(enriched),
            sku_count=len(identifiers.skus),
            unique_categories=len(identifiers.category_ids),
        )
        self.last_performance = performance

        logger.info(
            f"Enrichment complete: {len(enriched)} products, {performance.total_calls} calls, "
            f"cache hit rate {performance.cache_hit_rate}% in {time.time() - start_time:.2f}s"
        )
        return EnrichmentResult(products=enriched, performance=performance)

    def get_performance_report(self) -> str:
        """Human-readable summary of the last run's timings and call counts."""
        report = ["Performance Report:"]
        report.append(f"  Page size: {self.config.page_size} (max {self.config.max_pages} pages)")
        report.append(
            f"  Batch sizes: categories={self.config.category_batch_size}, "
            f"inventory={self.config.inventory_batch_size}"
        )

        if self.timing_breakdown:
            report.append("\nTiming Breakdown:")
            for step, time_taken in self.timing_breakdown.items():
                report.append(f"  {step}: {time_taken:.3f}s")

        if self.last_performance is not None:
            performance = self.last_performance
            report.append("\nAPI Calls:")
            report.append(f"  products: {performance.product_calls}")
            report.append(f"  categories: {performance.category_calls}")
            report.append(f"  inventory: {performance.inventory_calls}")
            report.append(f"  cache hit rate: {performance.cache_hit_rate}%")

        return "\n".join(report)

    async def __aenter__(self) -> "CatalogEnrichmentPipeline":
        self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        """Close an owned session; exceptions from the block propagate."""
        await self.close()
        return False
