"""
Batched inventory lookup.

SKUs are split into chunks and each chunk is resolved with a single
``sku IN (...)`` query against the source-items endpoint using bearer
authentication. A failed chunk is logged and skipped; its SKUs fall back to
the default inventory record when products are joined.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from ..auth.bearer import BearerAuthenticator
from ..config import RetryPolicy
from ..exceptions import ExhaustedRetriesError, TransportError
from ..http.client import RequestSpec, RetryingHttpClient
from ..models import InventoryRecord
from ..utils.batching import chunked
from .endpoints import CatalogEndpoints

if TYPE_CHECKING:
    from ..pipeline.performance import PerformanceTracker

logger = logging.getLogger(__name__)

SOURCE = "inventory"
IN_STOCK_STATUS = 1


def map_source_items(rows: Iterable[dict[str, Any]]) -> dict[str, InventoryRecord]:
    """
    Map source-item rows to inventory records keyed by SKU.

    ``quantity`` becomes ``qty`` (missing or non-numeric counts as 0) and
    ``status == 1`` means in stock. Several rows for the same SKU (one per
    source) are combined: quantities are summed and the SKU is in stock if
    any row is.
    """
    records: dict[str, InventoryRecord] = {}
    for row in rows:
        if not isinstance(row, dict) or not row.get("sku"):
            continue
        sku = str(row["sku"])
        try:
            qty = float(row.get("quantity") or 0)
        except (TypeError, ValueError):
            qty = 0.0
        in_stock = row.get("status") == IN_STOCK_STATUS

        existing = records.get(sku)
        if existing is not None:
            qty += existing.qty
            in_stock = in_stock or existing.is_in_stock
        records[sku] = InventoryRecord(sku=sku, qty=qty, is_in_stock=in_stock)
    return records


class InventoryBatchFetcher:
    """Resolves stock levels for SKUs, one request per chunk."""

    def __init__(
        self,
        client: RetryingHttpClient,
        endpoints: CatalogEndpoints,
        policy: RetryPolicy | None = None,
        tracker: "PerformanceTracker | None" = None,
        parallel: bool = False,
    ):
        self.client = client
        self.endpoints = endpoints
        self.policy = policy
        self.tracker = tracker
        self.parallel = parallel

    async def fetch_chunk(
        self, skus: Sequence[str], authenticator: BearerAuthenticator
    ) -> dict[str, InventoryRecord]:
        spec = RequestSpec(
            method="GET",
            url=self.endpoints.inventory_batch(skus),
            source=SOURCE,
            auth=authenticator,
        )
        if self.tracker is not None:
            self.tracker.record_call(SOURCE)
        body = await self.client.execute(spec, self.policy)
        items = body.get("items") if isinstance(body, dict) else None
        return map_source_items(items or [])

    async def _fetch_or_skip(
        self, index: int, skus: Sequence[str], authenticator: BearerAuthenticator
    ) -> dict[str, InventoryRecord]:
        try:
            return await self.fetch_chunk(skus, authenticator)
        except (ExhaustedRetriesError, TransportError) as e:
            logger.warning(f"Inventory chunk {index} ({len(skus)} SKUs) failed, using defaults: {e}")
            return {}

    async def resolve(
        self, skus: Iterable[str], bearer_token: str | None, batch_size: int
    ) -> dict[str, InventoryRecord]:
        """
        Resolve inventory for `skus` and return ``{sku: InventoryRecord}``.

        Issues exactly ``ceil(len(unique skus) / batch_size)`` requests.
        SKUs from failed chunks or without stock rows are absent from the map.

        Raises:
            SigningError: If `bearer_token` is empty.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        authenticator = BearerAuthenticator(bearer_token)
        unique_skus = list(dict.fromkeys(str(sku) for sku in skus if sku))
        if not unique_skus:
            return {}

        chunks = list(chunked(unique_skus, batch_size))
        logger.info(
            f"Inventory: {len(unique_skus)} SKUs in {len(chunks)} chunks "
            f"({'parallel' if self.parallel else 'sequential'})"
        )

        if self.parallel:
            results = await asyncio.gather(
                *(self._fetch_or_skip(i, chunk, authenticator) for i, chunk in enumerate(chunks, 1))
            )
        else:
            results = []
            for i, chunk in enumerate(chunks, 1):
                results.append(await self._fetch_or_skip(i, chunk, authenticator))

        inventory: dict[str, InventoryRecord] = {}
        for chunk_records in results:
            inventory.update(chunk_records)
        return inventory
