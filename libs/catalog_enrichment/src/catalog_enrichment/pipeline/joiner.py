"""
Merges raw products with resolved categories and inventory.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from ..models import InventoryRecord
from .id_extractor import DEFAULT_CATEGORY_ATTRIBUTE, extract_url_key, normalize_category_ids

logger = logging.getLogger(__name__)

ABSOLUTE_URL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
MEDIA_PATH_PREFIX = "catalog/product"


def is_absolute_url(value: Any) -> bool:
    return isinstance(value, str) and bool(ABSOLUTE_URL_PATTERN.match(value))


class EnrichmentJoiner:
    """Builds enriched product records.

    Args:
        attribute_code: Custom attribute holding category ids.
        media_base_url: Prefix for relative media paths; when unset they stay
            catalog-relative (``catalog/product/...``).
    """

    def __init__(
        self,
        attribute_code: str = DEFAULT_CATEGORY_ATTRIBUTE,
        media_base_url: str | None = None,
    ):
        self.attribute_code = attribute_code
        self.media_base_url = media_base_url.rstrip("/") if media_base_url else None

    def merge(
        self,
        products: Sequence[dict[str, Any]],
        category_map: Mapping[Any, dict[str, Any]],
        inventory_map: Mapping[str, InventoryRecord | Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """
        Return one enriched record per product, in input order.

        Unresolved category ids are dropped. Products without an inventory
        entry get ``qty 0`` and ``is_in_stock False``.
        """
        categories_by_id = {str(key): value for key, value in category_map.items()}
        enriched = [
            self.enrich_product(product, categories_by_id, inventory_map) for product in products
        ]
        logger.debug(f"Joined {len(enriched)} products")
        return enriched

    def enrich_product(
        self,
        product: dict[str, Any],
        categories_by_id: Mapping[str, dict[str, Any]],
        inventory_map: Mapping[str, InventoryRecord | Mapping[str, Any]],
    ) -> dict[str, Any]:
        record = dict(product)
        sku = str(product.get("sku") or "")

        categories = []
        for category_id in normalize_category_ids(product, self.attribute_code).ids:
            data = categories_by_id.get(category_id)
            if data is None:
                continue
            categories.append({"id": data.get("id", category_id), "name": data.get("name")})
        record["categories"] = categories

        inventory = self._inventory_for(sku, inventory_map)
        record["inventory"] = inventory.payload()
        record["qty"] = inventory.qty

        if "media_gallery_entries" in product:
            record["media_gallery_entries"] = self.order_media(product.get("media_gallery_entries") or [])
        record["url_key"] = extract_url_key(product)
        return record

    @staticmethod
    def _inventory_for(
        sku: str, inventory_map: Mapping[str, InventoryRecord | Mapping[str, Any]]
    ) -> InventoryRecord:
        found = inventory_map.get(sku)
        if found is None:
            return InventoryRecord.default(sku)
        if isinstance(found, InventoryRecord):
            return found
        return InventoryRecord.model_validate({"sku": sku, **found})

    def media_url(self, entry: dict[str, Any]) -> str:
        """Absolute URL of a media entry, or its catalog-relative path."""
        for candidate in (entry.get("url"), entry.get("file")):
            if is_absolute_url(candidate):
                return candidate
        file_path = entry.get("file") or ""
        if not file_path:
            return entry.get("url") or ""
        if not file_path.startswith("/"):
            file_path = f"/{file_path}"
        if self.media_base_url:
            return f"{self.media_base_url}/{MEDIA_PATH_PREFIX}{file_path}"
        return f"{MEDIA_PATH_PREFIX}{file_path}"

    def order_media(self, entries: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Copy media entries with a resolved ``url``, absolute-URL entries first.

        Priority is decided on the stored ``url``/``file`` before resolution;
        ``sorted`` is stable so entries of equal priority keep their order.
        """
        ordered = sorted(
            entries,
            key=lambda entry: 0 if is_absolute_url(entry.get("url")) or is_absolute_url(entry.get("file")) else 1,
        )
        return [{**entry, "url": self.media_url(entry)} for entry in ordered]
