"""Fetchers for the catalog's product, category and inventory endpoints."""

from .categories import CategoryBatchFetcher
from .endpoints import CatalogEndpoints
from .inventory import InventoryBatchFetcher, map_source_items
from .products import PaginatedFetcher

__all__ = [
    "CatalogEndpoints",
    "CategoryBatchFetcher",
    "InventoryBatchFetcher",
    "PaginatedFetcher",
    "map_source_items",
]
