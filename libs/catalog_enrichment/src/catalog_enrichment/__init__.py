"""Catalog enrichment client.

Fetches paged product records from a commerce catalog and enriches them with
category names and inventory, using:
- OAuth 1.0 (HMAC-SHA256) signed requests for products and categories
- Bearer-token batched queries for inventory
- An in-memory TTL cache for categories
"""

from .cache import CategoryCache
from .config import EnrichmentConfig, RetryPolicy
from .exceptions import (
    ApplicationErrorEnvelope,
    CatalogEnrichmentError,
    ExhaustedRetriesError,
    HttpStatusError,
    MalformedResponseError,
    NetworkError,
    PipelineError,
    SigningError,
    TransportError,
)
from .models import CredentialBundle, InventoryRecord
from .pipeline import CatalogEnrichmentPipeline, EnrichmentResult, PerformanceSnapshot

__all__ = [
    "ApplicationErrorEnvelope",
    "CatalogEnrichmentError",
    "CatalogEnrichmentPipeline",
    "CategoryCache",
    "CredentialBundle",
    "EnrichmentConfig",
    "EnrichmentResult",
    "ExhaustedRetriesError",
    "HttpStatusError",
    "InventoryRecord",
    "MalformedResponseError",
    "NetworkError",
    "PerformanceSnapshot",
    "PipelineError",
    "RetryPolicy",
    "SigningError",
    "TransportError",
]
