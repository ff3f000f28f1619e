"""Enrichment pipeline: identifier extraction, joining and performance tracking."""

from .enrichment_pipeline import CatalogEnrichmentPipeline, EnrichmentResult
from .id_extractor import (
    CategoryIdEncoding,
    ParsedCategoryIds,
    ProductIdentifiers,
    extract_identifiers,
    normalize_category_ids,
)
from .joiner import EnrichmentJoiner
from .performance import PerformanceSnapshot, PerformanceTracker

__all__ = [
    "CatalogEnrichmentPipeline",
    "CategoryIdEncoding",
    "EnrichmentJoiner",
    "EnrichmentResult",
    "ParsedCategoryIds",
    "PerformanceSnapshot",
    "PerformanceTracker",
    "ProductIdentifiers",
    "extract_identifiers",
    "normalize_category_ids",
]
