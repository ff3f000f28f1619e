"""
Configuration for the catalog enrichment pipeline.
Values can be overridden through CATALOG_ENRICHMENT_* environment variables.
"""

import logging
from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_FIELDS = (
    "items[id,sku,name,price,status,type_id,attribute_set_id,created_at,"
    "updated_at,weight,categories,media_gallery_entries,custom_attributes,"
    "extension_attributes],total_count"
)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings applied to a single logical request.

    Attributes:
        max_retries: Additional attempts after the first one.
        retry_delay: Constant delay between attempts, in seconds.
        timeout: Per-attempt timeout, in seconds.
    """

    max_retries: int = 3
    retry_delay: float = 1.0
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1


class EnrichmentConfig(BaseSettings):
    """
    Catalog enrichment configuration with validation.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_ENRICHMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Endpoints
    base_url: str = Field(
        default="https://commerce.example.com",
        description="Catalog service base URL (scheme and host)",
    )
    products_path: str = Field(
        default="/rest/V1/products", description="Paged product collection path"
    )
    categories_path: str = Field(
        default="/rest/V1/categories", description="Single category lookup path"
    )
    inventory_path: str = Field(
        default="/rest/all/V1/inventory/source-items",
        description="Batched inventory lookup path",
    )
    product_fields: str | None = Field(
        default=DEFAULT_PRODUCT_FIELDS,
        description="Field selector sent with product page requests",
    )
    media_base_url: str | None = Field(
        default=None,
        description="Prefix turning relative media paths into absolute URLs",
    )
    category_attribute_code: str = Field(
        default="category_ids",
        description="Custom attribute code holding product category identifiers",
    )

    # Pagination and batching
    page_size: int = Field(default=20, description="Products per page request")
    max_pages: int = Field(default=25, description="Upper bound on page requests")
    category_batch_size: int = Field(
        default=10, description="Concurrent category lookups per chunk"
    )
    inventory_batch_size: int = Field(
        default=20, description="SKUs per batched inventory query"
    )
    parallel_inventory_batches: bool = Field(
        default=False, description="Issue inventory chunk requests concurrently"
    )

    # Caching
    category_cache_ttl: float = Field(
        default=300.0, description="Category cache TTL in seconds (5 minutes)"
    )

    # Retry policy
    max_retries: int = Field(
        default=3, description="Retries after the first attempt of each request"
    )
    retry_delay: float = Field(
        default=1.0, description="Constant delay between retries in seconds"
    )
    request_timeout: float = Field(
        default=30.0, description="Timeout for each HTTP attempt in seconds"
    )

    verbose_logging: bool = Field(default=False, description="Enable verbose logging")

    @field_validator("base_url", "media_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/") if v else v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v):
        if v < 1 or v > 500:
            raise ValueError("Page size must be between 1 and 500")
        return v

    @field_validator("max_pages")
    @classmethod
    def validate_max_pages(cls, v):
        if v < 1:
            raise ValueError("max_pages must be at least 1")
        return v

    @field_validator("category_batch_size", "inventory_batch_size")
    @classmethod
    def validate_batch_size(cls, v):
        if v < 1 or v > 100:
            raise ValueError("Batch size must be between 1 and 100")
        return v

    @field_validator("category_cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v):
        if v < 0:
            raise ValueError("Cache TTL must be non-negative")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("max_retries must be non-negative")
        return v

    @field_validator("retry_delay")
    @classmethod
    def validate_retry_delay(cls, v):
        if v < 0:
            raise ValueError("retry_delay must be non-negative")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v):
        """
        Validate that the per-attempt timeout is within (0, 300] seconds.

        Raises:
            ValueError: If `v` is not positive or exceeds 300.
        """
        if v <= 0 or v > 300:
            raise ValueError("Request timeout must be greater than 0 and at most 300 seconds")
        return v

    def retry_policy(self) -> RetryPolicy:
        """Build the retry policy described by this configuration."""
        return RetryPolicy(
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            timeout=self.request_timeout,
        )

    def log_configuration(self) -> None:
        """Log current configuration for debugging."""
        logger.info("Catalog Enrichment Configuration:")
        logger.info(f"  Base URL: {self.base_url}")
        logger.info(f"  Page Size: {self.page_size} (max {self.max_pages} pages)")
        logger.info(
            f"  Batch Sizes: categories={self.category_batch_size}, inventory={self.inventory_batch_size}"
        )
        logger.info(f"  Category Cache TTL: {self.category_cache_ttl}s")
        logger.info(
            f"  Retries: {self.max_retries} x {self.retry_delay}s, timeout {self.request_timeout}s"
        )
