"""URL builders for the catalog REST endpoints.

All URLs are returned fully percent-encoded so the string that is signed is
exactly the string that goes on the wire.
"""

from collections.abc import Sequence
from urllib.parse import quote, urlencode

from ..config import EnrichmentConfig

FILTER_PREFIX = "searchCriteria[filter_groups][0][filters][0]"


class CatalogEndpoints:
    """Builds product, category and inventory URLs from configuration."""

    def __init__(self, config: EnrichmentConfig):
        self.config = config

    def _build(self, path: str, params: Sequence[tuple[str, object]] = ()) -> str:
        url = f"{self.config.base_url}{path}"
        if params:
            url += "?" + urlencode([(k, str(v)) for k, v in params], quote_via=quote)
        return url

    def products_page(self, page_size: int, current_page: int) -> str:
        """Paged product collection: ``searchCriteria[pageSize]`` / ``[currentPage]``."""
        params: list[tuple[str, object]] = [
            ("searchCriteria[pageSize]", page_size),
            ("searchCriteria[currentPage]", current_page),
        ]
        if self.config.product_fields:
            params.append(("fields", self.config.product_fields))
        return self._build(self.config.products_path, params)

    def category(self, category_id: str) -> str:
        """Single category lookup: ``GET <categories_path>/{id}``."""
        return self._build(f"{self.config.categories_path}/{quote(str(category_id), safe='')}")

    def inventory_batch(self, skus: Sequence[str]) -> str:
        """Multi-value inventory query equivalent to ``sku IN (v1, v2, ...)``."""
        return self._build(
            self.config.inventory_path,
            [
                (f"{FILTER_PREFIX}[field]", "sku"),
                (f"{FILTER_PREFIX}[value]", ",".join(skus)),
                (f"{FILTER_PREFIX}[condition_type]", "in"),
            ],
        )
