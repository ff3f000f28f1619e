from catalog_enrichment.api_helpers.endpoints import CatalogEndpoints
from catalog_enrichment.config import EnrichmentConfig


def test_products_page_url(config):
    url = CatalogEndpoints(config).products_page(20, 3)
    assert url == (
        "https://shop.example.com/rest/V1/products"
        "?searchCriteria%5BpageSize%5D=20&searchCriteria%5BcurrentPage%5D=3"
    )


def test_products_page_includes_field_selector():
    config = EnrichmentConfig(base_url="https://shop.example.com/", product_fields="items[sku],total_count")
    url = CatalogEndpoints(config).products_page(20, 1)
    assert url.startswith("https://shop.example.com/rest/V1/products?")
    assert url.endswith("&fields=items%5Bsku%5D%2Ctotal_count")


def test_category_url_quotes_id(config):
    endpoints = CatalogEndpoints(config)
    assert endpoints.category("10") == "https://shop.example.com/rest/V1/categories/10"
    assert endpoints.category("a/b") == "https://shop.example.com/rest/V1/categories/a%2Fb"


def test_inventory_batch_url(config):
    url = CatalogEndpoints(config).inventory_batch(["A1", "B 2"])
    assert url.startswith("https://shop.example.com/rest/all/V1/inventory/source-items?")
    assert "%5Bvalue%5D=A1%2CB%202" in url
    assert "%5Bcondition_type%5D=in" in url
