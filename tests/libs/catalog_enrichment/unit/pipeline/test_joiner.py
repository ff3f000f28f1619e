from catalog_enrichment.models import InventoryRecord
from catalog_enrichment.pipeline.joiner import EnrichmentJoiner


def test_merge_reference_example():
    products = [
        {"sku": "A1", "custom_attributes": [{"code": "category_ids", "value": ["10"]}]},
        {"sku": "A2"},
    ]
    category_map = {10: {"id": 10, "name": "Shoes"}}
    inventory_map = {"A1": InventoryRecord(sku="A1", qty=5, is_in_stock=True)}

    a1, a2 = EnrichmentJoiner().merge(products, category_map, inventory_map)

    assert a1["sku"] == "A1"
    assert a1["categories"] == [{"id": 10, "name": "Shoes"}]
    assert a1["qty"] == 5
    assert a1["inventory"] == {"qty": 5, "is_in_stock": True}
    assert a2["categories"] == []
    assert a2["qty"] == 0
    assert a2["inventory"] == {"qty": 0, "is_in_stock": False}


def test_merge_preserves_order_and_does_not_mutate_input():
    products = [{"sku": f"S{i}", "name": f"Product {i}"} for i in range(5)]

    enriched = EnrichmentJoiner().merge(products, {}, {})

    assert [p["sku"] for p in enriched] == ["S0", "S1", "S2", "S3", "S4"]
    assert "categories" not in products[0]
    assert enriched[0]["name"] == "Product 0"


def test_unresolved_categories_are_dropped_and_order_kept():
    products = [
        {"sku": "A1", "custom_attributes": [{"attribute_code": "category_ids", "value": "12,99,10"}]}
    ]
    category_map = {"10": {"id": 10, "name": "Shoes"}, "12": {"id": 12, "name": "Sale"}}

    (record,) = EnrichmentJoiner().merge(products, category_map, {})

    assert record["categories"] == [{"id": 12, "name": "Sale"}, {"id": 10, "name": "Shoes"}]


def test_inventory_given_as_mapping():
    (record,) = EnrichmentJoiner().merge(
        [{"sku": "A1"}], {}, {"A1": {"qty": 2, "is_in_stock": True}}
    )
    assert record["inventory"] == {"qty": 2.0, "is_in_stock": True}
    assert record["qty"] == 2.0


def test_media_absolute_urls_first_stable():
    products = [
        {
            "sku": "A1",
            "media_gallery_entries": [
                {"id": 1, "file": "/a/b/rel1.jpg"},
                {"id": 2, "file": "https://cdn.example.com/abs1.jpg"},
                {"id": 3, "file": "/a/b/rel2.jpg"},
                {"id": 4, "file": "/c/d/x.jpg", "url": "http://cdn.example.com/abs2.jpg"},
            ],
        }
    ]

    (record,) = EnrichmentJoiner().merge(products, {}, {})

    media = record["media_gallery_entries"]
    assert [entry["id"] for entry in media] == [2, 4, 1, 3]
    assert media[0]["url"] == "https://cdn.example.com/abs1.jpg"
    assert media[1]["url"] == "http://cdn.example.com/abs2.jpg"
    assert media[2]["url"] == "catalog/product/a/b/rel1.jpg"


def test_media_base_url_prefixes_relative_paths():
    joiner = EnrichmentJoiner(media_base_url="https://shop.example.com/media/")
    (record,) = joiner.merge([{"sku": "A1", "media_gallery_entries": [{"file": "/a/b/x.jpg"}]}], {}, {})

    assert record["media_gallery_entries"][0]["url"] == (
        "https://shop.example.com/media/catalog/product/a/b/x.jpg"
    )


def test_url_key_attached():
    products = [{"sku": "A1", "custom_attributes": [{"attribute_code": "url_key", "value": "red-shoe"}]}]
    (record,) = EnrichmentJoiner().merge(products, {}, {})
    assert record["url_key"] == "red-shoe"


def test_category_links_used_when_attribute_missing():
    products = [{"sku": "A1", "extension_attributes": {"category_links": [{"category_id": "10"}]}}]
    (record,) = EnrichmentJoiner().merge(products, {"10": {"id": 10, "name": "Shoes"}}, {})
    assert record["categories"] == [{"id": 10, "name": "Shoes"}]
