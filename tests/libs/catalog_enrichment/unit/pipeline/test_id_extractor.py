import pytest

from catalog_enrichment.pipeline.id_extractor import (
    CategoryIdEncoding,
    extract_identifiers,
    extract_url_key,
    get_custom_attribute,
    normalize_category_ids,
)


def _product(value, sku="A1"):
    return {"sku": sku, "custom_attributes": [{"attribute_code": "category_ids", "value": value}]}


def test_sequence_and_comma_string_are_equivalent():
    as_list = normalize_category_ids(_product(["10", "11"]))
    as_string = normalize_category_ids(_product("10,11"))

    assert as_list.ids == as_string.ids == ("10", "11")
    assert as_list.encoding is CategoryIdEncoding.SEQUENCE
    assert as_string.encoding is CategoryIdEncoding.COMMA_STRING


@pytest.mark.parametrize(
    "value, expected",
    [
        (" 10 , 11 ,", ("10", "11")),
        ([10, 11, 10], ("10", "11")),
        (12, ("12",)),
        ("", ()),
        ([], ()),
    ],
)
def test_values_are_normalized_to_ordered_strings(value, expected):
    assert normalize_category_ids(_product(value)).ids == expected


def test_short_code_key_is_accepted():
    product = {"sku": "A1", "custom_attributes": [{"code": "category_ids", "value": ["10"]}]}
    assert normalize_category_ids(product).ids == ("10",)


def test_category_links_fallback():
    product = {
        "sku": "A1",
        "extension_attributes": {
            "category_links": [{"position": 0, "category_id": "7"}, {"position": 1, "category_id": "8"}]
        },
    }

    parsed = normalize_category_ids(product)

    assert parsed.ids == ("7", "8")
    assert parsed.encoding is CategoryIdEncoding.CATEGORY_LINKS


def test_attribute_wins_over_category_links():
    product = _product(["10"])
    product["extension_attributes"] = {"category_links": [{"category_id": "7"}]}
    assert normalize_category_ids(product).ids == ("10",)


def test_product_without_categories():
    parsed = normalize_category_ids({"sku": "A2"})
    assert parsed.ids == ()
    assert parsed.encoding is CategoryIdEncoding.ABSENT


def test_custom_attribute_code_is_configurable():
    product = {"custom_attributes": [{"attribute_code": "cats", "value": "3,4"}]}
    assert normalize_category_ids(product, "cats").ids == ("3", "4")
    assert normalize_category_ids(product).ids == ()


def test_get_custom_attribute_from_mapping():
    assert get_custom_attribute({"custom_attributes": {"url_key": "red-shoe"}}, "url_key") == "red-shoe"


def test_extract_url_key():
    product = {"custom_attributes": [{"attribute_code": "url_key", "value": "red-shoe"}]}
    assert extract_url_key(product) == "red-shoe"
    assert extract_url_key({"sku": "A2"}) == ""


def test_extract_identifiers_dedupes_in_first_seen_order():
    products = [_product(["11", "10"], "A1"), _product("10,12", "A2"), {"sku": "A1"}, {"name": "no sku"}]

    identifiers = extract_identifiers(products)

    assert identifiers.skus == ["A1", "A2"]
    assert identifiers.category_ids == ["11", "10", "12"]
