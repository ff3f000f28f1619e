"""
Identifier extraction for raw product records.

Category identifiers arrive either as a list under the category custom
attribute, as one comma-separated string under the same attribute, or (when
the attribute is missing) as ``extension_attributes.category_links``.
`normalize_category_ids` is the only place that looks at the encoding; every
caller gets an ordered tuple of string ids.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ATTRIBUTE = "category_ids"
URL_KEY_ATTRIBUTE = "url_key"


class CategoryIdEncoding(str, Enum):
    """How a product stored its category identifiers."""

    SEQUENCE = "sequence"
    COMMA_STRING = "comma_string"
    CATEGORY_LINKS = "category_links"
    ABSENT = "absent"


@dataclass(frozen=True)
class ParsedCategoryIds:
    """Category ids of one product, in stored order, without duplicates."""

    ids: tuple[str, ...]
    encoding: CategoryIdEncoding


@dataclass
class ProductIdentifiers:
    """Distinct SKUs and category ids referenced by a product list, in first-seen order."""

    skus: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)


def _clean(values: Iterable[Any]) -> tuple[str, ...]:
    cleaned = (str(value).strip() for value in values if value is not None)
    return tuple(dict.fromkeys(value for value in cleaned if value))


def get_custom_attribute(product: dict[str, Any], attribute_code: str) -> Any:
    """Return the value of a custom attribute, or None when the product has none."""
    attributes = product.get("custom_attributes")
    if isinstance(attributes, dict):
        return attributes.get(attribute_code)
    for attribute in attributes or []:
        if not isinstance(attribute, dict):
            continue
        code = attribute.get("attribute_code", attribute.get("code"))
        if code == attribute_code:
            return attribute.get("value")
    return None


def parse_category_value(value: Any) -> ParsedCategoryIds:
    """Parse a stored category attribute value (list, comma string or scalar)."""
    if value is None:
        return ParsedCategoryIds((), CategoryIdEncoding.ABSENT)
    if isinstance(value, (list, tuple)):
        return ParsedCategoryIds(_clean(value), CategoryIdEncoding.SEQUENCE)
    if isinstance(value, str):
        return ParsedCategoryIds(_clean(value.split(",")), CategoryIdEncoding.COMMA_STRING)
    return ParsedCategoryIds(_clean([value]), CategoryIdEncoding.SEQUENCE)


def normalize_category_ids(
    product: dict[str, Any], attribute_code: str = DEFAULT_CATEGORY_ATTRIBUTE
) -> ParsedCategoryIds:
    """
    Read the category ids of `product`.

    The custom attribute wins when present; otherwise the ids come from
    ``extension_attributes.category_links[].category_id``.
    """
    parsed = parse_category_value(get_custom_attribute(product, attribute_code))
    if parsed.encoding is not CategoryIdEncoding.ABSENT:
        return parsed

    extension = product.get("extension_attributes") or {}
    links = extension.get("category_links") if isinstance(extension, dict) else None
    if links:
        ids = _clean(link.get("category_id") for link in links if isinstance(link, dict))
        return ParsedCategoryIds(ids, CategoryIdEncoding.CATEGORY_LINKS)
    return parsed


def extract_url_key(product: dict[str, Any]) -> str:
    value = get_custom_attribute(product, URL_KEY_ATTRIBUTE)
    return str(value) if value else ""


def extract_identifiers(
    products: Iterable[dict[str, Any]], attribute_code: str = DEFAULT_CATEGORY_ATTRIBUTE
) -> ProductIdentifiers:
    """Collect the SKUs and category ids needed to enrich `products`."""
    skus: dict[str, None] = {}
    category_ids: dict[str, None] = {}
    for product in products:
        sku = product.get("sku")
        if sku:
            skus[str(sku)] = None
        for category_id in normalize_category_ids(product, attribute_code).ids:
            category_ids[category_id] = None

    identifiers = ProductIdentifiers(skus=list(skus), category_ids=list(category_ids))
    logger.debug(
        f"Extracted {len(identifiers.skus)} SKUs and {len(identifiers.category_ids)} category ids"
    )
    return identifiers
