import pytest
from pydantic import ValidationError

from catalog_enrichment.config import EnrichmentConfig, RetryPolicy


def test_defaults():
    config = EnrichmentConfig()

    assert config.page_size == 20
    assert config.max_pages == 25
    assert config.category_batch_size == 10
    assert config.inventory_batch_size == 20
    assert config.category_cache_ttl == 300.0
    assert config.max_retries == 3
    assert config.retry_delay == 1.0
    assert config.request_timeout == 30.0
    assert config.parallel_inventory_batches is False
    assert config.category_attribute_code == "category_ids"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CATALOG_ENRICHMENT_BASE_URL", "https://store.test/")
    monkeypatch.setenv("CATALOG_ENRICHMENT_PAGE_SIZE", "50")
    monkeypatch.setenv("CATALOG_ENRICHMENT_PARALLEL_INVENTORY_BATCHES", "true")

    config = EnrichmentConfig()

    assert config.base_url == "https://store.test"
    assert config.page_size == 50
    assert config.parallel_inventory_batches is True


@pytest.mark.parametrize(
    "field, value",
    [
        ("page_size", 0),
        ("page_size", 501),
        ("max_pages", 0),
        ("category_batch_size", 0),
        ("inventory_batch_size", 101),
        ("category_cache_ttl", -1),
        ("max_retries", -1),
        ("retry_delay", -0.5),
        ("request_timeout", 0),
        ("request_timeout", 301),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        EnrichmentConfig(**{field: value})


def test_retry_policy_from_config():
    policy = EnrichmentConfig(max_retries=2, retry_delay=0.25, request_timeout=10).retry_policy()

    assert policy == RetryPolicy(max_retries=2, retry_delay=0.25, timeout=10.0)
    assert policy.total_attempts == 3


def test_retry_policy_validation():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)
    with pytest.raises(ValueError):
        RetryPolicy(timeout=0)


def test_log_configuration(caplog):
    with caplog.at_level("INFO", logger="catalog_enrichment.config"):
        EnrichmentConfig(base_url="https://store.test").log_configuration()

    assert "Base URL: https://store.test" in caplog.text
