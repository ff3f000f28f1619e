"""Shared test fixtures for catalog enrichment unit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from catalog_enrichment.config import EnrichmentConfig, RetryPolicy
from catalog_enrichment.models import CredentialBundle
from catalog_enrichment.pipeline.performance import PerformanceTracker


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def credentials() -> CredentialBundle:
    return CredentialBundle(
        consumer_key="ck_test",
        consumer_secret=SecretStr("cs_secret"),
        access_token="at_token",
        access_token_secret=SecretStr("ats_secret"),
    )


@pytest.fixture
def config() -> EnrichmentConfig:
    return EnrichmentConfig(
        base_url="https://shop.example.com",
        product_fields=None,
        retry_delay=0.0,
    )


@pytest.fixture
def policy() -> RetryPolicy:
    return RetryPolicy(max_retries=3, retry_delay=0.0, timeout=5.0)


@pytest.fixture
def tracker() -> PerformanceTracker:
    return PerformanceTracker()


@pytest.fixture
def mock_client() -> MagicMock:
    """Stand-in for RetryingHttpClient; configure ``execute.side_effect`` per test."""
    client = MagicMock()
    client.execute = AsyncMock()
    return client
