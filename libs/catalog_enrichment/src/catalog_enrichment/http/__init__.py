"""HTTP transport with per-attempt timeouts and constant-delay retries."""

from .client import RequestSpec, RetryingHttpClient

__all__ = ["RequestSpec", "RetryingHttpClient"]
