"""Exceptions for the catalog enrichment client."""

from typing import Any


class CatalogEnrichmentError(Exception):
    """Base exception for catalog enrichment errors."""


class SigningError(CatalogEnrichmentError):
    """Raised when a request cannot be authenticated (missing or empty credentials)."""


class TransportError(CatalogEnrichmentError):
    """Base class for single-attempt failures that the HTTP client retries."""


class NetworkError(TransportError):
    """Raised when a request fails to connect or exceeds its timeout."""


class HttpStatusError(TransportError):
    """Raised when the remote service answers with a non-2xx status."""

    def __init__(self, status: int, url: str, body: str = ""):
        self.status = status
        self.url = url
        self.body = body
        message = f"HTTP {status} for {url}"
        if body:
            message += f": {body[:200]}"
        super().__init__(message)


class ApplicationErrorEnvelope(TransportError):
    """Raised when a 2xx response carries a non-empty ``errors`` array."""

    def __init__(self, url: str, errors: list[Any]):
        self.url = url
        self.errors = errors
        messages = [
            str(error.get("message", error)) if isinstance(error, dict) else str(error)
            for error in errors
        ]
        super().__init__(f"Application errors for {url}: {', '.join(messages)}")


class MalformedResponseError(TransportError):
    """Raised when a 2xx response body cannot be decoded as JSON."""


class ExhaustedRetriesError(CatalogEnrichmentError):
    """Raised when every attempt of a request failed."""

    def __init__(self, url: str, attempts: int, last_error: Exception):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Request to {url} failed after {attempts} attempts: {last_error}"
        )


class PipelineError(CatalogEnrichmentError):
    """Raised when an unrecoverable pipeline step fails."""

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"Enrichment pipeline failed at step '{step}': {cause}")
