"""Authenticator interface used by the HTTP client."""

from abc import ABC, abstractmethod


class Authenticator(ABC):
    """Produces authentication headers for a single request attempt."""

    @abstractmethod
    def headers(self, method: str, url: str) -> dict[str, str]:
        """Return headers to merge into the request; may raise SigningError."""
        pass
