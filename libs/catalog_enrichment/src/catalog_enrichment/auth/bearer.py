"""Bearer-token authentication for the inventory endpoint."""

from ..exceptions import SigningError
from .base import Authenticator


class BearerAuthenticator(Authenticator):
    """Adds a static ``Authorization: Bearer`` header to every attempt.

    The token is supplied by the caller and never refreshed here.
    """

    def __init__(self, token: str | None):
        if not token or not token.strip():
            raise SigningError("Bearer token is required for inventory requests")
        self._token = token.strip()

    def headers(self, method: str, url: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}
