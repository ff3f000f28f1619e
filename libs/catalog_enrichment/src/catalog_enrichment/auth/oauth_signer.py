"""
OAuth 1.0 one-legged request signing (HMAC-SHA256).

Canonicalization and the HMAC itself come from oauthlib's RFC 5849
primitives; this module assembles the oauth parameter set, merges the URL
query parameters and renders a sorted Authorization header.
"""

import logging
import secrets
import time
from types import SimpleNamespace
from urllib.parse import parse_qsl, urlsplit

from oauthlib.oauth1.rfc5849 import signature, utils

from ..exceptions import SigningError
from ..models import CredentialBundle
from .base import Authenticator

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = "HMAC-SHA256"
OAUTH_VERSION = "1.0"


def percent_encode(value: object) -> str:
    """
    Percent-encode a value per RFC 3986.

    Everything except unreserved characters (letters, digits, ``-._~``) is
    escaped with uppercase hex, including ``! ' ( ) *``. ``None`` encodes to
    an empty string.
    """
    if value is None:
        return ""
    return utils.escape(str(value))


def generate_nonce() -> str:
    """Random 32-character hex nonce."""
    return secrets.token_hex(16)


class RequestSigner:
    """Computes OAuth 1.0 Authorization headers for catalog requests."""

    def sign(
        self,
        method: str,
        url: str,
        credentials: CredentialBundle,
        timestamp: str | int | None = None,
        nonce: str | None = None,
    ) -> str:
        """
        Build the Authorization header value for one request.

        Parameters:
            method: HTTP method; uppercased in the signature base string.
            url: Absolute request URL; its query parameters are signed too.
            credentials: Consumer and access token key/secret pairs.
            timestamp: Unix seconds; defaults to the current time.
            nonce: Unique request nonce; defaults to a random hex string.

        Returns:
            ``OAuth key="value", ...`` with every oauth_* parameter sorted by key.

        Raises:
            SigningError: If the method, URL or any credential is empty.
        """
        if not method:
            raise SigningError("HTTP method is required for signing")
        if not url:
            raise SigningError("URL is required for signing")
        self.validate(credentials)

        if timestamp is None:
            timestamp = int(time.time())
        if nonce is None:
            nonce = generate_nonce()
        if not str(timestamp) or not nonce:
            raise SigningError("Timestamp and nonce must be non-empty")

        oauth_params = {
            "oauth_consumer_key": credentials.consumer_key,
            "oauth_token": credentials.access_token,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(timestamp),
            "oauth_nonce": nonce,
            "oauth_version": OAUTH_VERSION,
        }

        query = urlsplit(url).query
        query_params = parse_qsl(query, keep_blank_values=True)

        try:
            base_string = self.signature_base_string(method, url, oauth_params, query_params)
        except ValueError as e:
            raise SigningError(f"Cannot sign malformed URL {url}: {e}") from e

        logger.debug(f"Signature base string: {base_string}")

        secrets_holder = SimpleNamespace(
            client_secret=credentials.consumer_secret.get_secret_value(),
            resource_owner_secret=credentials.access_token_secret.get_secret_value(),
        )
        oauth_params["oauth_signature"] = signature.sign_hmac_sha256_with_client(
            base_string, secrets_holder
        )

        header_params = ", ".join(
            f'{key}="{percent_encode(oauth_params[key])}"' for key in sorted(oauth_params)
        )
        return f"OAuth {header_params}"

    @staticmethod
    def signature_base_string(
        method: str,
        url: str,
        oauth_params: dict[str, str],
        query_params: list[tuple[str, str]],
    ) -> str:
        """
        ``METHOD & encode(scheme://host/path) & encode(sorted parameter string)``.
        """
        params = list(oauth_params.items()) + list(query_params)
        normalized = signature.normalize_parameters(params)
        base_uri = signature.base_string_uri(url)
        return signature.signature_base_string(method, base_uri, normalized)

    @staticmethod
    def validate(credentials: CredentialBundle | None) -> None:
        """Raise SigningError unless every credential field is non-empty."""
        if credentials is None:
            raise SigningError("OAuth credentials are required")
        missing = credentials.missing_fields()
        if missing:
            raise SigningError(f"OAuth credentials missing: {', '.join(missing)}")


class OAuthAuthenticator(Authenticator):
    """Signs each request attempt with a fresh timestamp and nonce."""

    def __init__(self, credentials: CredentialBundle, signer: RequestSigner | None = None):
        self.signer = signer or RequestSigner()
        self.signer.validate(credentials)
        self.credentials = credentials

    def headers(self, method: str, url: str) -> dict[str, str]:
        return {"Authorization": self.signer.sign(method, url, self.credentials)}
