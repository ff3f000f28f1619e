"""Request authentication schemes: OAuth 1.0 signing and bearer tokens."""

from .base import Authenticator
from .bearer import BearerAuthenticator
from .oauth_signer import OAuthAuthenticator, RequestSigner, percent_encode

__all__ = [
    "Authenticator",
    "BearerAuthenticator",
    "OAuthAuthenticator",
    "RequestSigner",
    "percent_encode",
]
