import pytest

from catalog_enrichment.auth.bearer import BearerAuthenticator
from catalog_enrichment.exceptions import SigningError


def test_bearer_header():
    authenticator = BearerAuthenticator("tok-123")
    assert authenticator.headers("GET", "https://x.test") == {"Authorization": "Bearer tok-123"}


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_token_raises_signing_error(token):
    with pytest.raises(SigningError):
        BearerAuthenticator(token)
