"""
Data models shared by the catalog enrichment components.

Products and categories travel as the raw dictionaries the catalog service
returns; only the values this client owns or derives are modelled here.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, SecretStr


class CredentialBundle(BaseModel):
    """OAuth 1.0 integration credentials used to sign catalog requests.

    Owned by the caller; the client never persists them.
    """

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: SecretStr
    access_token: str
    access_token_secret: SecretStr

    def missing_fields(self) -> list[str]:
        """Return the names of credential fields that are empty."""
        values = {
            "consumer_key": self.consumer_key,
            "consumer_secret": self.consumer_secret.get_secret_value(),
            "access_token": self.access_token,
            "access_token_secret": self.access_token_secret.get_secret_value(),
        }
        return [name for name, value in values.items() if not value]


class InventoryRecord(BaseModel):
    """Stock level resolved for a single SKU."""

    model_config = ConfigDict(frozen=True)

    sku: str
    qty: float = 0.0
    is_in_stock: bool = False

    @classmethod
    def default(cls, sku: str) -> "InventoryRecord":
        """Record used when no stock data was resolved for `sku`."""
        return cls(sku=sku, qty=0.0, is_in_stock=False)

    def payload(self) -> dict[str, Any]:
        """Inventory fields attached to an enriched product."""
        return {"qty": self.qty, "is_in_stock": self.is_in_stock}
