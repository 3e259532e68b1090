from pydantic import BaseModel, Field
from typing import Dict, Optional


class PurchaseMetadata(BaseModel):
    """What was bought, carried through the provider as checkout metadata."""
    product_id: str = Field(alias="productId", min_length=1)
    store_id: str = Field(alias="storeId", min_length=1)
    product_type: Optional[str] = Field(default=None, alias="productType")
    extra: Dict[str, str] = Field(default_factory=dict)

    class Config:
        populate_by_name = True

    @classmethod
    def from_metadata(cls, metadata: Optional[Dict[str, str]]) -> Optional["PurchaseMetadata"]:
        """Parse provider metadata; None when productId or storeId is missing."""
        metadata = metadata or {}
        product_id = metadata.get("productId")
        store_id = metadata.get("storeId")
        if not product_id or not store_id:
            return None
        extra = {
            k: str(v) for k, v in metadata.items()
            if k not in ("productId", "storeId", "productType")
        }
        return cls(
            product_id=str(product_id),
            store_id=str(store_id),
            product_type=metadata.get("productType") or None,
            extra=extra,
        )

    def to_metadata(self) -> Dict[str, str]:
        """Flatten back into the string map the provider stores."""
        metadata = dict(self.extra)
        metadata["productId"] = self.product_id
        metadata["storeId"] = self.store_id
        if self.product_type:
            metadata["productType"] = self.product_type
        return metadata


class CheckoutRequest(BaseModel):
    # Optional here so a missing priceId is reported as 400, not a 422 validation error
    price_id: Optional[str] = Field(default=None, alias="priceId")
    success_url: Optional[str] = Field(default=None, alias="successUrl")
    cancel_url: Optional[str] = Field(default=None, alias="cancelUrl")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    metadata: Optional[Dict[str, str]] = None
    mode: str = "payment"  # "payment" or "subscription"

    class Config:
        populate_by_name = True


class CheckoutResponse(BaseModel):
    sessionId: str


class CheckoutConfigResponse(BaseModel):
    publishableKey: Optional[str] = None
