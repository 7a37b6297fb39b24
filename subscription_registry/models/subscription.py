"""Subscription record and creation payload models."""

from typing import Optional

from pydantic import BaseModel, Field

from subscription_registry.models.identity import Identity

# Time units added to expiry_date at creation and on every renewal
DEFAULT_EXPIRY_WINDOW = 2_592_000


class SubscriptionPayload(BaseModel):
    """Caller-supplied fields for a new subscription.

    Only presence is checked: zero and negative values are accepted as-is.
    """

    price: float = Field(..., description="Bookkeeping price, no funds are moved")
    days: float = Field(..., description="Subscription length in days as requested by the caller")

    class Config:
        json_schema_extra = {"example": {"price": 100, "days": 30}}


class Subscription(BaseModel):
    """Stored subscription record.

    Records are immutable; operations that change a subscription store a
    replacement under the same id.
    """

    id: str = Field(..., description="Unique subscription id (store key)")
    subscriber: Identity = Field(..., description="Identity that created the subscription")
    price: float = Field(..., description="Accumulated bookkeeping price")
    days: float = Field(..., description="Days requested at creation, never modified")

    # Timestamps
    expiry_date: int = Field(..., description="Expiry time (host time units)")
    created_at: int = Field(..., description="Creation time (host time units)")
    updated_at: Optional[int] = Field(None, description="Last update time, never written")

    def is_owned_by(self, identity: Identity) -> bool:
        """Check whether identity is this record's subscriber."""
        return self.subscriber == identity

    def renewed(self, amount: float, expiry_window: int) -> "Subscription":
        """Return a copy with price increased by amount and expiry pushed out by one window.

        updated_at is not touched.
        """
        return self.model_copy(
            update={
                "price": self.price + amount,
                "expiry_date": self.expiry_date + expiry_window,
            }
        )

    def withdrawn(self) -> "Subscription":
        """Return a copy with the price zeroed."""
        return self.model_copy(update={"price": 0})

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
                "subscriber": {"text": "rrkah-fqaaa-aaaaa-aaaaq-cai"},
                "price": 100,
                "days": 30,
                "expiry_date": 2593000,
                "created_at": 1000,
                "updated_at": None,
            }
        }
