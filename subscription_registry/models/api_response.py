"""Wire format for subscription records returned by the registry API."""

from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionResponse(BaseModel):
    """Subscription as returned by every registry endpoint."""

    id: str = Field(..., description="Subscription id")
    subscriber: str = Field(..., description="Subscriber identity (canonical text)")
    price: float = Field(..., description="Accumulated bookkeeping price")
    days: float = Field(..., description="Days requested at creation")
    expiryDate: int = Field(..., description="Expiry time (host time units)")
    createdAt: int = Field(..., description="Creation time (host time units)")
    updatedAt: Optional[int] = Field(None, description="Last update time")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
                "subscriber": "rrkah-fqaaa-aaaaa-aaaaq-cai",
                "price": 100,
                "days": 30,
                "expiryDate": 2593000,
                "createdAt": 1000,
                "updatedAt": None,
            }
        }


class InitializeResponse(BaseModel):
    """Response of the initialize operation."""

    status: str = Field(..., description="Always 'initialized'")

    class Config:
        json_schema_extra = {"example": {"status": "initialized"}}
