"""API request and response models for registry and host-control endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class RenewSubscriptionRequest(BaseModel):
    """Request to renew a subscription."""

    price: float = Field(..., description="Amount added to the subscription price")

    class Config:
        json_schema_extra = {"example": {"price": 50}}


class AdvanceTimeRequest(BaseModel):
    """Request to advance the virtual clock."""

    days: int = Field(default=0, description="Days to advance")
    hours: int = Field(default=0, description="Hours to advance")
    minutes: int = Field(default=0, description="Minutes to advance")
    seconds: int = Field(default=0, description="Seconds to advance")

    class Config:
        json_schema_extra = {"example": {"days": 30, "hours": 0, "minutes": 0, "seconds": 0}}


class AdvanceTimeResponse(BaseModel):
    """Response after advancing time."""

    old_time: int = Field(..., description="Virtual time before advancing")
    new_time: int = Field(..., description="Virtual time after advancing")
    time_advanced: int = Field(..., description="Time units advanced")
    message: str = Field(..., description="Success message")


class SetTimeRequest(BaseModel):
    """Request to set the virtual clock to a timestamp."""

    timestamp: int = Field(..., description="Target time (host time units)")

    class Config:
        json_schema_extra = {"example": {"timestamp": 1000}}


class SetTimeResponse(BaseModel):
    """Response after setting time."""

    old_time: int = Field(..., description="Virtual time before the change")
    new_time: int = Field(..., description="Virtual time after the change")
    message: str = Field(..., description="Success message")


class ResetTimeResponse(BaseModel):
    """Response after resetting the virtual clock to real time."""

    previous_time: int = Field(..., description="Previous virtual time")
    current_time: int = Field(..., description="Current real time")
    offset_cleared: bool = Field(..., description="Whether time offset was cleared")
    message: str = Field(..., description="Success message")


class ResetResponse(BaseModel):
    """Response after resetting host state."""

    subscriptions_deleted: int = Field(..., description="Number of subscriptions deleted")
    owner_cleared: bool = Field(..., description="Whether a registry owner was cleared")
    time_reset: bool = Field(..., description="Whether virtual time was reset")
    message: str = Field(..., description="Success message")

    class Config:
        json_schema_extra = {
            "example": {
                "subscriptions_deleted": 3,
                "owner_cleared": True,
                "time_reset": True,
                "message": "Registry state reset successfully",
            }
        }


class StatusResponse(BaseModel):
    """Host status response."""

    status: str = Field(..., description="Service status")
    clock: str = Field(..., description="Clock mode ('system' or 'virtual')")
    current_time: int = Field(..., description="Current host time")
    time_offset: int = Field(..., description="Virtual clock offset from real time (0 on system clock)")
    owner: Optional[str] = Field(None, description="Registry owner, if initialized")
    statistics: dict = Field(..., description="Statistics about stored data")

