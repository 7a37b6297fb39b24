"""Configuration models for registry.yaml."""

from typing import Literal

from pydantic import BaseModel, Field

from subscription_registry.models.identity import ANONYMOUS_IDENTITY
from subscription_registry.models.subscription import DEFAULT_EXPIRY_WINDOW


class RegistrySettings(BaseModel):
    """Subscription registry behaviour."""

    expiry_window: int = Field(
        default=DEFAULT_EXPIRY_WINDOW,
        ge=0,
        description="Time units added to expiry at creation and on each renewal",
    )


class HostSettings(BaseModel):
    """Host collaborators: clock and caller identity."""

    clock: Literal["system", "virtual"] = Field(
        default="system",
        description="'system' reads the wall clock; 'virtual' uses a controllable clock",
    )
    caller_header: str = Field(
        default="X-Caller-Identity",
        description="HTTP header carrying the caller identity",
    )
    anonymous_identity: str = Field(
        default=ANONYMOUS_IDENTITY,
        description="Identity assigned to callers without the caller header",
    )
    allow_anonymous: bool = Field(
        default=True,
        description="Accept requests without the caller header",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "clock": "virtual",
                "caller_header": "X-Caller-Identity",
                "anonymous_identity": "2vxsx-fae",
                "allow_anonymous": True,
            }
        }


class RegistryConfig(BaseModel):
    """Complete registry.yaml configuration."""

    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    host: HostSettings = Field(default_factory=HostSettings)
