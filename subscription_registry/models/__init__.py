"""Pydantic models for API requests, responses, and domain objects."""

# Domain models
from .identity import ANONYMOUS_IDENTITY, Identity
from .subscription import DEFAULT_EXPIRY_WINDOW, Subscription, SubscriptionPayload

# Operation results
from .result import (
    Err,
    ErrorKind,
    Ok,
    RegistryError,
    RegistryOperationError,
    Result,
)

# Configuration models
from .settings import HostSettings, RegistryConfig, RegistrySettings

# API response models
from .api_response import InitializeResponse, SubscriptionResponse

# API request models
from .api_request import (
    AdvanceTimeRequest,
    AdvanceTimeResponse,
    RenewSubscriptionRequest,
    ResetResponse,
    ResetTimeResponse,
    SetTimeRequest,
    SetTimeResponse,
    StatusResponse,
)

__all__ = [
    # Domain
    "ANONYMOUS_IDENTITY",
    "Identity",
    "DEFAULT_EXPIRY_WINDOW",
    "Subscription",
    "SubscriptionPayload",
    # Results
    "Err",
    "ErrorKind",
    "Ok",
    "RegistryError",
    "RegistryOperationError",
    "Result",
    # Configuration
    "HostSettings",
    "RegistryConfig",
    "RegistrySettings",
    # API responses
    "InitializeResponse",
    "SubscriptionResponse",
    # API requests
    "AdvanceTimeRequest",
    "AdvanceTimeResponse",
    "RenewSubscriptionRequest",
    "ResetResponse",
    "ResetTimeResponse",
    "SetTimeRequest",
    "SetTimeResponse",
    "StatusResponse",
]
