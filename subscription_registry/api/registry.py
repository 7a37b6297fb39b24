"""Subscription registry endpoints.

Implements:
- POST   /init - Capture the registry owner
- POST   /subscriptions - Create subscription
- GET    /subscriptions - List all subscriptions
- GET    /subscriptions/{subscriptionId} - Get subscription (subscriber only)
- DELETE /subscriptions/{subscriptionId} - Cancel subscription (subscriber only)
- POST   /subscriptions/{subscriptionId}/renew - Renew subscription (subscriber only)
- POST   /subscriptions/{subscriptionId}/withdraw - Withdraw funds (owner only)
- GET    /subscribers/{subscriber}/subscriptions - List a subscriber's subscriptions

The caller identity is read from the configured header (X-Caller-Identity by
default) and bound for the duration of each operation.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request

from subscription_registry.config import get_config
from subscription_registry.logging_config import get_logger
from subscription_registry.models import (
    ErrorKind,
    Identity,
    InitializeResponse,
    RenewSubscriptionRequest,
    Result,
    Subscription,
    SubscriptionPayload,
    SubscriptionResponse,
)
from subscription_registry.services.caller_context import caller_scope
from subscription_registry.services.subscription_registry import (
    SubscriptionRegistry,
    get_subscription_registry,
)

logger = get_logger(__name__)
router = APIRouter(tags=["Subscription Registry"])

_ERROR_STATUS = {
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.UNAUTHORIZED: (403, "PERMISSION_DENIED"),
}


async def resolve_caller(request: Request) -> Identity:
    """Read the caller identity from the request.

    Raises:
        401: Header missing and anonymous callers are not allowed
    """
    settings = get_config().host_settings
    raw_identity = request.headers.get(settings.caller_header)

    if raw_identity is None or not raw_identity.strip():
        if settings.allow_anonymous:
            return Identity(text=settings.anonymous_identity)
        logger.warning("caller_identity_missing", header=settings.caller_header)
        raise HTTPException(
            status_code=401,
            detail={
                "error": {
                    "code": 401,
                    "message": f"Missing caller identity header '{settings.caller_header}'.",
                    "status": "UNAUTHENTICATED",
                }
            },
        )

    return Identity.of(raw_identity)


def _convert_subscription(record: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=record.id,
        subscriber=str(record.subscriber),
        price=record.price,
        days=record.days,
        expiryDate=record.expiry_date,
        createdAt=record.created_at,
        updatedAt=record.updated_at,
    )


def _unwrap(result: Result, operation: str):
    """Return the result value or raise the matching HTTP error."""
    if result.is_ok:
        return result.value

    status_code, status = _ERROR_STATUS[result.kind]
    logger.info(
        f"{operation}_rejected",
        error_kind=result.kind.value,
        message=result.error.message,
    )
    raise HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": status_code,
                "message": result.error.message,
                "status": status,
            }
        },
    )


@router.post("/init", response_model=InitializeResponse, summary="Initialize registry owner")
async def initialize(
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> InitializeResponse:
    """Record the caller as registry owner.

    Only the first call has an effect; every call succeeds.
    """
    with caller_scope(caller):
        status = _unwrap(registry.initialize(), "initialize")
    return InitializeResponse(status=status)


@router.post(
    "/subscriptions",
    response_model=SubscriptionResponse,
    status_code=201,
    summary="Create subscription",
)
async def create_subscription(
    payload: SubscriptionPayload,
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SubscriptionResponse:
    """Create a subscription owned by the caller.

    Args:
        payload: price and days (presence checked only)

    Returns:
        Created subscription
    """
    logger.info("create_subscription_request", price=payload.price, days=payload.days)

    with caller_scope(caller):
        subscription = _unwrap(registry.create_subscription(payload), "create_subscription")

    return _convert_subscription(subscription)


@router.get(
    "/subscriptions",
    response_model=List[SubscriptionResponse],
    summary="List all subscriptions",
)
async def get_all_subscriptions(
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> List[SubscriptionResponse]:
    """List every subscription in insertion order. Unrestricted."""
    subscriptions = _unwrap(registry.get_all_subscriptions(), "get_all_subscriptions")
    return [_convert_subscription(s) for s in subscriptions]


@router.get(
    "/subscriptions/{subscriptionId}",
    response_model=SubscriptionResponse,
    summary="Get subscription",
)
async def get_subscription(
    subscriptionId: str = Path(...),
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SubscriptionResponse:
    """Get a subscription.

    Raises:
        404: Subscription not found
        403: Caller is not the subscriber
    """
    with caller_scope(caller):
        subscription = _unwrap(registry.get_subscription(subscriptionId), "get_subscription")
    return _convert_subscription(subscription)


@router.delete(
    "/subscriptions/{subscriptionId}",
    response_model=SubscriptionResponse,
    summary="Cancel subscription",
)
async def cancel_subscription(
    subscriptionId: str = Path(...),
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SubscriptionResponse:
    """Cancel (remove) a subscription.

    Returns:
        The removed subscription

    Raises:
        404: Subscription not found
        403: Caller is not the subscriber
    """
    with caller_scope(caller):
        removed = _unwrap(registry.cancel_subscription(subscriptionId), "cancel_subscription")

    logger.info("cancel_subscription_success", subscription_id=removed.id)
    return _convert_subscription(removed)


@router.post(
    "/subscriptions/{subscriptionId}/renew",
    response_model=SubscriptionResponse,
    summary="Renew subscription",
)
async def renew_subscription(
    request: RenewSubscriptionRequest,
    subscriptionId: str = Path(...),
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SubscriptionResponse:
    """Renew a subscription: add price and extend expiry by one window.

    Raises:
        404: Subscription not found
        403: Caller is not the subscriber
    """
    with caller_scope(caller):
        renewed = _unwrap(
            registry.renew_subscription(subscriptionId, request.price),
            "renew_subscription",
        )
    return _convert_subscription(renewed)


@router.post(
    "/subscriptions/{subscriptionId}/withdraw",
    response_model=SubscriptionResponse,
    summary="Withdraw funds",
)
async def withdraw_funds(
    subscriptionId: str = Path(...),
    caller: Identity = Depends(resolve_caller),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SubscriptionResponse:
    """Zero a subscription's price. Registry owner only; no funds move.

    Raises:
        404: Subscription not found
        403: Caller is not the registry owner
    """
    with caller_scope(caller):
        withdrawn = _unwrap(registry.withdraw_funds(subscriptionId), "withdraw_funds")
    return _convert_subscription(withdrawn)


@router.get(
    "/subscribers/{subscriber}/subscriptions",
    response_model=List[SubscriptionResponse],
    summary="List subscriptions by subscriber",
)
async def get_subscriptions_by_subscriber(
    subscriber: str = Path(...),
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> List[SubscriptionResponse]:
    """List a subscriber's subscriptions in insertion order.

    No identity check: any caller may list any subscriber. A blank principal
    owns nothing, so it lists empty.
    """
    if not subscriber.strip():
        logger.debug("blank_subscriber_listed")
        return []

    subscriptions = _unwrap(
        registry.get_subscriptions_by_subscriber(Identity.of(subscriber)),
        "get_subscriptions_by_subscriber",
    )
    return [_convert_subscription(s) for s in subscriptions]
