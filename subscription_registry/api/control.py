"""Host control API for test orchestration.

Implements:
- POST /host/time/advance - Fast-forward the virtual clock
- POST /host/time/set - Set the virtual clock
- POST /host/time/reset - Reset the virtual clock to real time
- POST /host/reset - Reset all registry state
- GET  /host/status - Clock and registry status

Time endpoints need the virtual clock (host.clock: virtual).
"""

from fastapi import APIRouter, Depends, HTTPException

from subscription_registry.logging_config import get_logger
from subscription_registry.models import (
    AdvanceTimeRequest,
    AdvanceTimeResponse,
    ResetResponse,
    ResetTimeResponse,
    SetTimeRequest,
    SetTimeResponse,
    StatusResponse,
)
from subscription_registry.services.subscription_registry import (
    SubscriptionRegistry,
    get_subscription_registry,
)
from subscription_registry.services.time_controller import TimeController

logger = get_logger(__name__)
router = APIRouter(tags=["Host Control API"], prefix="/host")


def _require_virtual_clock(registry: SubscriptionRegistry) -> TimeController:
    if not isinstance(registry.clock, TimeController):
        logger.warning("virtual_clock_required", clock=repr(registry.clock))
        raise HTTPException(
            status_code=409,
            detail={
                "error": "Virtual clock disabled",
                "message": "Set host.clock to 'virtual' to control time",
            },
        )
    return registry.clock


@router.post(
    "/time/advance",
    response_model=AdvanceTimeResponse,
    summary="Advance virtual time",
)
async def advance_time(
    request: AdvanceTimeRequest,
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> AdvanceTimeResponse:
    """Fast-forward the virtual clock.

    Raises:
        400: Negative values
        409: Virtual clock disabled
    """
    time_controller = _require_virtual_clock(registry)

    logger.info(
        "advance_time_request",
        days=request.days,
        hours=request.hours,
        minutes=request.minutes,
        seconds=request.seconds,
    )

    try:
        result = time_controller.advance_time(
            days=request.days,
            hours=request.hours,
            minutes=request.minutes,
            seconds=request.seconds,
        )
    except ValueError as e:
        logger.warning("invalid_advance_time_request", error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Invalid request",
                "message": str(e),
            },
        )

    return AdvanceTimeResponse(
        old_time=result["old_time"],
        new_time=result["new_time"],
        time_advanced=result["time_advanced"],
        message="Time advanced successfully",
    )


@router.post(
    "/time/set",
    response_model=SetTimeResponse,
    summary="Set virtual time",
)
async def set_time(
    request: SetTimeRequest,
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> SetTimeResponse:
    """Set the virtual clock to a timestamp.

    Raises:
        400: Timestamp before current virtual time
        409: Virtual clock disabled
    """
    time_controller = _require_virtual_clock(registry)

    try:
        result = time_controller.set_time(request.timestamp)
    except ValueError as e:
        logger.warning("invalid_set_time_request", error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Invalid request",
                "message": str(e),
            },
        )

    return SetTimeResponse(
        old_time=result["old_time"],
        new_time=result["new_time"],
        message="Time set successfully",
    )


@router.post(
    "/time/reset",
    response_model=ResetTimeResponse,
    summary="Reset virtual time",
)
async def reset_time(
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> ResetTimeResponse:
    """Reset the virtual clock to the wall clock."""
    time_controller = _require_virtual_clock(registry)

    result = time_controller.reset_time()
    return ResetTimeResponse(
        previous_time=result["old_time"],
        current_time=result["new_time"],
        offset_cleared=True,
        message="Time reset to real current time",
    )


@router.post(
    "/reset",
    response_model=ResetResponse,
    summary="Reset registry state",
)
async def reset_registry(
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> ResetResponse:
    """Reset all registry state.

    This clears:
    - All subscriptions
    - The registry owner
    - Virtual time (when the virtual clock is used)

    Useful for starting fresh between test runs.
    """
    logger.info("reset_registry_request")

    result = registry.reset()

    time_reset = False
    if isinstance(registry.clock, TimeController):
        registry.clock.reset_time()
        time_reset = True

    return ResetResponse(
        subscriptions_deleted=result["subscriptions_deleted"],
        owner_cleared=result["owner_cleared"],
        time_reset=time_reset,
        message="Registry state reset successfully",
    )


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Get host status",
)
async def get_status(
    registry: SubscriptionRegistry = Depends(get_subscription_registry),
) -> StatusResponse:
    """Get clock and registry status."""
    logger.debug("get_status_request")

    is_virtual = isinstance(registry.clock, TimeController)
    owner = registry.ownership.owner

    return StatusResponse(
        status="running",
        clock="virtual" if is_virtual else "system",
        current_time=registry.clock.get_current_time(),
        time_offset=registry.clock.time_offset if is_virtual else 0,
        owner=str(owner) if owner is not None else None,
        statistics=registry.get_statistics(),
    )
