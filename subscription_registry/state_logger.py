"""Simple state change logging for subscriptions and the registry owner.

Tracks changes with before/after values for debugging and auditing.
"""

from typing import Any, Optional

from subscription_registry.logging_config import get_logger

logger = get_logger(__name__)


def _short_id(subscription_id: str) -> str:
    return subscription_id[:8] + "..." if len(subscription_id) > 8 else subscription_id


def log_owner_initialized(owner: str, **extra_context: Any) -> None:
    """Log capture of the registry owner.

    Args:
        owner: Identity recorded as owner
        **extra_context: Additional context
    """
    logger.info(
        "registry_owner_initialized",
        owner=owner,
        **extra_context,
    )


def log_price_change(
    subscription_id: str,
    old_price: float,
    new_price: float,
    reason: Optional[str] = None,
    **extra_context: Any,
) -> None:
    """Log subscription price change.

    Args:
        subscription_id: Subscription id
        old_price: Previous price
        new_price: New price
        reason: Reason for change (renewal, withdrawal)
        **extra_context: Additional context (subscriber, caller, etc.)
    """
    logger.info(
        "subscription_price_changed",
        subscription_id=_short_id(subscription_id),
        old_price=old_price,
        new_price=new_price,
        reason=reason,
        **extra_context,
    )


def log_expiry_change(
    subscription_id: str,
    old_expiry: int,
    new_expiry: int,
    reason: Optional[str] = None,
    **extra_context: Any,
) -> None:
    """Log subscription expiry change.

    Args:
        subscription_id: Subscription id
        old_expiry: Previous expiry time
        new_expiry: New expiry time
        reason: Reason for change
        **extra_context: Additional context
    """
    logger.info(
        "subscription_expiry_changed",
        subscription_id=_short_id(subscription_id),
        old_expiry=old_expiry,
        new_expiry=new_expiry,
        extended_by=new_expiry - old_expiry,
        reason=reason,
        **extra_context,
    )


def log_subscription_removed(
    subscription_id: str,
    subscriber: str,
    reason: Optional[str] = None,
    **extra_context: Any,
) -> None:
    """Log removal of a subscription from the store."""
    logger.info(
        "subscription_removed",
        subscription_id=_short_id(subscription_id),
        subscriber=subscriber,
        reason=reason,
        **extra_context,
    )
