"""Subscription registry operations.

Responsibilities:
- Create, read, cancel, renew subscriptions on behalf of their subscriber
- List subscriptions (all, or by subscriber)
- Capture the registry owner and let it withdraw funds

Every operation returns an explicit ``Ok``/``Err`` result. NotFound and
Unauthorized never surface as exceptions; failures of the host collaborators
(caller identity, clock) propagate unchanged.
"""

from typing import Callable, List, Optional

from subscription_registry.config import get_config
from subscription_registry.logging_config import get_logger
from subscription_registry.models import (
    Err,
    Identity,
    Ok,
    RegistryError,
    Result,
    Subscription,
    SubscriptionPayload,
)
from subscription_registry.repositories.subscription_store import (
    SubscriptionNotFoundError,
    SubscriptionStore,
    get_subscription_store,
)
from subscription_registry.services.caller_context import current_caller
from subscription_registry.services.ownership import RegistryOwnership, get_registry_ownership
from subscription_registry.services.time_controller import Clock, get_clock
from subscription_registry.state_logger import (
    log_expiry_change,
    log_price_change,
    log_subscription_removed,
)
from subscription_registry.utils.id_generator import generate_subscription_id

logger = get_logger(__name__)

INITIALIZED = "initialized"
NOT_AUTHORIZED_SUBSCRIBER = "Not authorized subscriber"
NOT_OWNER = "Not owner"


def _not_found(subscription_id: str) -> Err:
    return Err(RegistryError.not_found(f"Subscription id={subscription_id} not found"))


class SubscriptionRegistry:
    """Subscription registry over an in-memory store.

    Args:
        subscription_store: record storage (defaults to global instance)
        ownership: registry owner state (defaults to global instance)
        clock: host time source (defaults to the configured clock)
        caller_provider: returns the identity of the current caller
        id_generator: returns a fresh subscription id
        expiry_window: time added to expiry on creation and renewal
            (defaults to configuration)
    """

    def __init__(
            self,
            subscription_store: Optional[SubscriptionStore] = None,
            ownership: Optional[RegistryOwnership] = None,
            clock: Optional[Clock] = None,
            caller_provider: Callable[[], Identity] = current_caller,
            id_generator: Callable[[], str] = generate_subscription_id,
            expiry_window: Optional[int] = None,
    ):
        self.store = subscription_store if subscription_store is not None else get_subscription_store()
        self.ownership = ownership if ownership is not None else get_registry_ownership()
        self.clock = clock if clock is not None else get_clock()
        self._caller_provider = caller_provider
        self._id_generator = id_generator
        self.expiry_window = (
            expiry_window if expiry_window is not None else get_config().expiry_window
        )
        if self.expiry_window < 0:
            raise ValueError(f"expiry_window must not be negative, got {self.expiry_window}")

        logger.info(
            "subscription_registry_initialized",
            expiry_window=self.expiry_window,
            clock=repr(self.clock),
        )

    def _lookup(self, subscription_id: str) -> Optional[Subscription]:
        try:
            return self.store.get_by_id(subscription_id)
        except SubscriptionNotFoundError:
            return None

    def initialize(self) -> Result[str]:
        """Record the caller as registry owner on first call.

        Later calls change nothing and still succeed.
        """
        caller = self._caller_provider()
        self.ownership.initialize(caller)
        return Ok(INITIALIZED)

    def create_subscription(self, payload: SubscriptionPayload) -> Result[Subscription]:
        """Create a subscription owned by the caller.

        expiry_date is created_at plus the fixed expiry window, independent of
        payload.days.
        """
        caller = self._caller_provider()
        created_at = self.clock.get_current_time()

        subscription = Subscription(
            id=self._id_generator(),
            subscriber=caller,
            price=payload.price,
            days=payload.days,
            created_at=created_at,
            expiry_date=created_at + self.expiry_window,
            updated_at=None,
        )
        self.store.add(subscription)

        logger.info(
            "subscription_created",
            subscription_id=subscription.id,
            subscriber=str(caller),
            price=subscription.price,
            days=subscription.days,
            expiry_date=subscription.expiry_date,
        )
        return Ok(subscription)

    def get_subscription(self, subscription_id: str) -> Result[Subscription]:
        """Get a subscription. Only its subscriber may read it."""
        subscription = self._lookup(subscription_id)
        if subscription is None:
            logger.debug("subscription_not_found", subscription_id=subscription_id)
            return _not_found(subscription_id)

        caller = self._caller_provider()
        if not subscription.is_owned_by(caller):
            logger.warning(
                "subscription_access_denied",
                subscription_id=subscription_id,
                caller=str(caller),
                operation="get",
            )
            return Err(RegistryError.unauthorized(NOT_AUTHORIZED_SUBSCRIBER))

        return Ok(subscription)

    def get_subscriptions_by_subscriber(self, subscriber: Identity) -> Result[List[Subscription]]:
        """List a subscriber's subscriptions. Any caller may ask."""
        return Ok(self.store.get_by_subscriber(subscriber))

    def get_all_subscriptions(self) -> Result[List[Subscription]]:
        """List every subscription in insertion order."""
        return Ok(self.store.get_all())

    def cancel_subscription(self, subscription_id: str) -> Result[Subscription]:
        """Remove a subscription. Only its subscriber may cancel it.

        Returns:
            The removed record
        """
        subscription = self._lookup(subscription_id)
        if subscription is None:
            return Err(
                RegistryError.not_found(f"Subscription cancellation id={subscription_id} failed")
            )

        caller = self._caller_provider()
        if not subscription.is_owned_by(caller):
            logger.warning(
                "subscription_access_denied",
                subscription_id=subscription_id,
                caller=str(caller),
                operation="cancel",
            )
            return Err(RegistryError.unauthorized(NOT_AUTHORIZED_SUBSCRIBER))

        removed = self.store.delete(subscription_id)
        log_subscription_removed(
            subscription_id=subscription_id,
            subscriber=str(removed.subscriber),
            reason="Canceled by subscriber",
        )
        return Ok(removed)

    def renew_subscription(self, subscription_id: str, price: float) -> Result[Subscription]:
        """Renew a subscription: add price and extend expiry by one window.

        Only the subscriber may renew.
        """
        subscription = self._lookup(subscription_id)
        if subscription is None:
            return _not_found(subscription_id)

        caller = self._caller_provider()
        if not subscription.is_owned_by(caller):
            logger.warning(
                "subscription_access_denied",
                subscription_id=subscription_id,
                caller=str(caller),
                operation="renew",
            )
            return Err(RegistryError.unauthorized(NOT_AUTHORIZED_SUBSCRIBER))

        renewed = subscription.renewed(price, self.expiry_window)
        self.store.update(renewed)

        log_price_change(
            subscription_id=subscription_id,
            old_price=subscription.price,
            new_price=renewed.price,
            reason="Renewal",
            subscriber=str(caller),
        )
        log_expiry_change(
            subscription_id=subscription_id,
            old_expiry=subscription.expiry_date,
            new_expiry=renewed.expiry_date,
            reason="Renewal",
        )
        return Ok(renewed)

    def withdraw_funds(self, subscription_id: str) -> Result[Subscription]:
        """Zero a subscription's price. Only the registry owner may withdraw.

        Bookkeeping only: no funds are transferred.
        """
        subscription = self._lookup(subscription_id)
        if subscription is None:
            return _not_found(subscription_id)

        caller = self._caller_provider()
        if not self.ownership.is_owner(caller):
            logger.warning(
                "withdraw_denied",
                subscription_id=subscription_id,
                caller=str(caller),
                owner_initialized=self.ownership.initialized,
            )
            return Err(RegistryError.unauthorized(NOT_OWNER))

        withdrawn = subscription.withdrawn()
        self.store.update(withdrawn)

        log_price_change(
            subscription_id=subscription_id,
            old_price=subscription.price,
            new_price=withdrawn.price,
            reason="Withdrawal",
            owner=str(caller),
        )
        return Ok(withdrawn)

    def get_statistics(self) -> dict:
        """Store statistics plus owner state."""
        stats = self.store.get_statistics()
        stats["owner_initialized"] = self.ownership.initialized
        return stats

    def reset(self) -> dict:
        """Clear every subscription and forget the owner.

        Returns:
            Dictionary with subscriptions_deleted and owner_cleared
        """
        deleted = self.store.count()
        self.store.clear()
        owner_cleared = self.ownership.reset()

        logger.info(
            "registry_reset",
            subscriptions_deleted=deleted,
            owner_cleared=owner_cleared,
        )
        return {"subscriptions_deleted": deleted, "owner_cleared": owner_cleared}


_registry_instance: Optional[SubscriptionRegistry] = None


def get_subscription_registry() -> SubscriptionRegistry:
    """Get global subscription registry (singleton)."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = SubscriptionRegistry()
    return _registry_instance
