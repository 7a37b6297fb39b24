"""Subscription store - in-memory storage for subscription records.

Records are kept in insertion order. The store has no locking: requests are
handled one at a time, so reads and writes never interleave.
"""

from typing import Dict, List, Optional

from subscription_registry.models import Identity, Subscription


class SubscriptionNotFoundError(Exception):
    """Raised when a subscription is not found in the store."""

    pass


class SubscriptionStore:
    """In-memory storage for subscription records keyed by id.

    Supports lookup by id and by subscriber identity.
    """

    def __init__(self):
        """Initialize subscription store with empty storage."""
        self._subscriptions: Dict[str, Subscription] = {}

    def add(self, subscription: Subscription) -> None:
        """Add a subscription to the store.

        Args:
            subscription: Subscription to store

        Raises:
            ValueError: If subscription id already exists
        """
        if subscription.id in self._subscriptions:
            raise ValueError(f"Subscription with id '{subscription.id}' already exists")
        self._subscriptions[subscription.id] = subscription

    def get_by_id(self, subscription_id: str) -> Subscription:
        """Get subscription by id.

        Args:
            subscription_id: Subscription id

        Returns:
            Subscription

        Raises:
            SubscriptionNotFoundError: If id not found
        """
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(f"Subscription not found for id: {subscription_id}")
        return subscription

    def get_by_subscriber(self, subscriber: Identity) -> List[Subscription]:
        """Get all subscriptions created by a subscriber, in insertion order.

        Args:
            subscriber: Subscriber identity

        Returns:
            List of Subscription records for the subscriber
        """
        return [s for s in self._subscriptions.values() if s.subscriber == subscriber]

    def get_all(self) -> List[Subscription]:
        """Get all subscriptions in insertion order."""
        return list(self._subscriptions.values())

    def update(self, subscription: Subscription) -> None:
        """Replace an existing subscription, keeping its position.

        Args:
            subscription: Replacement record (matched by id)

        Raises:
            SubscriptionNotFoundError: If id not found
        """
        if subscription.id not in self._subscriptions:
            raise SubscriptionNotFoundError(f"Subscription not found for id: {subscription.id}")
        self._subscriptions[subscription.id] = subscription

    def delete(self, subscription_id: str) -> Subscription:
        """Remove a subscription.

        Args:
            subscription_id: Subscription id

        Returns:
            The removed Subscription

        Raises:
            SubscriptionNotFoundError: If id not found
        """
        try:
            return self._subscriptions.pop(subscription_id)
        except KeyError:
            raise SubscriptionNotFoundError(
                f"Subscription not found for id: {subscription_id}"
            ) from None

    def count(self) -> int:
        """Get total number of subscriptions."""
        return len(self._subscriptions)

    def clear(self) -> None:
        """Clear all subscriptions from the store.

        Warning: This removes all data. Use with caution.
        """
        self._subscriptions.clear()

    def get_statistics(self) -> Dict[str, float]:
        """Get subscription store statistics.

        Returns:
            Dictionary with statistics:
            - total_subscriptions: Total number of subscriptions
            - unique_subscribers: Number of distinct subscriber identities
            - total_price: Sum of bookkeeping prices
        """
        subscriptions = list(self._subscriptions.values())
        return {
            "total_subscriptions": len(subscriptions),
            "unique_subscribers": len(set(s.subscriber for s in subscriptions)),
            "total_price": sum(s.price for s in subscriptions),
        }

    def __len__(self) -> int:
        """Get number of subscriptions in store."""
        return self.count()

    def __repr__(self) -> str:
        """String representation of store."""
        return f"SubscriptionStore(subscriptions={self.count()})"


# Global store instance
_store_instance: Optional[SubscriptionStore] = None


def get_subscription_store() -> SubscriptionStore:
    """Get global subscription store instance (singleton).

    Returns:
        SubscriptionStore instance
    """
    global _store_instance
    if _store_instance is None:
        _store_instance = SubscriptionStore()
    return _store_instance
