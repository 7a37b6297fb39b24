"""Subscription id generation utilities."""

import uuid


def generate_subscription_id() -> str:
    """Generate a unique subscription id.

    Format: canonical uuid4 text
    Example: 7c9e6679-7425-40de-944b-e07fc1f90ae7

    Returns:
        Unique subscription id string
    """
    return str(uuid.uuid4())
