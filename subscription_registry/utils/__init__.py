"""Utility functions and helpers for the registry."""

from subscription_registry.utils.id_generator import generate_subscription_id

__all__ = [
    "generate_subscription_id",
]
