"""Registry owner: the identity allowed to withdraw funds.

Captured once from the first caller of ``initialize``; later calls leave it
untouched.
"""

from typing import Optional

from subscription_registry.logging_config import get_logger
from subscription_registry.models import Identity
from subscription_registry.state_logger import log_owner_initialized

logger = get_logger(__name__)


class RegistryOwnership:
    """Process-wide owner state with a set-once initialization."""

    def __init__(self) -> None:
        self._owner: Optional[Identity] = None
        self._initialized = False

    @property
    def owner(self) -> Optional[Identity]:
        return self._owner

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, caller: Identity) -> bool:
        """Record caller as owner unless already initialized.

        Returns:
            True if caller became the owner, False if the call was a no-op
        """
        if self._initialized:
            logger.debug("registry_already_initialized", owner=str(self._owner))
            return False

        self._owner = caller
        self._initialized = True
        log_owner_initialized(owner=str(caller))
        return True

    def is_owner(self, identity: Identity) -> bool:
        """Check identity against the owner. Always False before initialization."""
        return self._initialized and self._owner == identity

    def reset(self) -> bool:
        """Forget the owner.

        Returns:
            True if an owner was cleared
        """
        was_initialized = self._initialized
        self._owner = None
        self._initialized = False
        return was_initialized

    def __repr__(self) -> str:
        return f"RegistryOwnership(owner={self._owner}, initialized={self._initialized})"


_ownership_instance: Optional[RegistryOwnership] = None


def get_registry_ownership() -> RegistryOwnership:
    """Get global ownership state (singleton)."""
    global _ownership_instance
    if _ownership_instance is None:
        _ownership_instance = RegistryOwnership()
    return _ownership_instance
