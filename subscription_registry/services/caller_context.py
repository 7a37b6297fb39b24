"""Caller identity supplied by the host for the request being processed.

The HTTP layer binds the identity of each request with :func:`caller_scope`;
registry operations read it through :func:`current_caller`.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Optional, Union

from subscription_registry.logging_config import bind_context, unbind_context
from subscription_registry.models import Identity

_current_caller: ContextVar[Optional[Identity]] = ContextVar("current_caller", default=None)


class CallerUnavailableError(Exception):
    """Raised when an operation needs the caller identity and none is bound."""

    pass


def current_caller() -> Identity:
    """Get the identity of the caller being served.

    Raises:
        CallerUnavailableError: If no caller is bound
    """
    caller = _current_caller.get()
    if caller is None:
        raise CallerUnavailableError("No caller identity bound to the current context")
    return caller


@contextmanager
def caller_scope(caller: Union[str, Identity]) -> Iterator[Identity]:
    """Bind a caller identity for the duration of a block.

    Example:
        with caller_scope("aaaaa-aa"):
            registry.initialize()
    """
    identity = Identity.of(caller)
    token = _current_caller.set(identity)
    bind_context(caller=str(identity))
    try:
        yield identity
    finally:
        unbind_context("caller")
        _current_caller.reset(token)
