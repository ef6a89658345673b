"""Current invocation context for action handlers.

Handlers take no arguments. While one runs, the arguments of the popup that
triggered it are available through current_args().

PUBLIC API:
  - Invocation: Popup name, flat arguments and forwarded prefix argument
  - current_invocation: Get the active invocation, if any
  - current_args: Get the active flat argument set
  - invoking: Context manager that makes an invocation current
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .types import FlatArgs, PrefixArg

__all__ = ["Invocation", "current_invocation", "current_args", "invoking"]


@dataclass(frozen=True)
class Invocation:
    """Arguments handed to an action handler.

    Attributes:
        popup: Name of the popup the action came from.
        args: Flat argument set of the triggering session.
        prefix_arg: Prefix argument forwarded to a default action.
        default: True when the popup was bypassed.
    """

    popup: str
    args: FlatArgs = field(default_factory=list)
    prefix_arg: Optional[PrefixArg] = None
    default: bool = False


_current: ContextVar[Optional[Invocation]] = ContextVar("flagpop_invocation", default=None)


def current_invocation() -> Optional[Invocation]:
    """Get the invocation of the running action handler."""
    return _current.get()


def current_args() -> FlatArgs:
    """Get the flat arguments of the running action, or [] outside one."""
    invocation = _current.get()
    return list(invocation.args) if invocation else []


@contextmanager
def invoking(invocation: Invocation) -> Iterator[Invocation]:
    """Make an invocation current for the duration of the block."""
    token = _current.set(invocation)
    try:
        yield invocation
    finally:
        _current.reset(token)
