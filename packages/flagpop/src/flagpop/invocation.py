"""Invocation policy - open the popup or run its default action.

The decision depends on the popup's use_prefix policy (or the global one
when the popup sets none) and on whether a prefix argument was given:

    policy    no prefix        prefix
    default   open popup       run default action
    popup     run default      open popup
    none      open popup       open popup
    disabled  open popup       PolicyMisuseError

PUBLIC API:
  - Decision: Outcome of the policy for one invocation
  - decide: Apply the policy
  - invoke_popup: Apply the policy and act on it
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .context import Invocation, invoking
from .definition import PopupDefinition
from .dispatch import Dispatcher, OptionRequest
from .errors import PolicyMisuseError
from .runtime import Display, Runtime
from .session import materialize
from .types import USE_PREFIX_VALUES, PrefixArg

__all__ = ["Decision", "decide", "invoke_popup"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """What an invocation should do.

    Attributes:
        run_default: Run the default action instead of opening the popup.
        prefix_arg: Argument to forward to the default action.
        advisory: Message to show when the popup opens as a fallback.
    """

    run_default: bool
    prefix_arg: Optional[PrefixArg] = None
    advisory: Optional[str] = None


def decide(definition: PopupDefinition, prefix_arg: Optional[PrefixArg], global_policy: str) -> Decision:
    """Decide between opening a popup and running its default action.

    Args:
        definition: Popup being invoked.
        prefix_arg: Prefix argument given, or None.
        global_policy: Process-wide policy used when the popup has none.

    Raises:
        PolicyMisuseError: If the global policy value is invalid, or a prefix
            argument was given while the policy is disabled.
    """
    if definition.use_prefix is None and global_policy not in USE_PREFIX_VALUES:
        raise PolicyMisuseError(
            f"Invalid use_prefix_argument {global_policy!r}; expected one of {', '.join(sorted(USE_PREFIX_VALUES))}"
        )
    policy = definition.use_prefix or global_policy
    has_prefix = prefix_arg is not None

    if policy == "disabled" and has_prefix:
        raise PolicyMisuseError(
            "The prefix argument is disabled for popups; set use_prefix_argument "
            "to default, popup or none in flagpop.toml"
        )

    wants_default = (policy == "default" and has_prefix) or (policy == "popup" and not has_prefix)
    if not wants_default:
        return Decision(run_default=False)

    if definition.default_action is None:
        return Decision(
            run_default=False,
            advisory=f"{definition.name} has no default action; showing popup instead.",
        )

    return Decision(run_default=True, prefix_arg=prefix_arg.forwarded() if prefix_arg else None)


def invoke_popup(
    name: str,
    prefix_arg: Optional[PrefixArg],
    runtime: Runtime,
    display: Display,
    option_input: Optional[Callable[[OptionRequest], None]] = None,
) -> Dispatcher | Any:
    """Invoke a popup by name.

    Args:
        name: Registered popup name.
        prefix_arg: Prefix argument given, or None.
        runtime: Shared collaborators.
        display: Surface to open the popup on.
        option_input: Passed to the Dispatcher for asynchronous value input.

    Returns:
        The open Dispatcher, or the default action's result when the popup
        was bypassed.
    """
    definition = runtime.registry.get(name)
    decision = decide(definition, prefix_arg, runtime.settings.use_prefix_argument)
    persisted = runtime.store.get(definition.variable)

    if decision.run_default:
        session = materialize(definition, persisted)
        invocation = Invocation(
            popup=name,
            args=session.flat_args(),
            prefix_arg=decision.prefix_arg,
            default=True,
        )
        logger.info(f"Running default action of {name} with {invocation.args}")
        with invoking(invocation):
            return definition.default_action()

    dispatcher = Dispatcher(materialize(definition, persisted), runtime, display, option_input=option_input)
    dispatcher.open()
    if decision.advisory:
        logger.warning(decision.advisory)
        display.message(decision.advisory)
    return dispatcher
