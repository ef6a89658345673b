"""Keyboard-driven argument popups.

A popup collects switches and valued options for an external command, then
runs one of its actions with the assembled arguments. Popups are declared
once, rematerialized from saved preferences every time they open, and driven
by a modal key dispatcher.

PUBLIC API:
  - define_popup: Register a popup in the default registry
  - get_popup: Look up a registered popup
  - PopupRegistry: Named popup definitions with key-level editing
  - SwitchSpec, OptionSpec, ActionSpec: Popup entry declarations
  - materialize: Build a live session from a definition and saved arguments
  - Dispatcher: Modal key dispatch over one session
  - invoke_popup: Apply the prefix argument policy and open or bypass a popup
  - current_args: Arguments of the running action
  - layout: Project a session onto a text surface
  - describe_key: Explain what a chord does
  - PrefixArg: Prefix argument given on invocation
"""

from .context import current_args, current_invocation
from .definition import ActionSpec, OptionSpec, SwitchSpec
from .dispatch import Dispatcher
from .help import describe_key
from .invocation import invoke_popup
from .layout import layout
from .registry import PopupRegistry, define_popup, get_popup
from .session import materialize
from .types import PrefixArg

__version__ = "0.1.0"
__all__ = [
    "define_popup",
    "get_popup",
    "PopupRegistry",
    "SwitchSpec",
    "OptionSpec",
    "ActionSpec",
    "materialize",
    "Dispatcher",
    "invoke_popup",
    "current_args",
    "current_invocation",
    "layout",
    "describe_key",
    "PrefixArg",
]
