"""Type definitions for flagpop - switches, options and actions.

Every popup has three event classes, each with its own key namespace.
Transitions are resolved to a TransitionKind once, when the key-binding
table is built, never per keypress.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Literal, TypeAlias

# Event classes in layout order
EventClass: TypeAlias = Literal["switches", "options", "actions"]
EVENT_CLASSES: tuple[EventClass, ...] = ("switches", "options", "actions")

# Layout sections include the injected common commands
Section: TypeAlias = Literal["switches", "options", "actions", "commands"]

# Prefix argument policies; "none" and "disabled" both always open the popup
UsePrefix: TypeAlias = Literal["default", "popup", "disabled", "none"]
USE_PREFIX_VALUES = frozenset(["default", "popup", "disabled", "none"])

# Form written to a popup's variable
Serialization: TypeAlias = Literal["flat", "structured"]

# Persisted argument sets
FlatArgs: TypeAlias = list[str]
StructuredArgs: TypeAlias = list[tuple[str, bool | str]]
PersistedValue: TypeAlias = FlatArgs | StructuredArgs | None

# Callables supplied by popup authors
Handler: TypeAlias = Callable[[], Any]
ValueReader: TypeAlias = Callable[[str, str | None], str]


class TransitionKind(Enum):
    """What a bound chord does when pressed in an open popup."""

    TOGGLE_SWITCH = "toggle-switch"
    SET_OPTION = "set-option"
    RUN_ACTION = "run-action"
    QUIT = "quit"
    DESCRIBE_KEY = "describe-key"
    SET_DEFAULTS = "set-defaults"
    SAVE_DEFAULTS = "save-defaults"
    TOGGLE_COMMON_COMMANDS = "toggle-common-commands"
    UNIVERSAL_ARGUMENT = "universal-argument"
    NEXT_BUTTON = "next-button"
    PREVIOUS_BUTTON = "previous-button"
    PUSH_BUTTON = "push-button"


class DispatchState(Enum):
    """Dispatcher lifecycle states."""

    CLOSED = "closed"
    OPEN = "open"
    AWAITING_OPTION_INPUT = "awaiting-option-input"


@dataclass(frozen=True)
class PrefixArg:
    """Prefix argument given when a popup is invoked.

    Universal arguments count key presses in multiples of four (4, 16, 64);
    numeric arguments carry the number typed.
    """

    value: int = 4
    universal: bool = True

    def forwarded(self) -> "PrefixArg | None":
        """Get the argument passed on to a default action.

        One universal press is consumed by the popup itself, so 4 becomes no
        argument and 16 becomes 4. Numeric arguments pass through unchanged.
        """
        if not self.universal:
            return self
        if self.value <= 4:
            return None
        return PrefixArg(self.value // 4, universal=True)


def format_chord(chord: str) -> str:
    """Get the short display form of a chord.

    "ctrl+c ctrl+c" becomes "C-c C-c"; chords made only of single characters
    are run together, so "- a" becomes "-a".
    """
    if all(len(key) == 1 for key in chord.split()):
        return chord.replace(" ", "")
    parts = []
    for key in chord.split():
        key = key.replace("ctrl+", "C-").replace("shift+", "S-").replace("alt+", "M-")
        if key == "question_mark":
            key = "?"
        parts.append(key)
    return " ".join(parts)
