"""Key-binding table with scoped overlays.

The global table is a base layer of chord -> Binding entries. An open popup
pushes an overlay built from its session and pops it when the session ends,
which restores whatever bindings were active before.

Chords are space-separated key names ("x", "ctrl+c ctrl+c"). A chord that is
the beginning of a longer bound chord is a prefix and waits for more keys.

PUBLIC API:
  - Binding: Chord resolved to a TransitionKind
  - KeyBindingTable: Layered chord lookup with overlays
  - COMMON_COMMANDS: Built-in popup commands and their chords
  - QUIT_CHARACTER: Key that quits when no action is bound to it
  - is_reserved: Check whether a key collides with a built-in chord
  - popup_bindings: Build the overlay for a session
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .types import TransitionKind

__all__ = [
    "Binding",
    "KeyBindingTable",
    "COMMON_COMMANDS",
    "QUIT_CHARACTER",
    "is_reserved",
    "popup_bindings",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    """Chord resolved to the transition it triggers.

    Attributes:
        chord: Key sequence.
        kind: Transition to perform.
        key: Event key for switch/option/action transitions.
        description: Label for help and the common commands section.
    """

    chord: str
    kind: TransitionKind
    key: Optional[str] = None
    description: str = ""


# Shown in the "Common Commands" section, in this order
COMMON_COMMANDS: tuple[Binding, ...] = (
    Binding("ctrl+c ctrl+c", TransitionKind.SET_DEFAULTS, description="Set defaults"),
    Binding("ctrl+x ctrl+s", TransitionKind.SAVE_DEFAULTS, description="Save defaults"),
    Binding("ctrl+t", TransitionKind.TOGGLE_COMMON_COMMANDS, description="Hide common commands"),
    Binding("?", TransitionKind.DESCRIBE_KEY, description="Describe key"),
    Binding("ctrl+u", TransitionKind.UNIVERSAL_ARGUMENT, description="Prefix argument"),
    Binding("ctrl+g", TransitionKind.QUIT, description="Abort"),
)

# Not shown, but always active while a popup is open
NAVIGATION_COMMANDS: tuple[Binding, ...] = (
    Binding("tab", TransitionKind.NEXT_BUTTON, description="Next button"),
    Binding("shift+tab", TransitionKind.PREVIOUS_BUTTON, description="Previous button"),
    Binding("enter", TransitionKind.PUSH_BUTTON, description="Push button"),
)

QUIT_CHARACTER = "q"


def is_reserved(key: str) -> bool:
    """Check whether a popup key collides with a built-in chord.

    A key collides when it equals a built-in chord or is the first key of a
    multi-key built-in chord.
    """
    for binding in COMMON_COMMANDS + NAVIGATION_COMMANDS:
        keys = binding.chord.split()
        if key == binding.chord or key == keys[0]:
            return True
    return False


class KeyBindingTable:
    """Chord lookup over a base layer and a stack of overlays.

    The most recently pushed overlay wins.
    """

    def __init__(self, base: Optional[dict[str, Binding]] = None):
        self._layers: list[dict[str, Binding]] = [dict(base or {})]

    @property
    def depth(self) -> int:
        """Number of overlays currently pushed."""
        return len(self._layers) - 1

    def bind(self, binding: Binding) -> None:
        """Add a binding to the base layer."""
        self._layers[0][binding.chord] = binding

    def push(self, overlay: dict[str, Binding]) -> int:
        """Push an overlay and return its depth token."""
        self._layers.append(dict(overlay))
        logger.debug(f"Pushed key overlay with {len(overlay)} bindings (depth {self.depth})")
        return self.depth

    def pop(self, token: Optional[int] = None) -> None:
        """Pop overlays down to the given token, or just the top one.

        Args:
            token: Depth returned by push. Overlays above and including it go.
        """
        if token is None:
            token = self.depth
        while self.depth >= token and self.depth > 0:
            self._layers.pop()
        logger.debug(f"Popped key overlay (depth {self.depth})")

    def lookup(self, chord: str) -> Optional[Binding]:
        """Resolve a complete chord."""
        for layer in reversed(self._layers):
            if chord in layer:
                return layer[chord]
        return None

    def is_prefix(self, chord: str) -> bool:
        """Check whether chord starts a longer bound chord."""
        start = chord + " "
        return any(bound.startswith(start) for layer in self._layers for bound in layer)


def popup_bindings(session) -> dict[str, Binding]:
    """Build the overlay for an open session.

    Args:
        session: Session whose events are bound.

    Returns:
        Mapping of chord to Binding.
    """
    overlay: dict[str, Binding] = {}
    for binding in COMMON_COMMANDS + NAVIGATION_COMMANDS:
        overlay[binding.chord] = binding

    for event in session.switches:
        overlay[event.key] = Binding(event.key, TransitionKind.TOGGLE_SWITCH, event.key, event.description)
    for event in session.options:
        overlay[event.key] = Binding(event.key, TransitionKind.SET_OPTION, event.key, event.description)
    for event in session.actions:
        overlay[event.key] = Binding(event.key, TransitionKind.RUN_ACTION, event.key, event.description)

    return overlay
