"""Argument serialization - structured pairs and flat command-line tokens.

Both forms describe the same active switches and options:

    structured: [("--all", True), ("--author=", "me")]
    flat:       ["--all", "--author=me"]

PUBLIC API:
  - to_structured: Serialize events to (flag, True | value) pairs
  - to_flat: Serialize events to literal tokens
  - structured_to_flat: Convert structured pairs to tokens
  - is_structured: Check which form a persisted value uses
  - switch_enabled: Look up a switch flag in a persisted value
  - option_value: Look up an option flag in a persisted value
"""

from typing import Iterable, Optional

from .types import FlatArgs, PersistedValue, StructuredArgs

__all__ = [
    "to_structured",
    "to_flat",
    "structured_to_flat",
    "is_structured",
    "switch_enabled",
    "option_value",
]


def _active(events: Iterable) -> Iterable:
    for event in events:
        if event.flag is not None and event.enabled:
            yield event


def to_structured(events: Iterable) -> StructuredArgs:
    """Serialize active switches and options to (flag, True | value) pairs.

    Args:
        events: Switch and option events in display order. Actions are ignored.
    """
    pairs: StructuredArgs = []
    for event in _active(events):
        if event.section == "switches":
            pairs.append((event.flag, True))
        else:
            pairs.append((event.flag, event.value or ""))
    return pairs


def to_flat(events: Iterable) -> FlatArgs:
    """Serialize active switches and options to command-line tokens.

    Args:
        events: Switch and option events in display order. Actions are ignored.
    """
    return structured_to_flat(to_structured(events))


def structured_to_flat(pairs: StructuredArgs) -> FlatArgs:
    """Convert structured pairs to command-line tokens."""
    tokens: FlatArgs = []
    for flag, value in pairs:
        if value is True:
            tokens.append(flag)
        elif isinstance(value, str):
            tokens.append(flag + value)
    return tokens


def is_structured(persisted: PersistedValue) -> bool:
    """Check whether a persisted value is in structured form.

    Structured values are sequences of two-element pairs (tuples, or lists
    after a YAML round trip); flat values are sequences of strings.
    """
    if not persisted:
        return False
    return all(isinstance(item, (tuple, list)) and len(item) == 2 for item in persisted)


def switch_enabled(flag: str, persisted: PersistedValue) -> bool:
    """Check whether a switch flag is active in a persisted value."""
    if not persisted:
        return False
    if is_structured(persisted):
        return any(name == flag and value is True for name, value in persisted)
    return flag in persisted


def option_value(flag: str, persisted: PersistedValue) -> Optional[str]:
    """Find an option's value in a persisted value.

    Flat tokens match when they start with the flag; the value is the rest
    of the token. The first match wins.

    Returns:
        The value, or None when the option is not active.
    """
    if not persisted:
        return None
    if is_structured(persisted):
        for name, value in persisted:
            if name == flag and isinstance(value, str):
                return value
        return None
    for token in persisted:
        if isinstance(token, str) and token.startswith(flag):
            return token[len(flag) :]
    return None
