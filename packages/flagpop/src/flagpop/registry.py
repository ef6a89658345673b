"""Popup registry - define and edit popups by name.

All edits are idempotent by key: redefining an existing key replaces its
entry without duplicating or reordering it, unless an anchor is supplied.

PUBLIC API:
  - PopupRegistry: Named popup definitions with key-level editing
  - default_registry: Process-wide registry instance
  - define_popup: Register a popup in the default registry
  - get_popup: Look up a popup in the default registry
"""

import logging
from dataclasses import replace
from typing import Optional

from .definition import KeyedList, PopupDefinition, coerce_entry
from .errors import InvalidDefinition
from .keys import is_reserved
from .types import EVENT_CLASSES, EventClass

__all__ = ["PopupRegistry", "default_registry", "define_popup", "get_popup"]

logger = logging.getLogger(__name__)

_CONFIG_KEYS = frozenset(
    [
        "switches",
        "options",
        "actions",
        "default_action",
        "use_prefix",
        "variable",
        "man_page",
        "serialization",
        "max_columns",
        "max_action_columns",
        "sequence_predicate",
        "sequence_actions",
    ]
)


def _check_key(definition: PopupDefinition, cls: EventClass, key: str, renaming: Optional[str] = None) -> None:
    """Reject keys that collide with another class or a built-in chord.

    The key being renamed, if any, is left out of the overlap scan.
    """
    if is_reserved(key):
        raise InvalidDefinition(f"Key {key!r} in popup {definition.name} is reserved for a common command")
    for other in EVENT_CLASSES:
        if other != cls and key in definition.entries(other):
            raise InvalidDefinition(f"Key {key!r} in popup {definition.name} is bound in both {other} and {cls}")
    if cls != "actions" and key in definition.sequence_actions:
        raise InvalidDefinition(f"Key {key!r} in popup {definition.name} is bound in both sequence actions and {cls}")
    bound_keys = [bound for other in EVENT_CLASSES for bound in definition.entries(other).keys()]
    if renaming is not None:
        bound_keys.remove(renaming)
    for bound in bound_keys + definition.sequence_actions.keys():
        if bound.startswith(key + " ") or key.startswith(bound + " "):
            raise InvalidDefinition(f"Key {key!r} in popup {definition.name} overlaps with {bound!r}")


def _build_entries(name: str, cls: EventClass, entries) -> KeyedList:
    specs = [coerce_entry(cls, entry) for entry in entries or []]
    try:
        return KeyedList([(spec.key, spec) for spec in specs])
    except InvalidDefinition as e:
        raise InvalidDefinition(f"Popup {name}: {e} in {cls}") from None


class PopupRegistry:
    """Named popup definitions.

    Popups are looked up by name; every editing method raises
    InvalidDefinition for unknown names.
    """

    def __init__(self):
        self._popups: dict[str, PopupDefinition] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._popups

    def names(self) -> list[str]:
        """List registered popup names."""
        return sorted(self._popups)

    def get(self, name: str) -> PopupDefinition:
        """Get a popup definition.

        Raises:
            InvalidDefinition: If no popup has this name.
        """
        definition = self._popups.get(name)
        if definition is None:
            raise InvalidDefinition(f"Popup {name!r} is not defined")
        return definition

    def define(self, name: str, **config) -> PopupDefinition:
        """Register or replace a popup.

        Args:
            name: Popup name.
            **config: switches, options, actions, default_action, use_prefix,
                variable, man_page, serialization, max_columns,
                max_action_columns, sequence_predicate, sequence_actions.

        Returns:
            The registered definition.

        Raises:
            InvalidDefinition: On unknown config keys, duplicate or colliding
                keys, or invalid policy/serialization values.
        """
        unknown = set(config) - _CONFIG_KEYS
        if unknown:
            raise InvalidDefinition(f"Unknown popup config for {name}: {', '.join(sorted(unknown))}")

        max_columns = dict(config.get("max_columns") or {})
        if config.get("max_action_columns"):
            max_columns["actions"] = config["max_action_columns"]
        for section, columns in max_columns.items():
            if section not in EVENT_CLASSES or not isinstance(columns, int) or columns < 1:
                raise InvalidDefinition(f"Invalid max_columns entry {section}={columns!r} for popup {name}")

        definition = PopupDefinition(
            name=name,
            switches=_build_entries(name, "switches", config.get("switches")),
            options=_build_entries(name, "options", config.get("options")),
            actions=_build_entries(name, "actions", config.get("actions")),
            default_action=config.get("default_action"),
            use_prefix=config.get("use_prefix"),
            variable=config.get("variable"),
            man_page=config.get("man_page"),
            serialization=config.get("serialization", "flat"),
            max_columns=max_columns,
            sequence_predicate=config.get("sequence_predicate"),
            sequence_actions=_build_entries(name, "actions", config.get("sequence_actions")),
        )

        for cls in EVENT_CLASSES:
            for key in definition.entries(cls).keys():
                _check_key(definition, cls, key)
        for key in definition.sequence_actions.keys():
            _check_key(definition, "actions", key)

        if name in self._popups:
            logger.debug(f"Redefining popup {name}")
        self._popups[name] = definition
        return definition

    def add_event(
        self,
        name: str,
        cls: EventClass,
        key: str,
        entry,
        at: Optional[str] = None,
        prepend: bool = False,
    ) -> None:
        """Insert or replace a switch, option or action.

        Args:
            name: Popup name.
            cls: "switches", "options" or "actions".
            key: Entry key.
            entry: Spec object, or a tuple of the fields after the key.
            at: Anchor key to insert next to. Defaults to None.
            prepend: Insert before the anchor (or first). Defaults to False.

        Raises:
            InvalidDefinition: On unknown popup, class, anchor or colliding key.
        """
        definition = self.get(name)
        entries = definition.entries(cls)
        if isinstance(entry, (tuple, list)):
            entry = (key, *entry)
        spec = coerce_entry(cls, entry)
        if spec.key != key:
            raise InvalidDefinition(f"Entry key {spec.key!r} does not match {key!r}")
        _check_key(definition, cls, key)

        try:
            entries.put(key, spec, at=at, prepend=prepend)
        except KeyError:
            raise InvalidDefinition(f"Anchor {at!r} is not bound in {cls} of popup {name}") from None

    def remove_event(self, name: str, cls: EventClass, key: str) -> None:
        """Delete an entry by key.

        Raises:
            InvalidDefinition: On unknown popup, class or key.
        """
        entries = self.get(name).entries(cls)
        try:
            entries.remove(key)
        except KeyError:
            raise InvalidDefinition(f"{key!r} is not bound in {cls} of popup {name}") from None

    def rebind_key(self, name: str, cls: EventClass, old: str, new: str) -> None:
        """Rename a key without moving its entry.

        Raises:
            InvalidDefinition: On unknown popup, class or key, or if the new
                key is already bound.
        """
        definition = self.get(name)
        entries = definition.entries(cls)
        spec = entries.get(old)
        if spec is None:
            raise InvalidDefinition(f"{old!r} is not bound in {cls} of popup {name}")
        if old == new:
            return
        if new in entries:
            raise InvalidDefinition(f"{new!r} is already bound in {cls} of popup {name}")
        _check_key(definition, cls, new, renaming=old)
        entries.rename(old, new, replace(spec, key=new))


# Global instance
default_registry = PopupRegistry()


def define_popup(name: str, **config) -> PopupDefinition:
    """Register a popup in the default registry."""
    return default_registry.define(name, **config)


def get_popup(name: str) -> PopupDefinition:
    """Get a popup from the default registry."""
    return default_registry.get(name)
