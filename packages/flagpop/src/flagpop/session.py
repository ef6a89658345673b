"""Live popup sessions.

A session is rebuilt from its definition and the variable's persisted value
every time a popup opens, and is discarded when the popup closes.

PUBLIC API:
  - Event: Live, mutable switch/option/action record
  - Session: The three event lists of one open popup
  - materialize: Build a session from a definition and persisted value
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from . import arguments
from .definition import PopupDefinition
from .errors import UnboundKey
from .types import EVENT_CLASSES, EventClass, FlatArgs, PersistedValue, StructuredArgs

__all__ = ["Event", "Session", "materialize"]

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Live state of one switch, option or action.

    Attributes:
        section: Event class the event belongs to.
        key: Triggering key.
        description: Label.
        flag: Flag text for switches and options, None for actions.
        enabled: Whether the switch/option is active.
        value: Option value, kept while disabled so it can be restored.
        handler: Action handler or option reader.
    """

    section: EventClass
    key: str
    description: str
    flag: Optional[str] = None
    enabled: bool = False
    value: Optional[str] = None
    handler: Optional[Callable[..., Any]] = None

    @property
    def active_value(self) -> Optional[str]:
        """Option value while enabled, None otherwise."""
        return self.value if self.enabled else None


@dataclass
class Session:
    """The live event lists of one open popup."""

    definition: PopupDefinition
    switches: list[Event] = field(default_factory=list)
    options: list[Event] = field(default_factory=list)
    actions: list[Event] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.definition.name

    def events(self, section: EventClass) -> list[Event]:
        """Get the event list for a class."""
        return getattr(self, section)

    def lookup(self, section: EventClass, key: str) -> Event:
        """Find an event by class and key.

        Raises:
            UnboundKey: If no event of that class has the key.
        """
        for event in self.events(section):
            if event.key == key:
                return event
        raise UnboundKey(key, section)

    def find(self, key: str) -> Optional[Event]:
        """Find an event by key in any class."""
        for section in EVENT_CLASSES:
            for event in self.events(section):
                if event.key == key:
                    return event
        return None

    def flat_args(self) -> FlatArgs:
        """Current active arguments as command-line tokens."""
        return arguments.to_flat(self.switches + self.options)

    def structured_args(self) -> StructuredArgs:
        """Current active arguments as (flag, True | value) pairs."""
        return arguments.to_structured(self.switches + self.options)

    def persisted_form(self) -> FlatArgs | StructuredArgs:
        """Arguments in the form the definition stores in its variable."""
        if self.definition.serialization == "structured":
            return self.structured_args()
        return self.flat_args()


def materialize(definition: PopupDefinition, persisted: PersistedValue) -> Session:
    """Build a live session.

    Switches and options present in the persisted value start enabled;
    everything else starts disabled, with options keeping their default value
    for later re-enable. A value of None means nothing was ever persisted, in
    which case the definition's enabled-by-default switches apply.

    Args:
        definition: Popup template.
        persisted: Flat or structured argument set, or None.

    Returns:
        New session.
    """
    if persisted is None:
        persisted = definition.default_arguments()

    session = Session(definition=definition)

    for spec in definition.switches:
        session.switches.append(
            Event(
                section="switches",
                key=spec.key,
                description=spec.description,
                flag=spec.flag,
                enabled=arguments.switch_enabled(spec.flag, persisted),
            )
        )

    for spec in definition.options:
        value = arguments.option_value(spec.flag, persisted)
        session.options.append(
            Event(
                section="options",
                key=spec.key,
                description=spec.description,
                flag=spec.flag,
                enabled=value is not None,
                value=value if value is not None else spec.default,
                handler=spec.reader,
            )
        )

    actions = definition.actions
    if definition.sequence_predicate is not None and definition.sequence_actions and definition.sequence_predicate():
        logger.debug(f"Popup {definition.name} is in sequence mode")
        actions = definition.sequence_actions

    for spec in actions:
        session.actions.append(
            Event(section="actions", key=spec.key, description=spec.description, handler=spec.handler)
        )

    logger.debug(f"Materialized {definition.name}: {session.flat_args()}")
    return session
