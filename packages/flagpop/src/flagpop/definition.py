"""Declarative popup definitions.

A definition is authored once and shared by every session opened from it.
Entries live in KeyedList containers so anchored insertion, removal and key
renames never depend on list splicing.

PUBLIC API:
  - KeyedList: Ordered list of entries addressed by stable keys
  - SwitchSpec: Boolean flag entry
  - OptionSpec: Valued flag entry with a reader
  - ActionSpec: Command entry
  - PopupDefinition: Complete popup template
  - coerce_entry: Build a spec from a spec object or a tuple
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Generic, Iterator, Optional, TypeAlias, TypeVar

from .errors import InvalidDefinition
from .types import EVENT_CLASSES, USE_PREFIX_VALUES, EventClass, FlatArgs, Handler, ValueReader

__all__ = [
    "KeyedList",
    "SwitchSpec",
    "OptionSpec",
    "ActionSpec",
    "PopupDefinition",
    "coerce_entry",
]

T = TypeVar("T")


class KeyedList(Generic[T]):
    """Ordered entries with stable keys.

    Order is an explicit list of keys; entries are found through an index map.
    """

    def __init__(self, items: Optional[list[tuple[str, T]]] = None):
        self._order: list[str] = []
        self._items: dict[str, T] = {}
        for key, item in items or []:
            if key in self._items:
                raise InvalidDefinition(f"Duplicate key {key!r}")
            self._order.append(key)
            self._items[key] = item

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        return (self._items[key] for key in self._order)

    def keys(self) -> list[str]:
        """Get keys in display order."""
        return list(self._order)

    def get(self, key: str) -> Optional[T]:
        """Get entry by key."""
        return self._items.get(key)

    def index(self, key: str) -> int:
        """Get position of key, raising KeyError when absent."""
        if key not in self._items:
            raise KeyError(key)
        return self._order.index(key)

    def put(self, key: str, item: T, at: Optional[str] = None, prepend: bool = False) -> None:
        """Insert or replace an entry.

        Without an anchor an existing key keeps its position and a new key is
        appended, or placed first when prepend is set. With an anchor the
        entry moves to just before (prepend) or just after the anchor.

        Args:
            key: Entry key.
            item: Entry value.
            at: Key of the anchor entry. Defaults to None.
            prepend: Insert before the anchor, or at the start. Defaults to False.

        Raises:
            KeyError: If the anchor key is not present.
        """
        if at is not None and at != key:
            if at not in self._items:
                raise KeyError(at)
            if key in self._items:
                self._order.remove(key)
            position = self._order.index(at)
            self._order.insert(position if prepend else position + 1, key)
        elif key not in self._items:
            if prepend:
                self._order.insert(0, key)
            else:
                self._order.append(key)
        self._items[key] = item

    def remove(self, key: str) -> T:
        """Remove entry by key and return it."""
        item = self._items.pop(key)
        self._order.remove(key)
        return item

    def rename(self, old: str, new: str, item: T) -> None:
        """Rename a key in place, storing the re-keyed entry."""
        position = self._order.index(old)
        del self._items[old]
        self._order[position] = new
        self._items[new] = item

    def copy(self) -> "KeyedList[T]":
        """Get a shallow copy."""
        clone: KeyedList[T] = KeyedList()
        clone._order = list(self._order)
        clone._items = dict(self._items)
        return clone


def read_string(prompt: str, current: Optional[str]) -> str:
    """Default option reader: prompt on the terminal.

    Args:
        prompt: Prompt text, usually the option flag.
        current: Value to pre-fill.

    Returns:
        Entered value.

    Raises:
        ReaderCancelled: If input is interrupted.
    """
    from rich.prompt import Prompt

    from .errors import ReaderCancelled

    try:
        return Prompt.ask(prompt.rstrip(": "), default=current or "", show_default=bool(current))
    except (KeyboardInterrupt, EOFError):
        raise ReaderCancelled(prompt) from None


@dataclass(frozen=True)
class SwitchSpec:
    """Boolean flag entry."""

    key: str
    description: str
    flag: str
    enabled: bool = False


@dataclass(frozen=True)
class OptionSpec:
    """Valued flag entry.

    Attributes:
        key: Triggering key.
        description: Label shown in the popup.
        flag: Flag text, e.g. "--author=".
        reader: Callable (prompt, current) -> str collecting the value.
        default: Value pre-filled until the user enters one.
    """

    key: str
    description: str
    flag: str
    reader: ValueReader = read_string
    default: Optional[str] = None


@dataclass(frozen=True)
class ActionSpec:
    """Command entry."""

    key: str
    description: str
    handler: Handler


Spec: TypeAlias = SwitchSpec | OptionSpec | ActionSpec

_SPEC_TYPES: dict[EventClass, type] = {
    "switches": SwitchSpec,
    "options": OptionSpec,
    "actions": ActionSpec,
}


def coerce_entry(cls: EventClass, entry) -> Spec:
    """Build a spec for an event class from a spec object or tuple.

    Tuples follow the field order of the spec: (key, description, flag[,
    enabled]) for switches, (key, description, flag[, reader[, default]])
    for options, (key, description, handler) for actions.

    Raises:
        InvalidDefinition: If the class is unknown or the entry malformed.
    """
    if cls not in _SPEC_TYPES:
        raise InvalidDefinition(f"Unknown event class {cls!r}, expected one of {', '.join(EVENT_CLASSES)}")
    spec_type = _SPEC_TYPES[cls]

    if isinstance(entry, spec_type):
        spec = entry
    elif isinstance(entry, (tuple, list)):
        try:
            spec = spec_type(*entry)
        except TypeError as e:
            raise InvalidDefinition(f"Malformed {cls} entry {entry!r}: {e}") from None
    else:
        raise InvalidDefinition(f"Malformed {cls} entry {entry!r}")

    if not isinstance(spec.key, str) or not spec.key:
        raise InvalidDefinition(f"{cls} entry {entry!r} has no key")
    if isinstance(spec, (SwitchSpec, OptionSpec)) and not spec.flag:
        raise InvalidDefinition(f"{cls} entry {spec.key!r} has no flag")
    if isinstance(spec, OptionSpec) and spec.reader is None:
        spec = replace(spec, reader=read_string)
    if isinstance(spec, ActionSpec) and not callable(spec.handler):
        raise InvalidDefinition(f"Action {spec.key!r} handler is not callable")
    return spec


@dataclass
class PopupDefinition:
    """Popup template: switches, options, actions and persistence binding.

    Attributes:
        name: Registry name.
        switches: Boolean flags in display order.
        options: Valued flags in display order.
        actions: Commands in display order.
        default_action: Handler run when the popup is bypassed.
        use_prefix: Prefix argument policy, None to follow the global one.
        variable: Preference slot holding the persisted argument set.
        man_page: Manual topic for help on switches and options.
        serialization: Form written to the variable ("flat" or "structured").
        max_columns: Maximum columns per section.
        sequence_predicate: When it returns true, sequence_actions replace actions.
        sequence_actions: Actions shown while a sequence is in progress.
    """

    name: str
    switches: KeyedList[SwitchSpec] = field(default_factory=KeyedList)
    options: KeyedList[OptionSpec] = field(default_factory=KeyedList)
    actions: KeyedList[ActionSpec] = field(default_factory=KeyedList)
    default_action: Optional[Handler] = None
    use_prefix: Optional[str] = None
    variable: Optional[str] = None
    man_page: Optional[str] = None
    serialization: str = "flat"
    max_columns: dict[str, int] = field(default_factory=dict)
    sequence_predicate: Optional[Callable[[], bool]] = None
    sequence_actions: KeyedList[ActionSpec] = field(default_factory=KeyedList)

    def __post_init__(self):
        if self.variable is None:
            self.variable = f"{self.name}-arguments"
        if self.use_prefix is not None and self.use_prefix not in USE_PREFIX_VALUES:
            raise InvalidDefinition(f"Invalid use_prefix {self.use_prefix!r} for popup {self.name}")
        if self.serialization not in ("flat", "structured"):
            raise InvalidDefinition(f"Invalid serialization {self.serialization!r} for popup {self.name}")

    def entries(self, cls: EventClass) -> KeyedList:
        """Get the entry list for an event class.

        Raises:
            InvalidDefinition: If the class is unknown.
        """
        if cls not in EVENT_CLASSES:
            raise InvalidDefinition(f"Unknown event class {cls!r}, expected one of {', '.join(EVENT_CLASSES)}")
        return getattr(self, cls)

    def default_arguments(self) -> FlatArgs:
        """Get the flat argument set used before anything was persisted."""
        return [switch.flag for switch in self.switches if switch.enabled]
