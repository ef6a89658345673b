"""Help and introspection for popup keys.

A queried chord is resolved through the active key-binding table. Switches
and options are looked up in the popup's manual page; actions and built-in
commands get a description of the callable behind them.

PUBLIC API:
  - Describer: Protocol for manual and handler viewers
  - Description: Text shown by a viewer, with the line to position at
  - ManualDescriber: Describer rendering man pages through subprocess
  - describe_key: Resolve a chord and dispatch to a describer
  - describe_callable: Plain-text description of a handler
  - find_flag_line: Locate a flag's entry in manual text
"""

import inspect
import logging
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol

from .errors import HelpUnresolved
from .keys import Binding, KeyBindingTable
from .session import Session
from .types import TransitionKind

__all__ = [
    "Describer",
    "Description",
    "ManualDescriber",
    "describe_key",
    "describe_callable",
    "find_flag_line",
]

logger = logging.getLogger(__name__)


class Describer(Protocol):
    """Opens read-only views for help requests."""

    def show_manual(self, topic: str, flag: Optional[str]) -> None:
        """Show a manual page, positioned at flag when given."""
        ...

    def describe_handler(self, handler: Optional[Callable[..., Any]], title: str) -> None:
        """Show a description of a handler."""
        ...


@dataclass(frozen=True)
class Description:
    """Text for a help view.

    Attributes:
        title: View title.
        text: Full text.
        line: Line to scroll to.
    """

    title: str
    text: str
    line: int = 0


def find_flag_line(text: str, flag: str) -> Optional[int]:
    """Find the line documenting a flag in manual text.

    Matches indented entries such as "    --all", "    -a, --all" and
    "    --author=<pattern>". A trailing "=" on the flag is ignored.

    Returns:
        Line index, or None when the flag is not documented.
    """
    name = flag.rstrip("=")
    if not name:
        return None
    pattern = re.compile(rf"^\s+(?:-\w,\s+)?{re.escape(name)}(?=[\s=\[,]|$)")
    for index, line in enumerate(text.splitlines()):
        if pattern.match(line):
            return index
    return None


def describe_callable(handler: Optional[Callable[..., Any]]) -> str:
    """Describe a handler by qualified name, signature and docstring."""
    if handler is None:
        return "Not bound to a command."

    name = getattr(handler, "__qualname__", None) or repr(handler)
    module = getattr(handler, "__module__", None)
    if module:
        name = f"{module}.{name}"

    try:
        signature = str(inspect.signature(handler))
    except (TypeError, ValueError):
        signature = "(...)"

    doc = inspect.getdoc(handler) or "Not documented."
    return f"{name}{signature}\n\n{doc}"


class ManualDescriber:
    """Describer that renders manual pages with man(1).

    Args:
        viewer: Called with each Description to display.
        run: subprocess.run compatible callable. Defaults to subprocess.run.
        width: Manual rendering width. Defaults to 80.
    """

    def __init__(
        self,
        viewer: Callable[[Description], None],
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        width: int = 80,
    ):
        self.viewer = viewer
        self._run = run
        self.width = width

    def render_manual(self, topic: str) -> str:
        """Render a manual page to plain text.

        Raises:
            HelpUnresolved: If man fails or has no entry for the topic.
        """
        env = dict(os.environ, MANPAGER="cat", PAGER="cat", MANWIDTH=str(self.width))
        try:
            result = self._run(["man", topic], capture_output=True, text=True, env=env)
        except OSError as e:
            raise HelpUnresolved(f"Cannot run man: {e}") from None
        if result.returncode != 0 or not result.stdout.strip():
            raise HelpUnresolved(f"No manual entry for {topic}")
        # Drop overstrike bold/underline sequences
        return re.sub(r".\x08", "", result.stdout)

    def show_manual(self, topic: str, flag: Optional[str]) -> None:
        text = self.render_manual(topic)
        line = 0
        if flag:
            found = find_flag_line(text, flag)
            if found is None:
                logger.debug(f"{flag} not found in man {topic}")
            else:
                line = found
        self.viewer(Description(title=f"man {topic}", text=text, line=line))

    def describe_handler(self, handler: Optional[Callable[..., Any]], title: str) -> None:
        self.viewer(Description(title=title, text=describe_callable(handler)))


def describe_key(
    session: Session,
    table: KeyBindingTable,
    chord: str,
    describer: Describer,
    commands: Optional[Mapping[TransitionKind, Callable[..., Any]]] = None,
) -> Binding:
    """Describe what a chord does in an open popup.

    Args:
        session: Open session.
        table: Active key-binding table.
        chord: Chord to describe.
        describer: Viewer for the result.
        commands: Callables behind built-in transitions, for their descriptions.

    Returns:
        The binding that was described.

    Raises:
        HelpUnresolved: If the chord is unbound, or a manual is needed and the
            popup has no manual topic.
    """
    binding = table.lookup(chord)
    if binding is None:
        raise HelpUnresolved(f"{chord} is undefined")

    topic = session.definition.man_page
    kind = binding.kind

    if kind in (TransitionKind.TOGGLE_SWITCH, TransitionKind.SET_OPTION):
        section = "switches" if kind is TransitionKind.TOGGLE_SWITCH else "options"
        event = session.lookup(section, binding.key)
        if not topic:
            raise HelpUnresolved(f"No manual page associated with {session.name}")
        describer.show_manual(topic, event.flag)
    elif kind is TransitionKind.DESCRIBE_KEY:
        if not topic:
            raise HelpUnresolved(f"No manual page associated with {session.name}")
        describer.show_manual(topic, None)
    elif kind is TransitionKind.RUN_ACTION:
        event = session.lookup("actions", binding.key)
        describer.describe_handler(event.handler, f"{event.key} {event.description}")
    else:
        handler = (commands or {}).get(kind)
        describer.describe_handler(handler, binding.description or kind.value)

    logger.debug(f"Described {chord} ({kind.value}) in {session.name}")
    return binding
