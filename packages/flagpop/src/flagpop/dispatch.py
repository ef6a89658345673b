"""Dispatch state machine for an open popup.

A Dispatcher owns one Session from open to close:

    CLOSED --open()--> OPEN --set_option()--> AWAITING_OPTION_INPUT
                        |  <--complete/cancel--'
                        '--quit()/run_action()/set_defaults()--> CLOSED

Every mutation re-renders the session before the next key is accepted.
Keys arrive through press(), which resolves chords against the key-binding
table and dispatches on the binding's TransitionKind.

PUBLIC API:
  - Dispatcher: Modal key dispatch over one session
  - OptionRequest: Pending value input for one option
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .context import Invocation, invoking
from .errors import HelpUnresolved, PopupStateError, ReaderCancelled, UnboundKey
from .help import describe_key
from .keys import QUIT_CHARACTER, Binding, popup_bindings
from .layout import Surface, layout
from .runtime import Display, Runtime
from .session import Event, Session
from .types import DispatchState, PrefixArg, Section, TransitionKind, ValueReader

__all__ = ["Dispatcher", "OptionRequest"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionRequest:
    """Value input pending for an option.

    Attributes:
        key: Option key.
        flag: Option flag.
        prompt: Prompt to show.
        initial: Retained value to pre-fill.
        reader: The option's value reader.
    """

    key: str
    flag: str
    prompt: str
    initial: Optional[str]
    reader: ValueReader


class Dispatcher:
    """Modal key dispatch over one session.

    Args:
        session: Session to drive. Owned by this dispatcher until it closes.
        runtime: Shared collaborators (store, settings, key table, describer).
        display: Surface the popup is drawn on.
        option_input: When given, receives OptionRequests instead of the
            reader being called inline; the caller must then call
            complete_option() or cancel_option().
    """

    def __init__(
        self,
        session: Session,
        runtime: Runtime,
        display: Display,
        option_input: Optional[Callable[[OptionRequest], None]] = None,
    ):
        self.session = session
        self.runtime = runtime
        self.display = display
        self.state = DispatchState.CLOSED
        self.focus: Optional[tuple[Section, str]] = None
        self.surface: Optional[Surface] = None
        self._option_input = option_input
        self._pending_option: Optional[OptionRequest] = None
        self._pending_chord: list[str] = []
        self._describing = False
        self._prefix_arg: Optional[PrefixArg] = None
        self._snapshot: Any = None
        self._keymap_token: Optional[int] = None

        self._transitions: dict[TransitionKind, Callable[[Binding], Any]] = {
            TransitionKind.TOGGLE_SWITCH: lambda b: self.toggle_switch(b.key),
            TransitionKind.SET_OPTION: lambda b: self.set_option(b.key),
            TransitionKind.RUN_ACTION: lambda b: self.run_action(b.key),
            TransitionKind.QUIT: lambda b: self.quit(),
            TransitionKind.DESCRIBE_KEY: lambda b: self.start_describe(),
            TransitionKind.SET_DEFAULTS: lambda b: self.set_defaults(),
            TransitionKind.SAVE_DEFAULTS: lambda b: self.save_defaults(),
            TransitionKind.TOGGLE_COMMON_COMMANDS: lambda b: self.toggle_common_commands(),
            TransitionKind.UNIVERSAL_ARGUMENT: lambda b: self.universal_argument(),
            TransitionKind.NEXT_BUTTON: lambda b: self.next_button(),
            TransitionKind.PREVIOUS_BUTTON: lambda b: self.previous_button(),
            TransitionKind.PUSH_BUTTON: lambda b: self.push_button(),
        }

    @property
    def is_open(self) -> bool:
        return self.state is not DispatchState.CLOSED

    @property
    def pending_option(self) -> Optional[OptionRequest]:
        return self._pending_option

    @property
    def prefix_pending(self) -> bool:
        """True while a universal argument waits for the next command."""
        return self._prefix_arg is not None

    # Lifecycle

    def open(self) -> Surface:
        """Open the popup: capture the display, bind keys and render.

        Raises:
            PopupStateError: If this dispatcher is already open.
        """
        if self.state is not DispatchState.CLOSED:
            raise PopupStateError(f"Popup {self.session.name} is already open")
        self._snapshot = self.display.snapshot()
        self._keymap_token = self.runtime.keymap.push(popup_bindings(self.session))
        self.state = DispatchState.OPEN
        logger.debug(f"Opened popup {self.session.name}")
        return self.render()

    def render(self) -> Surface:
        """Lay out the session and show it, keeping the current focus."""
        settings = self.runtime.settings
        surface = layout(
            self.session,
            width=settings.width,
            min_padding=settings.min_padding,
            show_common_commands=settings.show_common_commands,
            focus=self.focus,
            theme=self.runtime.theme,
        )
        self.focus = surface.focus
        self.surface = surface
        self.display.show(surface)
        return surface

    def quit(self) -> None:
        """Discard the session and restore the pre-popup display.

        Works from any open state, including while an option value is being
        read; a value arriving afterwards is discarded.
        """
        if self.state is DispatchState.CLOSED:
            return
        logger.debug(f"Quit popup {self.session.name}")
        self._close()

    def _close(self) -> None:
        self.state = DispatchState.CLOSED
        self._pending_option = None
        self._pending_chord = []
        self._describing = False
        self._prefix_arg = None
        if self._keymap_token is not None:
            self.runtime.keymap.pop(self._keymap_token)
            self._keymap_token = None
        self.display.restore(self._snapshot)
        self._snapshot = None

    def _require_open(self) -> None:
        if self.state is DispatchState.CLOSED:
            raise PopupStateError(f"Popup {self.session.name} is not open")
        if self.state is DispatchState.AWAITING_OPTION_INPUT:
            flag = self._pending_option.flag if self._pending_option else "an option"
            raise PopupStateError(f"Waiting for a value for {flag}")

    def _action_bound(self, key: str) -> Optional[Event]:
        return next((event for event in self.session.actions if event.key == key), None)

    def _take_prefix(self) -> Optional[PrefixArg]:
        prefix, self._prefix_arg = self._prefix_arg, None
        return prefix

    # Key input

    def press(self, key: str) -> Any:
        """Feed one key press.

        Keys that begin a longer chord are held until the chord completes.
        Unbound chords go through action dispatch, so the quit character still
        quits and anything else raises UnboundKey.

        Args:
            key: Key name ("a", "ctrl+c", "?").

        Returns:
            The action handler's result when an action ran, else None.

        Raises:
            UnboundKey: If the chord is bound to nothing.
            PopupStateError: If the popup is closed, or a value is being read
                and the key is not the quit key.
        """
        if self.state is DispatchState.CLOSED:
            raise PopupStateError(f"Popup {self.session.name} is not open")

        chord = " ".join(self._pending_chord + [key])
        binding = self.runtime.keymap.lookup(chord)
        if binding is None and self.runtime.keymap.is_prefix(chord):
            self._pending_chord.append(key)
            return None
        self._pending_chord = []

        if self.state is DispatchState.AWAITING_OPTION_INPUT:
            if binding is not None and binding.kind is TransitionKind.QUIT:
                return self.quit()
            if binding is None and chord == QUIT_CHARACTER and not self._action_bound(chord):
                return self.quit()
            self._require_open()

        if self._describing:
            self._describing = False
            return self.describe_key(chord)

        if binding is None:
            return self.run_action(chord)
        return self.dispatch(binding)

    def dispatch(self, binding: Binding) -> Any:
        """Perform the transition a binding names."""
        logger.debug(f"{self.session.name}: {binding.chord} -> {binding.kind.value}")
        result = self._transitions[binding.kind](binding)
        if binding.kind is not TransitionKind.UNIVERSAL_ARGUMENT:
            self._prefix_arg = None
        return result

    # Transitions

    def toggle_switch(self, key: str) -> None:
        """Flip a switch.

        Raises:
            UnboundKey: If no switch has this key.
        """
        self._require_open()
        event = self.session.lookup("switches", key)
        event.enabled = not event.enabled
        self.render()

    def set_option(self, key: str) -> None:
        """Disable an active option, or read a value for an inactive one.

        Raises:
            UnboundKey: If no option has this key.
        """
        request = self.begin_option(key)
        if request is None:
            return
        if self._option_input is not None:
            self._option_input(request)
            return

        try:
            value = request.reader(request.prompt, request.initial)
        except ReaderCancelled:
            self.cancel_option()
            return
        except Exception:
            self.cancel_option()
            raise
        self.complete_option(value)

    def begin_option(self, key: str) -> Optional[OptionRequest]:
        """Start setting an option.

        Returns:
            None if the option was active and is now disabled, otherwise the
            request to satisfy with complete_option() or cancel_option().
        """
        self._require_open()
        event = self.session.lookup("options", key)
        if event.enabled:
            event.enabled = False
            self.render()
            return None

        flag = event.flag or ""
        prompt = flag if flag.endswith("=") else f"{flag}: "
        request = OptionRequest(key=key, flag=flag, prompt=prompt, initial=event.value, reader=event.handler)
        self._pending_option = request
        self.state = DispatchState.AWAITING_OPTION_INPUT
        logger.debug(f"{self.session.name}: reading value for {flag}")
        return request

    def complete_option(self, value: Optional[str]) -> None:
        """Finish a pending option with the value read.

        An empty value leaves the option disabled. Values arriving after the
        popup was quit are discarded.
        """
        if self.state is DispatchState.CLOSED:
            logger.debug(f"Discarding option value for closed popup {self.session.name}")
            return
        request = self._pending_option
        if self.state is not DispatchState.AWAITING_OPTION_INPUT or request is None:
            raise PopupStateError("No option value is being read")

        event = self.session.lookup("options", request.key)
        if value:
            event.enabled = True
            event.value = value
        self._pending_option = None
        self.state = DispatchState.OPEN
        self.render()

    def cancel_option(self) -> None:
        """Abandon a pending option without changing it."""
        if self.state is not DispatchState.AWAITING_OPTION_INPUT:
            return
        self._pending_option = None
        self.state = DispatchState.OPEN
        self.render()

    def run_action(self, key: str) -> Any:
        """Close the popup and run an action with the current arguments.

        Raises:
            UnboundKey: If no action has this key and it is not the quit
                character.
        """
        self._require_open()
        event = self._action_bound(key)
        if event is None:
            if key == QUIT_CHARACTER:
                return self.quit()
            raise UnboundKey(key, "actions")

        invocation = Invocation(
            popup=self.session.name,
            args=self.session.flat_args(),
            prefix_arg=self._take_prefix(),
        )
        self._close()
        logger.info(f"Running {self.session.name} action {key} ({event.description}) with {invocation.args}")
        with invoking(invocation):
            return event.handler()

    def set_defaults(self, keep_open: Optional[bool] = None) -> None:
        """Store the current arguments as a transient override.

        Args:
            keep_open: Keep the popup open. Defaults to whether a universal
                argument is pending.
        """
        self._persist(durable=False, keep_open=keep_open)

    def save_defaults(self, keep_open: Optional[bool] = None) -> None:
        """Store the current arguments in the preference file.

        Args:
            keep_open: Keep the popup open. Defaults to whether a universal
                argument is pending.
        """
        self._persist(durable=True, keep_open=keep_open)

    def _persist(self, durable: bool, keep_open: Optional[bool]) -> None:
        self._require_open()
        keep = self._take_prefix() is not None if keep_open is None else keep_open
        variable = self.session.definition.variable
        value = self.session.persisted_form()
        if durable:
            self.runtime.store.save(variable, value)
            self.display.message(f"Saved {variable}")
        else:
            self.runtime.store.set(variable, value)
            self.display.message(f"Set {variable}")
        if keep:
            self.render()
        else:
            self._close()

    def toggle_common_commands(self) -> None:
        """Show or hide the common commands section for this process."""
        self._require_open()
        settings = self.runtime.settings
        settings.show_common_commands = not settings.show_common_commands
        self.render()

    def universal_argument(self) -> None:
        """Mark a universal argument for the next command.

        Each further press multiplies the pending argument by four.
        """
        self._require_open()
        pending = self._prefix_arg
        self._prefix_arg = PrefixArg(pending.value * 4) if pending else PrefixArg()
        presses = round(math.log(self._prefix_arg.value, 4))
        self.display.message(" ".join(["C-u"] * presses) + "-")

    def start_describe(self) -> None:
        """Describe the next chord pressed."""
        self._require_open()
        if self.runtime.describer is None:
            raise HelpUnresolved("Help is not available")
        self._describing = True
        self.display.message("Describe key (? for the manual): ")

    def describe_key(self, chord: str) -> Binding:
        """Describe what a chord does.

        Raises:
            HelpUnresolved: If the chord is unbound or cannot be described.
        """
        self._require_open()
        self._describing = False
        if self.runtime.describer is None:
            raise HelpUnresolved("Help is not available")
        return describe_key(
            self.session,
            self.runtime.keymap,
            chord,
            self.runtime.describer,
            commands=self._commands(),
        )

    def _commands(self) -> dict[TransitionKind, Callable[..., Any]]:
        return {
            TransitionKind.QUIT: self.quit,
            TransitionKind.SET_DEFAULTS: self.set_defaults,
            TransitionKind.SAVE_DEFAULTS: self.save_defaults,
            TransitionKind.TOGGLE_COMMON_COMMANDS: self.toggle_common_commands,
            TransitionKind.UNIVERSAL_ARGUMENT: self.universal_argument,
            TransitionKind.NEXT_BUTTON: self.next_button,
            TransitionKind.PREVIOUS_BUTTON: self.previous_button,
            TransitionKind.PUSH_BUTTON: self.push_button,
        }

    # Button navigation

    def _move_focus(self, step: int) -> None:
        self._require_open()
        regions = self.surface.regions if self.surface else []
        if not regions:
            return
        keys = [(region.section, region.key) for region in regions]
        index = keys.index(self.focus) if self.focus in keys else 0
        self.focus = keys[(index + step) % len(keys)]
        self.render()

    def next_button(self) -> None:
        """Focus the next button, wrapping around."""
        self._move_focus(1)

    def previous_button(self) -> None:
        """Focus the previous button, wrapping around."""
        self._move_focus(-1)

    def push_button(self) -> Any:
        """Activate the focused button."""
        self._require_open()
        if self.focus is None:
            return None
        section, key = self.focus
        if section == "switches":
            return self.toggle_switch(key)
        if section == "options":
            return self.set_option(key)
        if section == "actions":
            return self.run_action(key)
        binding = self.runtime.keymap.lookup(key)
        if binding is None:
            raise UnboundKey(key)
        return self.dispatch(binding)

    def click(self, row: int, column: int) -> Any:
        """Focus and activate the button at a cell, if any."""
        self._require_open()
        if self.surface is None:
            return None
        region = self.surface.region_at(row, column)
        if region is None:
            return None
        self.focus = (region.section, region.key)
        return self.push_button()
