"""Popup screen - a live session drawn in textual.

PUBLIC API:
  - PopupScreen: Screen implementing the Display protocol for one popup
"""

import logging
from functools import partial
from typing import Any, Optional

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Static

from ...definition import read_string
from ...dispatch import Dispatcher, OptionRequest
from ...errors import HelpUnresolved, PolicyMisuseError, PopupStateError, ReaderCancelled, UnboundKey
from ...invocation import invoke_popup
from ...layout import Surface
from ...runtime import Runtime
from ...types import PrefixArg
from ..widgets import PopupView
from .prompt_screen import PromptScreen

__all__ = ["PopupScreen"]

logger = logging.getLogger(__name__)

# Reported to the user; the popup stays open
_NON_FATAL = (UnboundKey, HelpUnresolved, PopupStateError)


def chord_key(event: events.Key) -> str:
    """Get the key name the dispatcher expects for a key event.

    Printable keys use their character ("a", "A", "?", "-"); everything else
    uses textual's key name ("ctrl+c", "tab"). Esc is read as C-g.
    """
    if event.is_printable and event.character and len(event.character) == 1:
        return event.character
    if event.key == "escape":
        return "ctrl+g"
    return event.key


class PopupScreen(Screen[Any]):
    """Screen showing one popup.

    The screen is the popup's Display: restoring the display dismisses the
    screen with the result of whatever closed the popup.

    Args:
        runtime: Shared collaborators.
        popup: Name of the popup to invoke.
        prefix_arg: Prefix argument for the invocation policy.
    """

    DEFAULT_CSS = """
    PopupScreen {
        align: left bottom;
    }
    #screen-title {
        padding: 0 1;
    }
    #popup-message {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    # Focus navigation keys would otherwise move textual focus
    BINDINGS = [
        Binding("tab", "popup_key('tab')", show=False, priority=True),
        Binding("shift+tab", "popup_key('shift+tab')", show=False, priority=True),
    ]

    def __init__(self, runtime: Runtime, popup: str, prefix_arg: Optional[PrefixArg] = None):
        super().__init__()
        self.runtime = runtime
        self.popup_name = popup
        self.prefix_arg = prefix_arg
        self.dispatcher: Optional[Dispatcher] = None
        self._restored = False

    def compose(self) -> ComposeResult:
        yield Static(f"[bold]{self.popup_name}[/bold]", id="screen-title")
        yield PopupView(id="popup-view")
        yield Static("", id="popup-message", markup=False)

    def on_mount(self) -> None:
        """Apply the invocation policy and open the popup."""
        try:
            outcome = invoke_popup(
                self.popup_name,
                self.prefix_arg,
                self.runtime,
                display=self,
                option_input=self._request_option,
            )
        except PolicyMisuseError as e:
            logger.error(str(e))
            self.app.exit(return_code=1, message=str(e))
            return

        if isinstance(outcome, Dispatcher):
            self.dispatcher = outcome
        else:
            self.dismiss(outcome)

    # Display protocol

    def snapshot(self) -> Any:
        return None

    def restore(self, token: Any) -> None:
        self._restored = True

    def show(self, surface: Surface) -> None:
        self.query_one("#popup-view", PopupView).show_surface(surface)

    def message(self, text: str) -> None:
        self.query_one("#popup-message", Static).update(text)

    # Input

    def on_key(self, event: events.Key) -> None:
        """Route every key into the dispatcher."""
        event.stop()
        event.prevent_default()
        self.feed_key(chord_key(event))

    def action_popup_key(self, key: str) -> None:
        self.feed_key(key)

    def feed_key(self, key: str) -> None:
        """Dispatch one key and close the screen if the popup closed."""
        if self.dispatcher is None:
            return
        self.message("")
        self._run(self.dispatcher.press, key)

    def on_popup_view_clicked(self, message: PopupView.Clicked) -> None:
        if self.dispatcher is None:
            return
        self._run(self.dispatcher.click, message.row, message.column)

    def _run(self, transition, *args) -> None:
        try:
            result = transition(*args)
        except _NON_FATAL as e:
            self.app.bell()
            self.notify(str(e), severity="warning")
            self.message(str(e))
            return
        self._finish(result)

    def _finish(self, result: Any = None) -> None:
        if self._restored:
            self._restored = False
            self.dismiss(result)

    # Option values

    def _request_option(self, request: OptionRequest) -> None:
        """Collect an option value without blocking the event loop."""
        if request.reader is read_string:
            self.app.push_screen(
                PromptScreen(request.prompt, request.initial, on_abort=self._abort),
                callback=self._option_entered,
            )
        else:
            self.run_worker(partial(self._read_in_thread, request), thread=True, group="option-reader")

    def _read_in_thread(self, request: OptionRequest) -> None:
        try:
            value = request.reader(request.prompt, request.initial)
        except ReaderCancelled:
            self.app.call_from_thread(self._option_entered, None)
            return
        except Exception as e:
            logger.error(f"Reader for {request.flag} failed: {e}")
            self.app.call_from_thread(self._option_failed, str(e))
            return
        self.app.call_from_thread(self._option_entered, value)

    def _option_entered(self, value: Optional[str]) -> None:
        if self.dispatcher is None:
            return
        if value is None:
            self._run(self.dispatcher.cancel_option)
        else:
            self._run(self.dispatcher.complete_option, value)

    def _option_failed(self, error: str) -> None:
        self._option_entered(None)
        self.app.bell()
        self.message(error)

    def _abort(self) -> None:
        if self.dispatcher is not None:
            self._run(self.dispatcher.quit)
