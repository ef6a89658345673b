"""Textual application hosting a single popup.

PUBLIC API:
  - PopupApp: App that opens one popup and exits with the action's result
"""

import logging
from typing import Any, Optional

from textual.app import App
from textual.binding import Binding

from ..help import Description, ManualDescriber
from ..runtime import Runtime
from ..types import PrefixArg
from .screens import DescriptionScreen, PopupScreen

__all__ = ["PopupApp"]

logger = logging.getLogger(__name__)


class PopupApp(App[Any]):
    """Run one popup to completion.

    The app exits when the popup closes. Its return value is whatever the
    action that closed it returned (None for quit or set-defaults).

    Args:
        popup: Popup name.
        prefix_arg: Prefix argument for the invocation policy.
        runtime: Shared collaborators. Defaults to Runtime.from_config() with
            a manual-page describer shown in a DescriptionScreen.
    """

    TITLE = "flagpop"
    ENABLE_COMMAND_PALETTE = False

    # C-c begins the set-defaults chord; keep textual's quit from seeing it
    BINDINGS = [
        Binding("ctrl+c", "popup_key('ctrl+c')", show=False, priority=True),
        Binding("ctrl+q", "popup_key('ctrl+q')", show=False, priority=True),
    ]

    def __init__(self, popup: str, prefix_arg: Optional[PrefixArg] = None, runtime: Optional[Runtime] = None):
        super().__init__()
        self.popup_name = popup
        self.prefix_arg = prefix_arg
        self.runtime = runtime or Runtime.from_config(describer=ManualDescriber(viewer=self.show_description))

    def on_mount(self) -> None:
        self.push_screen(PopupScreen(self.runtime, self.popup_name, self.prefix_arg), callback=self._popup_closed)

    def show_description(self, description: Description) -> None:
        """Show help over the popup."""
        self.push_screen(DescriptionScreen(description))

    def action_popup_key(self, key: str) -> None:
        """Forward an app-level key to the popup screen."""
        screen = self.screen
        if isinstance(screen, PopupScreen):
            screen.feed_key(key)

    def _popup_closed(self, result: Any) -> None:
        logger.debug(f"Popup {self.popup_name} closed")
        self.exit(result)
