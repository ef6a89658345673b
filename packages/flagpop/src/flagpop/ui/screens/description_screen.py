"""Help description screen.

PUBLIC API:
  - DescriptionScreen: Read-only, scrollable view of a help Description
"""

from rich.panel import Panel
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Static

from ...help import Description

__all__ = ["DescriptionScreen"]


class DescriptionScreen(ModalScreen[None]):
    """Manual excerpt or handler description.

    Scrolls to the described line on mount. Press q or Esc to close.
    """

    BINDINGS = [
        Binding("q", "back", "Close"),
        Binding("escape", "back", "Back"),
    ]

    def __init__(self, description: Description):
        super().__init__()
        self.description = description

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="description-scroll"):
            yield Static(
                Panel(
                    Text(self.description.text),
                    title=Text(self.description.title),
                    title_align="left",
                    border_style="blue",
                    padding=(0, 1),
                )
            )
        yield Footer()

    def on_mount(self) -> None:
        """Position the view at the described line."""
        if self.description.line:
            # Panel border occupies the first row
            scroll = self.query_one("#description-scroll", VerticalScroll)
            self.call_after_refresh(scroll.scroll_to, y=self.description.line + 1, animate=False)

    def action_back(self) -> None:
        """Return to the popup."""
        self.dismiss(None)
