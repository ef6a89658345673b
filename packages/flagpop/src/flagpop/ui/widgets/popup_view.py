"""Popup view widget for displaying a rendered session.

PUBLIC API:
  - PopupView: Static showing a Surface, reporting clicks by cell
"""

from textual import events
from textual.message import Message
from textual.widgets import Static

from ...layout import Surface

__all__ = ["PopupView"]


class PopupView(Static):
    """Rendered popup surface.

    Clicks are reported as (row, column) cells of the surface so the
    dispatcher can map them to buttons.
    """

    DEFAULT_CSS = """
    PopupView {
        height: auto;
        padding: 0 1;
    }
    """

    class Clicked(Message):
        """A cell of the surface was clicked."""

        def __init__(self, row: int, column: int) -> None:
            self.row = row
            self.column = column
            super().__init__()

    def show_surface(self, surface: Surface) -> None:
        """Update displayed content.

        Args:
            surface: Surface to draw.
        """
        self.update(surface.render())

    def on_click(self, event: events.Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        event.stop()
        self.post_message(self.Clicked(offset.y, offset.x))
