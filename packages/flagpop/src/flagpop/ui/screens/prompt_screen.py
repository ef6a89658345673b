"""Option value prompt.

PUBLIC API:
  - PromptScreen: Modal input returning the entered value, or None
"""

from typing import Callable, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static

__all__ = ["PromptScreen"]


class PromptScreen(ModalScreen[Optional[str]]):
    """Read one option value.

    Enter submits, Esc cancels (the option stays as it was), C-g cancels and
    aborts the whole popup through on_abort.

    Args:
        prompt: Prompt text, usually the option flag.
        value: Value to pre-fill.
        on_abort: Called after C-g dismisses the prompt.
    """

    DEFAULT_CSS = """
    PromptScreen {
        align: center bottom;
    }
    PromptScreen > Vertical {
        height: auto;
        border: round $accent;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+g", "abort", "Abort", priority=True),
    ]

    def __init__(self, prompt: str, value: Optional[str] = None, on_abort: Optional[Callable[[], None]] = None):
        super().__init__()
        self.prompt = prompt
        self.value = value or ""
        self._on_abort = on_abort

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self.prompt, markup=False)
            yield Input(value=self.value, id="prompt-input")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        """Dismiss without a value."""
        self.dismiss(None)

    def action_abort(self) -> None:
        """Dismiss and abort the popup."""
        self.dismiss(None)
        if self._on_abort is not None:
            self._on_abort()
