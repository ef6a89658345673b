"""Collaborators shared by every popup of a process.

PUBLIC API:
  - Display: Protocol for the surface a popup is drawn on
  - Runtime: Registry, preference store, settings, key table and describer
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .config import Settings, get_settings
from .help import Describer
from .keys import KeyBindingTable
from .layout import Surface, Theme
from .registry import PopupRegistry, default_registry
from .store import PreferenceStore

__all__ = ["Display", "Runtime"]


class Display(Protocol):
    """Where a popup is drawn.

    snapshot() is taken when a popup opens and handed back to restore()
    when it closes, so the display returns to its pre-popup state.
    """

    def snapshot(self) -> Any: ...

    def restore(self, token: Any) -> None: ...

    def show(self, surface: Surface) -> None: ...

    def message(self, text: str) -> None: ...


@dataclass
class Runtime:
    """Process-wide popup collaborators.

    Attributes:
        registry: Popup definitions.
        store: Preference store holding popup variables.
        settings: Global settings, mutated by the common-commands toggle.
        keymap: Global key-binding table popups overlay while open.
        describer: Help viewer, None to disable help.
        theme: Render styles.
    """

    registry: PopupRegistry = field(default_factory=lambda: default_registry)
    store: PreferenceStore = field(default_factory=lambda: PreferenceStore(path=None))
    settings: Settings = field(default_factory=Settings)
    keymap: KeyBindingTable = field(default_factory=KeyBindingTable)
    describer: Optional[Describer] = None
    theme: Theme = field(default_factory=Theme)

    @classmethod
    def from_config(cls, registry: Optional[PopupRegistry] = None, describer: Optional[Describer] = None) -> "Runtime":
        """Build a runtime from the loaded configuration."""
        settings = get_settings()
        return cls(
            registry=registry or default_registry,
            store=PreferenceStore(path=settings.preferences),
            settings=settings,
            describer=describer,
        )
