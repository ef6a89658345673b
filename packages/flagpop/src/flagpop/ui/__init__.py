"""Textual front-end for flagpop popups.

PUBLIC API:
  - PopupApp: App that runs one popup
  - show_popup: Launch a popup inside a tmux popup window
"""

from .app import PopupApp
from .popup import show_popup

__all__ = ["PopupApp", "show_popup"]
