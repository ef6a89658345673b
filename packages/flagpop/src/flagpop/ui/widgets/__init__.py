"""Textual widgets for flagpop popups.

PUBLIC API:
  - PopupView: Rendered popup surface with click reporting
"""

from .popup_view import PopupView

__all__ = ["PopupView"]
