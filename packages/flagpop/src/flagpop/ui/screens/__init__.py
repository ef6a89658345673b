"""Textual screens for flagpop popups.

PUBLIC API:
  - PopupScreen: Live popup session
  - PromptScreen: Option value input
  - DescriptionScreen: Help view for keys and manual pages
"""

from .popup_screen import PopupScreen
from .prompt_screen import PromptScreen
from .description_screen import DescriptionScreen

__all__ = [
    "PopupScreen",
    "PromptScreen",
    "DescriptionScreen",
]
