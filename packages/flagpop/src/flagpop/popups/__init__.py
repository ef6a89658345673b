"""Bundled popup definitions.

PUBLIC API:
  - register_builtin_popups: Define every bundled popup in a registry
"""

from ..registry import PopupRegistry, default_registry
from .git import register_git_popups

__all__ = ["register_builtin_popups"]


def register_builtin_popups(registry: PopupRegistry = default_registry) -> None:
    """Define the bundled popups (log, commit, fetch, push, rebase)."""
    register_git_popups(registry)
