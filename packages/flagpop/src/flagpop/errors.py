"""Popup engine exceptions.

Definition-time errors are fatal and surface to the popup author. Key, help
and state errors are reported to the user and leave the session open.

PUBLIC API:
  - PopupError: Base exception for all popup operations
  - InvalidDefinition: Malformed popup configuration or unknown popup/class
  - UnboundKey: Pressed key matches no event of the requested class
  - PolicyMisuseError: Prefix argument supplied while the policy is disabled
  - HelpUnresolved: Help lookup on an unbound chord or missing manual topic
  - PopupStateError: Transition attempted in the wrong dispatcher state
  - ReaderCancelled: Value reader was cancelled by the user
"""

__all__ = [
    "PopupError",
    "InvalidDefinition",
    "UnboundKey",
    "PolicyMisuseError",
    "HelpUnresolved",
    "PopupStateError",
    "ReaderCancelled",
]


class PopupError(Exception):
    """Base exception for all popup operations."""

    pass


class InvalidDefinition(PopupError):
    """Raised when a popup definition is malformed or cannot be found."""

    pass


class UnboundKey(PopupError):
    """Raised when a key is not bound to any event of the requested class.

    Attributes:
        key: The offending key or chord.
        section: Event class that was searched, or None for the whole table.
    """

    def __init__(self, key: str, section: str | None = None):
        self.key = key
        self.section = section
        if section:
            what = section[:-1] if section.endswith("s") else section
            message = f"{key} isn't bound to any {what}"
        else:
            message = f"{key} is undefined"
        super().__init__(message)


class PolicyMisuseError(PopupError):
    """Raised when a prefix argument cannot be honoured by the current policy."""

    pass


class HelpUnresolved(PopupError):
    """Raised when help is requested for something that cannot be described."""

    pass


class PopupStateError(PopupError):
    """Raised when a transition is attempted in the wrong state."""

    pass


class ReaderCancelled(PopupError):
    """Raised by a value reader when the user abandons input."""

    pass
