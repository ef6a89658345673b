"""Preference storage for popup variables.

Each popup is bound to a named variable holding its default arguments.
Setting a variable only overrides it for the rest of the process; saving
writes it to the YAML preference file as well.

PUBLIC API:
  - PreferenceStore: Load/save popup variables from YAML
"""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .paths import PREFERENCES_PATH
from .types import PersistedValue

__all__ = ["PreferenceStore"]

logger = logging.getLogger(__name__)


def _to_yaml(value: PersistedValue):
    """Convert tuples to lists so safe_dump accepts structured pairs."""
    if value is None:
        return None
    return [list(item) if isinstance(item, tuple) else item for item in value]


def _from_yaml(value) -> PersistedValue:
    if value is None:
        return None
    if not isinstance(value, list):
        logger.warning(f"Ignoring malformed preference value {value!r}")
        return None
    return [tuple(item) if isinstance(item, list) else item for item in value]


@dataclass
class PreferenceStore:
    """Load and save popup variables.

    A store without a path keeps everything in memory.
    """

    path: Optional[Path] = field(default_factory=lambda: PREFERENCES_PATH)
    values: dict[str, PersistedValue] = field(default_factory=dict)
    overrides: dict[str, PersistedValue] = field(default_factory=dict)

    def __post_init__(self):
        self.load()

    def load(self):
        """Load durable values from the YAML file."""
        self.values = {}
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, IOError) as e:
            logger.warning(f"Could not read preferences from {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed preferences file {self.path}")
            return
        self.values = {str(name): _from_yaml(value) for name, value in data.items()}

    def get(self, name: str) -> PersistedValue:
        """Get the current value of a variable.

        Returns:
            The transient override if one was set, else the saved value, else
            None when the variable was never set.
        """
        if name in self.overrides:
            return self.overrides[name]
        return self.values.get(name)

    def set(self, name: str, value: PersistedValue) -> None:
        """Override a variable for the rest of the process."""
        self.overrides[name] = value
        logger.info(f"Set {name} to {value}")

    def save(self, name: str, value: PersistedValue) -> None:
        """Set a variable and write it to the preference file."""
        self.overrides.pop(name, None)
        self.values[name] = value
        self._write()
        logger.info(f"Saved {name} as {value}")

    def _write(self):
        """Save values to YAML file (atomic write)."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)

        data = {name: _to_yaml(value) for name, value in self.values.items()}

        # Write to temp file first, then rename (atomic)
        with tempfile.NamedTemporaryFile(mode="w", dir=self.path.parent, delete=False, suffix=".yaml") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
            temp_path = Path(f.name)

        temp_path.rename(self.path)
