"""Configuration management for flagpop.

Handles global popup settings from flagpop.toml.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import tomllib

from .paths import CONFIG_PATH, PREFERENCES_PATH

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Process-wide popup settings.

    Attributes:
        use_prefix_argument: Global prefix argument policy.
        show_common_commands: Show the common commands section. Toggled at
            runtime for the rest of the process.
        min_padding: Spaces added to the widest label of a section.
        width: Width budget for layout.
        preferences: Path of the YAML preference file.
    """

    use_prefix_argument: str = "default"
    show_common_commands: bool = False
    min_padding: int = 3
    width: int = 80
    preferences: Path = PREFERENCES_PATH


def _find_config_file() -> Optional[Path]:
    """Find flagpop.toml in current or parent directories, then the user config."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / "flagpop.toml"
        if config_file.exists():
            return config_file

    if CONFIG_PATH.exists():
        return CONFIG_PATH

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


class ConfigManager:
    """Manages configuration for flagpop."""

    def __init__(self, path: Optional[Path] = None):
        self._config_file = path or _find_config_file()
        self.data = _load_config(self._config_file)
        self._default_config = self.data.get("default", {})
        self.settings = Settings()

        defaults = self._default_config
        if "use_prefix_argument" in defaults:
            self.settings.use_prefix_argument = str(defaults["use_prefix_argument"])
        if "show_common_commands" in defaults:
            self.settings.show_common_commands = bool(defaults["show_common_commands"])
        if "min_padding" in defaults:
            self.settings.min_padding = max(0, int(defaults["min_padding"]))
        if "width" in defaults:
            self.settings.width = max(1, int(defaults["width"]))
        if "preferences" in defaults:
            self.settings.preferences = Path(defaults["preferences"]).expanduser()

        if self._config_file:
            logger.debug(f"Loaded configuration from {self._config_file}")

    @property
    def config_file(self) -> Optional[Path]:
        """Path the configuration was read from, if any."""
        return self._config_file


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_settings() -> Settings:
    """Get the process-wide settings."""
    return get_config_manager().settings
