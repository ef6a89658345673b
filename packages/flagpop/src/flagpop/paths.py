"""Filesystem locations used by flagpop.

PUBLIC API:
  - CONFIG_DIR: Per-user configuration directory
  - CONFIG_PATH: Per-user configuration file
  - PREFERENCES_PATH: Durable popup argument preferences
"""

import os
from pathlib import Path

__all__ = ["CONFIG_DIR", "CONFIG_PATH", "PREFERENCES_PATH"]

# XDG config directory for Linux
CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / "flagpop"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PREFERENCES_PATH = CONFIG_DIR / "preferences.yaml"
