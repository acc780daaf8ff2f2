"""Runtime settings resolved from the environment and the user config file."""

from __future__ import annotations

import os
from typing import FrozenSet

from .config_manager import BASE_DIR, CONFIG_FILE, load_config

__all__ = [
    "BASE_DIR", "CONFIG_FILE", "LOG_LEVEL", "SUPPORTED_EXTENSIONS", "SKIP_DIRS", "TSCONFIG_NAME",
]

_toml_config = load_config()

LOG_LEVEL: str = os.environ.get("TSGRAPH_LOG_LEVEL", _toml_config["log_level"]).upper()
SUPPORTED_EXTENSIONS: FrozenSet[str] = frozenset(_toml_config["extensions"])
SKIP_DIRS: FrozenSet[str] = frozenset(_toml_config["skip_dirs"])
TSCONFIG_NAME: str = _toml_config["tsconfig"]
