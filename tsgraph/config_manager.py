"""Configuration manager for tsgraph using TOML files.

Settings are read from two optional files, later ones overriding earlier ones:

1. ``$TSGRAPH_HOME/config.toml`` (``~/.tsgraph/config.toml`` by default)
2. ``tsgraph.toml`` in the root of the project being mapped

Both files keep their settings under a ``[tsgraph]`` table::

    [tsgraph]
    log_level = "INFO"
    extensions = [".ts", ".tsx"]
    skip_dirs = ["node_modules", "dist"]
    tsconfig = "tsconfig.build.json"
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)

BASE_DIR = Path(os.environ.get("TSGRAPH_HOME", str(Path.home() / ".tsgraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"
PROJECT_CONFIG_NAME = "tsgraph.toml"
SECTION = "tsgraph"

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "extensions": [".ts", ".tsx", ".mts", ".cts"],
    "skip_dirs": [
        "node_modules", ".git", "dist", "build", "coverage", "out",
        ".next", ".turbo", ".cache", ".tsgraph",
    ],
    "tsconfig": "tsconfig.json",
}


def _read_section(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    section = data.get(SECTION, {})
    unknown = set(section) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning("Unknown settings in %s: %s", path, ", ".join(sorted(unknown)))
    return {k: v for k, v in section.items() if k in DEFAULT_CONFIG}


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load the user-level configuration merged over the defaults."""
    config = dict(DEFAULT_CONFIG)
    config.update(_read_section(config_file or CONFIG_FILE))
    return config


def load_project_config(project_root: Path, base: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Overlay ``tsgraph.toml`` from *project_root* on *base* (user config by default)."""
    config = dict(base if base is not None else load_config())
    config.update(_read_section(Path(project_root) / PROJECT_CONFIG_NAME))
    return config


def save_config(values: Dict[str, Any], config_file: Optional[Path] = None) -> Path:
    """Write *values* into the ``[tsgraph]`` table of the user config file.

    Other tables in the file are preserved.
    """
    target = config_file or CONFIG_FILE
    data: Dict[str, Any] = {}
    if target.is_file():
        with open(target, "r", encoding="utf-8") as f:
            data = toml.load(f)
    section = data.setdefault(SECTION, {})
    for key, value in values.items():
        if key not in DEFAULT_CONFIG:
            raise KeyError(f"Unknown setting '{key}'")
        section[key] = value
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        toml.dump(data, f)
    return target
