"""Classify module specifiers and read tsconfig path aliases.

Classification is purely syntactic; it never touches the filesystem.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

NODE_BUILT_INS = frozenset({
    "assert", "buffer", "child_process", "cluster", "crypto", "dgram", "dns",
    "domain", "events", "fs", "http", "https", "net", "os", "path", "punycode",
    "querystring", "readline", "stream", "string_decoder", "tls", "tty", "url",
    "util", "v8", "vm", "zlib",
})

# bare, scoped and sub-path package names: react, @types/node, lodash/fp
_NPM_PATTERN = re.compile(r"^(?:@[a-zA-Z0-9-]+/)?[a-zA-Z0-9-]+(?:/[a-zA-Z0-9-_./]+)?$")
_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:\\")

# strings are matched first so comment markers inside them survive
_JSONC_NOISE = re.compile(
    r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/|,(?=\s*[}\]])',
    re.DOTALL,
)

TSCONFIG_FILE = "tsconfig.json"


class ImportPathType(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    ALIAS = "alias"
    NODE_BUILT_IN = "node-built-in"
    NPM = "npm"


class ModuleCategory(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


def get_import_path_type(specifier: str) -> ImportPathType:
    if not specifier:
        raise ValueError("Module specifier cannot be empty")
    if specifier.startswith(("./", "../")) or specifier == ".":
        return ImportPathType.RELATIVE
    if specifier.startswith("/") or _WINDOWS_DRIVE.match(specifier):
        return ImportPathType.ABSOLUTE
    if specifier.startswith("@/"):
        return ImportPathType.ALIAS
    if specifier.startswith("node:") or specifier in NODE_BUILT_INS:
        return ImportPathType.NODE_BUILT_IN
    if _NPM_PATTERN.match(specifier):
        return ImportPathType.NPM
    raise ValueError(f"Unrecognized import type for module specifier: {specifier}")


def get_module_category(specifier: str) -> ModuleCategory:
    if get_import_path_type(specifier) in (ImportPathType.NPM, ImportPathType.NODE_BUILT_IN):
        return ModuleCategory.EXTERNAL
    return ModuleCategory.INTERNAL


def is_external_specifier(specifier: str) -> bool:
    """Like ``get_module_category`` but never raises; unknown shapes count as internal."""
    try:
        return get_module_category(specifier) is ModuleCategory.EXTERNAL
    except ValueError:
        return False


def is_path_specifier(specifier: str) -> bool:
    """True for relative, absolute and ``@/`` alias specifiers, which must name a project file."""
    return (
        specifier.startswith(("./", "../", "/", "@/"))
        or specifier == "."
        or bool(_WINDOWS_DRIVE.match(specifier))
    )


def _strip_jsonc(text: str) -> str:
    return _JSONC_NOISE.sub(lambda m: m.group(1) or "", text)


def load_tsconfig(base_path: Path, file_name: str = TSCONFIG_FILE) -> Optional[Dict[str, Any]]:
    """Parse ``tsconfig.json`` (or *file_name*) in *base_path*; ``None`` when there is none.

    Comments and trailing commas are accepted, as the TypeScript compiler does.
    """
    config_path = Path(base_path) / file_name
    if not config_path.is_file():
        return None
    text = config_path.read_text(encoding="utf-8")
    try:
        return json.loads(_strip_jsonc(text))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {config_path}: {exc.msg}") from exc


def alias_candidates(
    specifier: str,
    tsconfig: Optional[Dict[str, Any]],
    base_path: Path,
) -> List[Path]:
    """Expand *specifier* through ``compilerOptions.paths``.

    Returns candidate paths (without extension) in declaration order; exact
    patterns are tried before wildcard ones.
    """
    if not tsconfig:
        return []
    options = tsconfig.get("compilerOptions") or {}
    paths: Dict[str, List[str]] = options.get("paths") or {}
    base_url = Path(base_path) / options.get("baseUrl", ".")

    exact: List[Path] = []
    wildcard: List[Path] = []
    for pattern, targets in paths.items():
        if "*" not in pattern:
            if pattern == specifier:
                exact.extend(base_url / t for t in targets)
            continue
        prefix, _, suffix = pattern.partition("*")
        if not (specifier.startswith(prefix) and specifier.endswith(suffix)):
            continue
        if len(specifier) < len(prefix) + len(suffix):
            continue
        captured = specifier[len(prefix):len(specifier) - len(suffix)]
        wildcard.extend(base_url / t.replace("*", captured) for t in targets)

    if not exact and not wildcard:
        logger.debug("No tsconfig path alias matches '%s'", specifier)
    return exact + wildcard
