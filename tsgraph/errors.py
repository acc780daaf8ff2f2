"""
Exceptions raised while mapping TypeScript source files to graph fragments.

Structural failures (an unknown construct, a missing factory, a payload that
fails validation) abort the fragment for the file being mapped.  Reference
failures (a symbol that cannot be resolved) are normally logged and skipped by
the mappers; ``UnresolvedSymbolError`` is only raised by the strict lookup API.
"""

from __future__ import annotations

from typing import Iterable, Optional


class TsGraphError(Exception):
    """Base class for every error raised by tsgraph.

    Attributes:
        message: Explanation of the error
        file_path: The source file being mapped (if available)
    """

    def __init__(self, message: str, file_path: Optional[str] = None):
        self.message = message
        self.file_path = file_path

        full_message = message
        if file_path:
            full_message = f"{message} [file={file_path}]"

        super().__init__(full_message)


class UnrecognizedConstructError(TsGraphError):
    """Raised when the classifier meets a declaration kind it has no entity type for.

    Attributes:
        construct_kind: The tree-sitter node type (or refined kind) that was rejected
    """

    def __init__(self, construct_kind: str, file_path: Optional[str] = None):
        self.construct_kind = construct_kind
        super().__init__(f"Unrecognized declaration kind '{construct_kind}'", file_path)


class UnknownEntityTypeError(TsGraphError):
    """Raised when no node factory is registered for an entity type."""

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(f"No node factory registered for entity type '{entity_type}'")


class RegistryMismatchError(TsGraphError):
    """Raised at import time when classifier output and factory registry disagree.

    Attributes:
        missing: Entity types the classifier can produce but no factory handles
        extra: Entity types with a factory that nothing can produce
    """

    def __init__(self, missing: Iterable[str], extra: Iterable[str]):
        self.missing = sorted(missing)
        self.extra = sorted(extra)

        details = []
        if self.missing:
            details.append(f"missing={', '.join(self.missing)}")
        if self.extra:
            details.append(f"extra={', '.join(self.extra)}")

        super().__init__(f"Node factory registry is out of sync [{'; '.join(details)}]")


class UnresolvedSymbolError(TsGraphError):
    """Raised when an import, export or heritage target cannot be located.

    Attributes:
        symbol: The name that was looked up
        specifier: The module specifier it was looked up through (if any)
    """

    def __init__(
        self,
        symbol: str,
        specifier: Optional[str] = None,
        file_path: Optional[str] = None,
    ):
        self.symbol = symbol
        self.specifier = specifier

        message = f"Cannot resolve '{symbol}'"
        if specifier:
            message = f"{message} from '{specifier}'"
        super().__init__(message, file_path)


class MalformedPayloadError(TsGraphError):
    """Raised when entity data or a node fails validation."""

    def __init__(self, entity_type: str, detail: str, node_id: Optional[str] = None):
        self.entity_type = entity_type
        self.detail = detail
        self.node_id = node_id

        message = f"Invalid {entity_type} payload"
        if node_id:
            message = f"{message} for '{node_id}'"
        super().__init__(f"{message}: {detail}")


class SourceFileNotFoundError(TsGraphError):
    """Raised when a project is asked for a file it does not contain."""

    def __init__(self, file_path: str):
        super().__init__("Source file is not part of the project", file_path)
