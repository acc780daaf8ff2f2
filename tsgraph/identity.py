"""Deterministic node/edge identifiers and source locations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

from .models import EntityType, Relationship, SourceLocation

if TYPE_CHECKING:
    from .parser import SourceFile

NODE_ID_SEPARATOR = "::"
EDGE_ID_SEPARATOR = "-->"


def _value(item: Union[str, EntityType, Relationship]) -> str:
    return item.value if isinstance(item, (EntityType, Relationship)) else item


def generate_node_id(file_path: str, entity_type: Union[str, EntityType], name: str) -> str:
    """``<filePath>::<entityType>::<name>``; *file_path* is a package specifier for externals."""
    return NODE_ID_SEPARATOR.join((file_path, _value(entity_type), name))


def generate_edge_id(
    source_id: str,
    relationship: Union[str, Relationship],
    target_id: str,
) -> str:
    return EDGE_ID_SEPARATOR.join((source_id, _value(relationship), target_id))


def get_source_location(source_file: "SourceFile", ts_node: Optional[Any] = None) -> SourceLocation:
    """1-based location of *ts_node*, or of the whole file when no node is given."""
    if ts_node is None:
        lines = source_file.text.split("\n")
        return SourceLocation(
            file_path=source_file.file_path,
            start_line=1,
            start_column=1,
            end_line=len(lines),
            end_column=len(lines[-1]) + 1,
        )
    start_row, start_col = ts_node.start_point
    end_row, end_col = ts_node.end_point
    return SourceLocation(
        file_path=source_file.file_path,
        start_line=start_row + 1,
        start_column=start_col + 1,
        end_line=end_row + 1,
        end_column=end_col + 1,
    )


def empty_source_location() -> SourceLocation:
    """Location used by placeholder nodes, which are not owned by the current file."""
    return SourceLocation(file_path="", start_line=0, start_column=0, end_line=0, end_column=0)
