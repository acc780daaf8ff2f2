"""Map one source file (or a whole project) to graph fragments."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .combine import combine_mapping_results
from .errors import TsGraphError
from .factories import create_node
from .identity import generate_node_id, get_source_location
from .export_resolver import map_module_exports
from .import_resolver import map_module_imports
from .models import Edge, EntityType, MappingResult, Node, NodeStatus, Scope
from .parser import Project, SourceFile
from .payloads import ModuleExports, ModuleImports

logger = logging.getLogger(__name__)


def determine_module_kind(source_file: SourceFile) -> str:
    """``namespace`` for dotted namespace declarations, ``ambient`` for other
    module declarations, ``es6`` when the file declares none."""
    names = source_file.module_declarations
    if any("." in name for name in names):
        return "namespace"
    if names:
        return "ambient"
    return "es6"


def _table(data: Dict[str, Any], key: str, model: Any, file_path: str) -> Dict[str, Any]:
    table = model().model_dump(mode="json")
    value = data.get(key)
    if not isinstance(value, dict):
        logger.warning("Module data for %s has no '%s' table; using defaults", file_path, key)
        return table
    missing = [k for k in table if k not in value]
    if missing:
        logger.warning(
            "Module data for %s is missing %s keys %s; using defaults", file_path, key, ", ".join(missing),
        )
    table.update({k: v for k, v in value.items() if k in table})
    return table


def _dedupe(nodes: List[Node], edges: List[Edge]):
    """One node per ID (resolved wins over placeholder) and one edge per ID (first wins)."""
    by_id: Dict[str, Node] = {}
    for node in nodes:
        kept = by_id.get(node.id)
        if kept is None or (kept.status is NodeStatus.PLACEHOLDER and node.status is NodeStatus.RESOLVED):
            by_id[node.id] = node
    unique_edges: Dict[str, Edge] = {}
    for edge in edges:
        unique_edges.setdefault(edge.id, edge)
    return list(by_id.values()), list(unique_edges.values())


def map_module(source_file: SourceFile, project: Optional[Project] = None) -> MappingResult:
    """Graph fragment for one file: its module node first, then every imported
    and exported entity with the edges connecting them."""
    project = project or source_file.project
    if project is None:
        raise TsGraphError("Source file is not attached to a project", source_file.file_path)

    module_kind = determine_module_kind(source_file)
    module_id = generate_node_id(source_file.file_path, EntityType.MODULE, source_file.stem)

    combined = combine_mapping_results([
        map_module_imports(project, source_file, module_id),
        map_module_exports(project, source_file, module_id),
    ])

    module_node = create_node(
        EntityType.MODULE, module_id, source_file.stem,
        Scope.INTERNAL, NodeStatus.RESOLVED,
        get_source_location(source_file),
        {
            "path": source_file.file_path,
            "module_kind": module_kind,
            "imports": _table(combined.data, "imports", ModuleImports, source_file.file_path),
            "exports": _table(combined.data, "exports", ModuleExports, source_file.file_path),
        },
    )
    nodes, edges = _dedupe([module_node, *combined.nodes], combined.edges)
    logger.debug("Mapped %s: %d nodes, %d edges", source_file.file_path, len(nodes), len(edges))
    return MappingResult(nodes=nodes, edges=edges, data=module_node.data.model_dump(mode="json"))


def map_project(project: Project) -> Dict[str, MappingResult]:
    """Map every file currently in *project*; files that fail are logged and skipped."""
    fragments: Dict[str, MappingResult] = {}
    for source_file in project.source_files:
        try:
            fragments[source_file.file_path] = map_module(source_file, project)
        except TsGraphError as exc:
            logger.error("Skipping %s: %s", source_file.file_path, exc)
    return fragments
