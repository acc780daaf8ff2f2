"""Map a file's import declarations to nodes, edges and import metadata.

Three strategies, one per binding form:

- named (``import { a, b as c } from X``)
- default (``import a from X``)
- namespace (``import * as ns from X``)

Imported entities are identified by their *defining* file and declared name,
never by the importing file or the local alias, so every importer of a symbol
points at the same node ID.  Packages get IDs keyed by their specifier.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .classifier import classify
from .combine import combine_mapping_results
from .factories import create_edge, create_node
from .identity import empty_source_location, generate_node_id
from .models import EntityType, MappingResult, Node, NodeStatus, Relationship, Scope
from .parser import ImportDeclaration, Project, Resolution, SourceFile
from .payloads import DefaultImport, NamedImport, NamespaceImport
from .relations import external_entity_node, placeholder_node

logger = logging.getLogger(__name__)

# Probed in order against the target's default-export node IDs.
DEFAULT_IMPORT_CANDIDATES = (
    EntityType.CLASS,
    EntityType.FUNCTION,
    EntityType.VARIABLE,
    EntityType.ENUM,
    EntityType.INTERFACE,
    EntityType.TYPE,
)


def _imports_data(bucket: str, entries: List[dict]) -> dict:
    return {"imports": {bucket: entries}}


def map_named_imports(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    imp: ImportDeclaration,
    target: Optional[SourceFile],
) -> MappingResult:
    nodes: List[Node] = []
    edges = []
    entries = []
    for spec in imp.named:
        if target is None:
            node = external_entity_node(imp.specifier, spec.name)
        else:
            found = project.resolve_export(target, spec.name)
            if found is None:
                logger.warning(
                    "Cannot resolve named import '%s' from '%s' in %s",
                    spec.name, imp.specifier, source_file.file_path,
                )
                continue
            decl = found.declaration
            entity_type = classify(decl.kind, found.file_path)
            node_id = generate_node_id(found.file_path, entity_type, decl.name)
            node = placeholder_node(entity_type, node_id, decl.name)

        nodes.append(node)
        edges.append(create_edge(module_id, Relationship.IMPORTS_NAMED, node.id, alias=spec.alias))
        entries.append(NamedImport(
            module_path=imp.specifier, name=spec.name, alias=spec.alias,
        ).model_dump(mode="json"))
    return MappingResult(nodes=nodes, edges=edges, data=_imports_data("named", entries))


def default_export_ids(found: Optional[Resolution]) -> List[str]:
    """Node IDs a resolved default export may have."""
    if found is None:
        return []
    decl = found.declaration
    return [generate_node_id(found.file_path, classify(decl.kind, found.file_path), decl.name)]


def map_default_import(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    imp: ImportDeclaration,
    target: Optional[SourceFile],
) -> MappingResult:
    local_name = imp.default_name
    if target is None:
        node = external_entity_node(imp.specifier, "default")
    else:
        node = None
        found = project.resolve_export(target, "default")
        exported_ids = default_export_ids(found)
        if exported_ids:
            for candidate in DEFAULT_IMPORT_CANDIDATES:
                node_id = generate_node_id(found.file_path, candidate, found.declaration.name)
                if node_id in exported_ids:
                    node = placeholder_node(candidate, node_id, found.declaration.name)
                    break
        if node is None:
            logger.warning(
                "No default export matches import '%s' from '%s' in %s",
                local_name, imp.specifier, source_file.file_path,
            )
            return MappingResult()

    edge = create_edge(module_id, Relationship.IMPORTS_DEFAULT, node.id, alias=local_name)
    entry = DefaultImport(module_path=imp.specifier, alias=local_name).model_dump(mode="json")
    return MappingResult(nodes=[node], edges=[edge], data=_imports_data("defaults", [entry]))


def map_namespace_import(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    imp: ImportDeclaration,
    target: Optional[SourceFile],
) -> MappingResult:
    alias = imp.namespace_name
    if target is None:
        node_id = generate_node_id(imp.specifier, EntityType.EXTERNAL_MODULE, imp.specifier)
        node = create_node(
            EntityType.EXTERNAL_MODULE, node_id, imp.specifier,
            Scope.EXTERNAL, NodeStatus.RESOLVED, empty_source_location(),
        )
    else:
        node_id = generate_node_id(target.file_path, EntityType.MODULE, target.stem)
        node = placeholder_node(EntityType.MODULE, node_id, target.stem, {"path": target.file_path})

    edge = create_edge(module_id, Relationship.IMPORTS_NAMESPACE, node.id, alias=alias)
    entry = NamespaceImport(module_path=imp.specifier, alias=alias).model_dump(mode="json")
    return MappingResult(nodes=[node], edges=[edge], data=_imports_data("namespaces", [entry]))


def map_module_imports(project: Project, source_file: SourceFile, module_id: str) -> MappingResult:
    results: List[MappingResult] = []
    for imp in source_file.imports:
        if not imp.has_bindings:
            logger.debug("Skipping side-effect import '%s' in %s", imp.specifier, source_file.file_path)
            continue

        target = project.resolve_module(source_file, imp.specifier)
        if target is None and not project.is_external(source_file, imp.specifier):
            logger.warning(
                "Cannot resolve module '%s' imported by %s", imp.specifier, source_file.file_path,
            )
            continue

        if imp.default_name:
            results.append(map_default_import(project, source_file, module_id, imp, target))
        if imp.namespace_name:
            results.append(map_namespace_import(project, source_file, module_id, imp, target))
        if imp.named:
            results.append(map_named_imports(project, source_file, module_id, imp, target))
    return combine_mapping_results(results)
