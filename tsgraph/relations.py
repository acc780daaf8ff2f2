"""Inheritance, alias and membership edges for resolved declarations.

Emitted alongside every class, interface or type alias a file owns:

- ``extends`` (classes, interfaces) and ``implements`` (classes)
- ``alias-of`` for ``type A = B``
- ``contains`` from a class or interface to each of its members

Heritage targets resolve to a node ID rooted at their defining file, to an
external import entity for package imports, or to a synthetic
``unresolved::<entityType>::<name>`` placeholder.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .classifier import classify
from .combine import combine_mapping_results
from .factories import create_edge, create_node
from .identity import empty_source_location, generate_node_id, get_source_location
from .models import EntityType, MappingResult, Node, NodeStatus, Relationship, Scope
from .parser import Declaration, Project, Resolution, SourceFile
from .shapes import extends_names, extract_entity_data, implements_names, type_alias_target

logger = logging.getLogger(__name__)

UNRESOLVED_ROOT = "unresolved"

_STRUCTURED = {EntityType.CLASS, EntityType.INTERFACE}


def external_entity_node(specifier: str, name: str) -> Node:
    node_id = generate_node_id(specifier, EntityType.EXTERNAL_IMPORT_ENTITY, name)
    return create_node(
        EntityType.EXTERNAL_IMPORT_ENTITY, node_id, name,
        Scope.EXTERNAL, NodeStatus.RESOLVED, empty_source_location(),
    )


def placeholder_node(entity_type: EntityType, node_id: str, name: str, data=None) -> Node:
    return create_node(
        entity_type, node_id, name,
        Scope.INTERNAL, NodeStatus.PLACEHOLDER, empty_source_location(), data,
    )


def _resolve_dotted(project: Project, source_file: SourceFile, name: str):
    """``ns.Base`` through a namespace import; returns a Resolution, a Node or None."""
    head, _, rest = name.partition(".")
    for imp in source_file.imports:
        if imp.namespace_name != head:
            continue
        if project.is_external(source_file, imp.specifier):
            return external_entity_node(imp.specifier, rest)
        target = project.resolve_module(source_file, imp.specifier)
        if target is not None:
            return project.resolve_export(target, rest)
    return None


def resolve_reference(
    project: Project,
    source_file: SourceFile,
    name: str,
    expected: EntityType,
) -> Tuple[str, Optional[Node]]:
    """Target ID for a heritage or alias reference, plus the node to emit for it (if any)."""
    found = None
    if "." in name:
        found = _resolve_dotted(project, source_file, name)
    else:
        external = project.resolve_external(source_file, name)
        if external is not None:
            found = external_entity_node(external.specifier, external.name)
        else:
            found = project.resolve_symbol(source_file, name)

    if isinstance(found, Node):
        return found.id, found
    if isinstance(found, Resolution):
        decl = found.declaration
        entity_type = classify(decl.kind, found.file_path)
        target_id = generate_node_id(found.file_path, entity_type, decl.name)
        if found.file_path == source_file.file_path:
            return target_id, None
        return target_id, placeholder_node(entity_type, target_id, decl.name)

    logger.warning(
        "Cannot resolve %s '%s' referenced in %s; using a placeholder",
        expected.value, name, source_file.file_path,
    )
    target_id = generate_node_id(UNRESOLVED_ROOT, expected, name)
    return target_id, placeholder_node(expected, target_id, name)


def _reference_edges(
    project: Project,
    source_file: SourceFile,
    source_id: str,
    names: List[str],
    label: Relationship,
    expected: EntityType,
) -> MappingResult:
    nodes: List[Node] = []
    edges = []
    for name in names:
        target_id, node = resolve_reference(project, source_file, name, expected)
        if node is not None:
            nodes.append(node)
        edges.append(create_edge(source_id, label, target_id))
    return MappingResult(nodes=nodes, edges=edges)


def map_members(source_file: SourceFile, decl: Declaration, owner_id: str) -> MappingResult:
    nodes: List[Node] = []
    edges = []
    for member in decl.members():
        entity_type = classify(member.kind, source_file.file_path)
        member_id = generate_node_id(source_file.file_path, entity_type, member.qualified_name)
        nodes.append(create_node(
            entity_type, member_id, member.name,
            Scope.INTERNAL, NodeStatus.RESOLVED,
            get_source_location(source_file, member.node),
            extract_entity_data(entity_type, member),
        ))
        edges.append(create_edge(owner_id, Relationship.CONTAINS, member_id))
    return MappingResult(nodes=nodes, edges=edges)


def map_relations(
    project: Project,
    source_file: SourceFile,
    decl: Declaration,
    node_id: str,
    entity_type: EntityType,
) -> MappingResult:
    """Every relation edge owned by the declaration behind *node_id*."""
    results: List[MappingResult] = []
    if entity_type is EntityType.CLASS:
        results.append(_reference_edges(
            project, source_file, node_id, extends_names(decl), Relationship.EXTENDS, EntityType.CLASS,
        ))
        results.append(_reference_edges(
            project, source_file, node_id, implements_names(decl),
            Relationship.IMPLEMENTS, EntityType.INTERFACE,
        ))
    elif entity_type is EntityType.INTERFACE:
        results.append(_reference_edges(
            project, source_file, node_id, extends_names(decl),
            Relationship.EXTENDS, EntityType.INTERFACE,
        ))
    elif entity_type is EntityType.TYPE:
        target = type_alias_target(decl)
        if target is not None:
            results.append(_reference_edges(
                project, source_file, node_id, [target], Relationship.ALIAS_OF, EntityType.TYPE,
            ))

    if entity_type in _STRUCTURED:
        results.append(map_members(source_file, decl, node_id))
    return combine_mapping_results(results, defaults={})
