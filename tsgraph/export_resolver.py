"""Map a file's exports to nodes, edges and export metadata.

Export clauses are split three ways:

- named export: ``export { a, b as c }``
- named re-export: ``export { a as b } from X``
- wildcard re-export: ``export * from X`` and ``export * as ns from X``

Declarations exported in place (``export class X``, ``export default ...``)
are handled by ``map_direct_exports``.  Entities this file owns are built
``resolved`` with their full payload and relation edges; entities owned
elsewhere become ``placeholder`` nodes.  A specifier that cannot be resolved
is dropped with a warning.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .classifier import classify
from .combine import combine_mapping_results
from .factories import create_edge, create_node
from .identity import empty_source_location, generate_node_id, get_source_location
from .models import EntityType, MappingResult, Node, NodeStatus, Relationship, Scope
from .parser import Declaration, ExportDeclaration, Project, SourceFile
from .payloads import ExportedEntity, ReExport
from .relations import external_entity_node, map_relations, placeholder_node
from .shapes import extract_entity_data

logger = logging.getLogger(__name__)


def _exports_data(named=None, re_exports=None, wildcards=None, default=None) -> dict:
    exports = {
        "named": named or [],
        "re_exports": re_exports or [],
        "wildcards": wildcards or [],
    }
    if default is not None:
        exports["default"] = default
    return {"exports": exports}


def map_owned_entity(
    project: Project,
    source_file: SourceFile,
    decl: Declaration,
    scope: Scope,
) -> MappingResult:
    """Resolved node for a declaration *source_file* owns, plus its relations."""
    entity_type = classify(decl.kind, source_file.file_path)
    node_id = generate_node_id(source_file.file_path, entity_type, decl.name)
    node = create_node(
        entity_type, node_id, decl.name, scope, NodeStatus.RESOLVED,
        get_source_location(source_file, decl.node),
        extract_entity_data(entity_type, decl),
    )
    relations = map_relations(project, source_file, decl, node_id, entity_type)
    return MappingResult(nodes=[node, *relations.nodes], edges=list(relations.edges))


def map_direct_exports(project: Project, source_file: SourceFile, module_id: str) -> MappingResult:
    results: List[MappingResult] = []
    for decl in source_file.direct_exports:
        scope = Scope.DEFAULT_EXPORT if decl.default else Scope.NAMED_EXPORT
        owned = map_owned_entity(project, source_file, decl, scope)
        label = Relationship.EXPORTS_DEFAULT if decl.default else Relationship.EXPORTS_NAMED
        edge = create_edge(module_id, label, owned.nodes[0].id)

        entity = ExportedEntity(
            exported_name="default" if decl.default else decl.name,
            local_name=decl.name,
        ).model_dump(mode="json")
        if decl.default:
            data = _exports_data(default=entity)
        else:
            data = _exports_data(named=[entity])
        results.append(MappingResult(nodes=owned.nodes, edges=[edge, *owned.edges], data=data))
    return combine_mapping_results(results)


def map_named_exports(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    exp: ExportDeclaration,
) -> MappingResult:
    results: List[MappingResult] = []
    for spec in exp.named:
        exported_name = spec.exported_name
        is_default = exported_name == "default"
        label = Relationship.EXPORTS_DEFAULT if is_default else Relationship.EXPORTS_NAMED
        alias = spec.alias if spec.alias and not is_default and spec.alias != spec.name else None

        nodes: List[Node]
        external = project.resolve_external(source_file, spec.name)
        found = None if external is not None else project.resolve_symbol(source_file, spec.name)
        if external is not None:
            nodes = [external_entity_node(external.specifier, external.name)]
            edges = []
        elif found is None:
            logger.warning(
                "Cannot resolve the declaration of named export '%s' in %s",
                spec.name, source_file.file_path,
            )
            continue
        elif found.file_path == source_file.file_path:
            scope = Scope.DEFAULT_EXPORT if is_default else Scope.NAMED_EXPORT
            owned = map_owned_entity(project, source_file, found.declaration, scope)
            nodes, edges = owned.nodes, owned.edges
        else:
            decl = found.declaration
            entity_type = classify(decl.kind, found.file_path)
            node_id = generate_node_id(found.file_path, entity_type, decl.name)
            nodes = [placeholder_node(entity_type, node_id, decl.name)]
            edges = []

        edge = create_edge(module_id, label, nodes[0].id, alias=alias)
        entity = ExportedEntity(exported_name=exported_name, local_name=spec.name).model_dump(mode="json")
        data = _exports_data(default=entity) if is_default else _exports_data(named=[entity])
        results.append(MappingResult(nodes=nodes, edges=[edge, *edges], data=data))
    return combine_mapping_results(results)


def map_named_re_exports(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    exp: ExportDeclaration,
) -> MappingResult:
    specifier = exp.specifier or ""
    target = project.resolve_module(source_file, specifier)
    external = target is None and project.is_external(source_file, specifier)
    if target is None and not external:
        logger.warning("Cannot resolve re-export source '%s' in %s", specifier, source_file.file_path)
        return MappingResult()

    nodes: List[Node] = []
    edges = []
    entries = []
    for spec in exp.named:
        if external:
            node = external_entity_node(specifier, spec.name)
        else:
            found = project.resolve_export(target, spec.name)
            if found is None:
                logger.warning(
                    "Cannot resolve re-exported '%s' from '%s' in %s",
                    spec.name, specifier, source_file.file_path,
                )
                continue
            decl = found.declaration
            entity_type = classify(decl.kind, found.file_path)
            node = placeholder_node(
                entity_type, generate_node_id(found.file_path, entity_type, decl.name), decl.name,
            )
        nodes.append(node)
        edges.append(create_edge(module_id, Relationship.RE_EXPORTS, node.id, alias=spec.alias))
        entries.append(ReExport(source=specifier, name=spec.name, alias=spec.alias).model_dump(mode="json"))
    return MappingResult(nodes=nodes, edges=edges, data=_exports_data(re_exports=entries))


def map_wildcard_re_export(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    exp: ExportDeclaration,
) -> MappingResult:
    specifier = exp.specifier or ""
    target = project.resolve_module(source_file, specifier)
    if target is not None:
        node_id = generate_node_id(target.file_path, EntityType.MODULE, target.stem)
        node = placeholder_node(EntityType.MODULE, node_id, target.stem, {"path": target.file_path})
    elif project.is_external(source_file, specifier):
        node_id = generate_node_id(specifier, EntityType.EXTERNAL_MODULE, specifier)
        node = create_node(
            EntityType.EXTERNAL_MODULE, node_id, specifier,
            Scope.EXTERNAL, NodeStatus.RESOLVED, empty_source_location(),
        )
    else:
        logger.warning("Cannot resolve wildcard re-export '%s' in %s", specifier, source_file.file_path)
        return MappingResult()

    edge = create_edge(module_id, Relationship.RE_EXPORTS, node.id, alias=exp.namespace_alias)
    return MappingResult(nodes=[node], edges=[edge], data=_exports_data(wildcards=[specifier]))


def map_export_declaration(
    project: Project,
    source_file: SourceFile,
    module_id: str,
    exp: ExportDeclaration,
) -> Optional[MappingResult]:
    if exp.wildcard:
        return map_wildcard_re_export(project, source_file, module_id, exp)
    if not exp.named:
        # export {}
        return None
    if exp.is_re_export:
        return map_named_re_exports(project, source_file, module_id, exp)
    return map_named_exports(project, source_file, module_id, exp)


def map_module_exports(project: Project, source_file: SourceFile, module_id: str) -> MappingResult:
    results = [map_direct_exports(project, source_file, module_id)]
    for exp in source_file.exports:
        result = map_export_declaration(project, source_file, module_id, exp)
        if result is not None:
            results.append(result)
    return combine_mapping_results(results)
