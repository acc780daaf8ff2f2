"""Extract partial entity payloads from Tree-sitter declaration nodes.

Every extractor returns a plain dict shaped like the entity's payload model;
fields the syntax does not provide are left out so the model defaults apply.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from .models import EntityType
from .parser import (
    Declaration, binding_names, child_of_type, decorator_names, has_token, node_text, string_value,
)

logger = logging.getLogger(__name__)

Shape = Dict[str, Any]

_STANDARD_FUNCTIONS = {"function_declaration", "generator_function_declaration", "function_signature"}
_FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function"}
_GENERATORS = {"generator_function_declaration", "generator_function"}
_NAMED_TYPES = {"type_identifier", "generic_type", "nested_type_identifier", "predefined_type"}


# ---------------------------------------------------------------------------
# Type helpers
# ---------------------------------------------------------------------------

def _unwrap_annotation(ts_node: Any) -> Optional[Any]:
    """The type inside a ``type_annotation`` (``: T``), or the node itself."""
    if ts_node is None:
        return None
    if ts_node.type in (
        "type_annotation", "opting_type_annotation", "omitting_type_annotation",
        "type_predicate_annotation", "asserts_annotation",
    ):
        return ts_node.named_children[0] if ts_node.named_children else None
    return ts_node


def type_reference(ts_node: Any) -> Optional[Shape]:
    """``{base_type, type_arguments}`` for a type node; ``None`` when absent."""
    type_node = _unwrap_annotation(ts_node)
    if type_node is None:
        return None
    if type_node.type == "parenthesized_type" and type_node.named_children:
        return type_reference(type_node.named_children[0])
    if type_node.type == "generic_type":
        args = type_node.child_by_field_name("type_arguments")
        return {
            "base_type": node_text(type_node.child_by_field_name("name")),
            "type_arguments": [
                ref for ref in (type_reference(a) for a in (args.named_children if args else []))
                if ref is not None
            ],
        }
    return {"base_type": node_text(type_node), "type_arguments": []}


def generics(ts_node: Any) -> List[Shape]:
    params = ts_node.child_by_field_name("type_parameters")
    if params is None:
        return []
    result: List[Shape] = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        entry: Shape = {"name": node_text(param.child_by_field_name("name"))}
        constraint = param.child_by_field_name("constraint")
        if constraint is not None and constraint.named_children:
            entry["constraint"] = {"type": "extends", "value": node_text(constraint.named_children[0])}
        default = param.child_by_field_name("value")
        if default is not None and default.named_children:
            entry["default_type"] = node_text(default.named_children[0])
        result.append(entry)
    return result


def _heritage_targets(clause: Any) -> List[str]:
    names: List[str] = []
    for child in clause.named_children:
        if child.type in ("type_arguments", "comment"):
            continue
        if child.type == "generic_type":
            child = child.child_by_field_name("name") or child
        names.append(node_text(child))
    return names


def extends_names(decl: Declaration) -> List[str]:
    """Names after ``extends`` on a class or interface, without type arguments."""
    if decl.kind == "interface_declaration":
        for child in decl.node.children:
            if child.type in ("extends_type_clause", "extends_clause"):
                return _heritage_targets(child)
        return []
    heritage = child_of_type(decl.node, "class_heritage")
    clause = child_of_type(heritage, "extends_clause") if heritage is not None else None
    return _heritage_targets(clause) if clause is not None else []


def implements_names(decl: Declaration) -> List[str]:
    heritage = child_of_type(decl.node, "class_heritage")
    clause = child_of_type(heritage, "implements_clause") if heritage is not None else None
    return _heritage_targets(clause) if clause is not None else []


# ---------------------------------------------------------------------------
# Callables and members
# ---------------------------------------------------------------------------

def _parameter(param: Any) -> Optional[Shape]:
    if param.type == "identifier":
        return {"name": node_text(param)}
    pattern = param.child_by_field_name("pattern")
    if pattern is None:
        return None
    is_rest = pattern.type == "rest_pattern"
    if is_rest and pattern.named_children:
        name = node_text(pattern.named_children[0])
    else:
        name = node_text(pattern)
    default = param.child_by_field_name("value")
    shape: Shape = {
        "name": name,
        "is_rest": is_rest,
        "is_optional": param.type == "optional_parameter" or default is not None,
        "decorators": decorator_names(param),
    }
    declared = type_reference(param.child_by_field_name("type"))
    if declared is not None:
        shape["type"] = declared
    if default is not None:
        shape["default_value"] = node_text(default)
    return shape


def signature(ts_node: Any) -> Shape:
    params = ts_node.child_by_field_name("parameters")
    single = ts_node.child_by_field_name("parameter")
    raw_params = params.named_children if params is not None else ([single] if single is not None else [])

    is_async = has_token(ts_node, "async")
    is_generator = ts_node.type in _GENERATORS or has_token(ts_node, "*")
    if is_async and is_generator:
        capability = "async_generator"
    elif is_async:
        capability = "async"
    elif is_generator:
        capability = "generator"
    else:
        capability = "sync"

    shape: Shape = {
        "parameters": [p for p in (_parameter(rp) for rp in raw_params) if p is not None],
        "generics": generics(ts_node),
        "capability": capability,
    }
    returns = type_reference(ts_node.child_by_field_name("return_type"))
    if returns is not None:
        shape["return_type"] = returns
    return shape


def member(decl: Declaration) -> Shape:
    ts_node = decl.node
    modifiers = {
        "readonly": has_token(ts_node, "readonly"),
        "optional": has_token(ts_node, "?"),
        "abstract": has_token(ts_node, "abstract") or ts_node.type == "abstract_method_signature",
        "static": has_token(ts_node, "static"),
    }
    accessibility = "public"
    modifier = child_of_type(ts_node, "accessibility_modifier")
    if modifier is not None:
        accessibility = node_text(modifier)
    elif decl.name.startswith("#"):
        accessibility = "private"
    return {"modifiers": modifiers, "accessibility": accessibility, "decorators": list(decl.decorators)}


# ---------------------------------------------------------------------------
# Per-entity extractors
# ---------------------------------------------------------------------------

def _structure(decl: Declaration) -> Shape:
    methods: List[str] = []
    properties: List[str] = []
    for m in decl.members():
        if m.kind in ("method_definition", "method_signature", "abstract_method_signature"):
            methods.append(m.name)
        elif m.kind in ("public_field_definition", "property_signature"):
            properties.append(m.name)
    return {
        "generics": generics(decl.node),
        "extends": extends_names(decl),
        "member_names": {"methods": methods, "properties": properties},
    }


def _class_shape(decl: Declaration) -> Shape:
    return {
        "structure": _structure(decl),
        "decorators": list(decl.decorators),
        "implements": implements_names(decl),
        "constructors": [signature(m.node) for m in decl.members() if m.kind == "constructor"],
    }


def _interface_shape(decl: Declaration) -> Shape:
    return {"structure": _structure(decl)}


def _function_shape(decl: Declaration) -> Shape:
    if decl.kind in _STANDARD_FUNCTIONS:
        style = "standard"
    elif decl.kind in _FUNCTION_EXPRESSIONS:
        style = "function expression"
    elif decl.kind == "arrow_function":
        style = "arrow function"
    else:
        style = "unresolved"
    return {"signature": signature(decl.node), "declaration_style": style}


def _callable_member_shape(decl: Declaration) -> Shape:
    return {"signature": signature(decl.node), "member": member(decl)}


def _getter_shape(decl: Declaration) -> Shape:
    shape: Shape = {"member": member(decl)}
    returns = type_reference(decl.node.child_by_field_name("return_type"))
    if returns is not None:
        shape["datatype"] = returns
    return shape


def _property_shape(decl: Declaration) -> Shape:
    shape: Shape = {"member": member(decl)}
    declared = type_reference(decl.node.child_by_field_name("type"))
    if declared is not None:
        shape["datatype"] = declared
    return shape


def _variable_shape(decl: Declaration) -> Shape:
    declarator = decl.node
    container = decl.container
    kind = "unresolved"
    if decl.ambient:
        kind = "declare"
    elif container is not None:
        first = container.children[0].type if container.children else ""
        if first in ("let", "const", "var"):
            kind = first
    name_node = declarator.child_by_field_name("name")
    pattern_kind = {"object_pattern": "object", "array_pattern": "array"}.get(
        name_node.type if name_node is not None else "", "none"
    )
    shape: Shape = {
        "declaration_kind": kind,
        "has_initializer": declarator.child_by_field_name("value") is not None,
        "is_readonly": kind == "const",
        "destructuring": {
            "kind": pattern_kind,
            "names": binding_names(name_node) if pattern_kind != "none" else [],
        },
        "decorators": list(decl.decorators),
    }
    declared = type_reference(declarator.child_by_field_name("type"))
    if declared is not None:
        shape["datatype"] = declared
    return shape


def _enum_value(value: Any) -> Union[int, float, str, None]:
    if value is None:
        return None
    text = node_text(value)
    if value.type == "number":
        try:
            return int(text, 0)
        except ValueError:
            try:
                return float(text)
            except ValueError:
                return text
    if value.type in ("string", "template_string"):
        return string_value(value)
    return text


def _enum_shape(decl: Declaration) -> Shape:
    body = decl.node.child_by_field_name("body")
    members: List[Shape] = []
    for child in body.named_children if body is not None else []:
        if child.type == "enum_assignment":
            name = string_value(child.child_by_field_name("name"))
            members.append({"name": name, "value": _enum_value(child.child_by_field_name("value"))})
        elif child.type in ("property_identifier", "string"):
            members.append({"name": string_value(child)})
    return {"members": members}


def _flatten(ts_node: Any, node_type: str) -> List[Any]:
    if ts_node.type != node_type:
        return [ts_node]
    parts: List[Any] = []
    for child in ts_node.named_children:
        parts.extend(_flatten(child, node_type))
    return parts


def _refs(nodes: List[Any]) -> List[Shape]:
    return [r for r in (type_reference(n) for n in nodes) if r is not None]


def _type_shape(decl: Declaration) -> Shape:
    shape: Shape = {"generics": generics(decl.node)}
    value = decl.node.child_by_field_name("value")
    while value is not None and value.type == "parenthesized_type" and value.named_children:
        value = value.named_children[0]
    if value is None:
        return shape

    kind = value.type
    if kind in _NAMED_TYPES:
        shape.update(kind="alias", base_type=type_reference(value))
    elif kind == "union_type":
        shape.update(kind="union", union_types=_refs(_flatten(value, "union_type")))
    elif kind == "intersection_type":
        shape.update(kind="intersection", intersection_types=_refs(_flatten(value, "intersection_type")))
    elif kind == "literal_type":
        shape.update(kind="literal", literal_values=[node_text(value)])
    elif kind == "tuple_type":
        shape.update(kind="tuple", tuple_types=_refs(value.named_children))
    elif kind == "index_type_query":
        target = value.named_children[0] if value.named_children else None
        shape.update(kind="keyof", keyof_type=type_reference(target))
    elif kind == "lookup_type":
        shape.update(kind="indexed", indexed_type=type_reference(value))
    elif kind == "conditional_type":
        parts = {
            label: type_reference(value.child_by_field_name(field_name))
            for label, field_name in (
                ("check", "left"), ("extends", "right"),
                ("true", "consequence"), ("false", "alternative"),
            )
        }
        shape.update(kind="conditional", conditional_type={k: v for k, v in parts.items() if v})
    elif kind == "template_literal_type":
        shape.update(kind="template", base_type=type_reference(value))
    elif kind == "infer_type":
        shape.update(kind="inferred")
    elif kind == "object_type":
        if any(
            c.type == "index_signature" and child_of_type(c, "mapped_type_clause") is not None
            for c in value.named_children
        ):
            shape.update(kind="mapped", base_type=type_reference(value))
        else:
            properties: Dict[str, Shape] = {}
            for prop in value.named_children:
                if prop.type != "property_signature":
                    continue
                declared = type_reference(prop.child_by_field_name("type"))
                properties[node_text(prop.child_by_field_name("name"))] = declared or {
                    "base_type": "any", "type_arguments": [],
                }
            shape.update(kind="object", properties=properties)
    else:
        logger.debug("Unclassified type alias form %s for %s", kind, decl.name)
        shape.update(kind="unresolved", base_type=type_reference(value))
    return shape


_DECORATOR_TARGETS = {
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "class": "class",
    "export_statement": "class",
    "method_definition": "method",
    "public_field_definition": "property",
    "required_parameter": "parameter",
    "optional_parameter": "parameter",
}


def _decorator_shape(decl: Declaration) -> Shape:
    ts_node = decl.node
    parent = ts_node.parent
    target = _DECORATOR_TARGETS.get(parent.type if parent is not None else "", "unresolved")
    if parent is not None and parent.type == "method_definition" and (
        has_token(parent, "get") or has_token(parent, "set")
    ):
        target = "accessor"
    arguments: List[str] = []
    expr = ts_node.named_children[0] if ts_node.named_children else None
    if expr is not None and expr.type == "call_expression":
        args = expr.child_by_field_name("arguments")
        arguments = [node_text(a) for a in (args.named_children if args is not None else [])]
    return {"target": target, "arguments": arguments}


def _module_shape(decl: Declaration) -> Shape:
    return {"path": decl.file_path, "module_kind": "namespace"}


def _namespace_import_shape(decl: Declaration) -> Shape:
    return {"namespace_name": decl.name}


def _empty_shape(decl: Declaration) -> Shape:
    return {}


EXTRACTORS: Dict[EntityType, Callable[[Declaration], Shape]] = {
    EntityType.MODULE: _module_shape,
    EntityType.CLASS: _class_shape,
    EntityType.INTERFACE: _interface_shape,
    EntityType.FUNCTION: _function_shape,
    EntityType.METHOD: _callable_member_shape,
    EntityType.CONSTRUCTOR: _callable_member_shape,
    EntityType.SETTER: _callable_member_shape,
    EntityType.GETTER: _getter_shape,
    EntityType.PROPERTY: _property_shape,
    EntityType.VARIABLE: _variable_shape,
    EntityType.ENUM: _enum_shape,
    EntityType.TYPE: _type_shape,
    EntityType.DECORATOR: _decorator_shape,
    EntityType.NAMESPACE_IMPORT: _namespace_import_shape,
    EntityType.EXTERNAL_IMPORT_ENTITY: _empty_shape,
    EntityType.EXTERNAL_MODULE: _empty_shape,
}


def extract_entity_data(entity_type: EntityType, decl: Declaration) -> Shape:
    """Partial payload for *decl* classified as *entity_type*."""
    return EXTRACTORS[entity_type](decl)


def type_alias_target(decl: Declaration) -> Optional[str]:
    """For ``type A = B`` return ``B``; ``None`` for every other alias form."""
    value = decl.node.child_by_field_name("value")
    while value is not None and value.type == "parenthesized_type" and value.named_children:
        value = value.named_children[0]
    if value is None:
        return None
    if value.type in ("type_identifier", "nested_type_identifier"):
        return node_text(value)
    return None

