"""Map declaration kinds to entity types.

Construct kinds are tree-sitter-typescript node types.  A few are refined by
the front end before classification: ``method_definition`` becomes
``get_accessor``, ``set_accessor`` or ``constructor`` where applicable, and
references to packages use the ``external_import`` / ``external_module``
pseudo-kinds.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from .errors import UnrecognizedConstructError
from .models import EntityType

CONSTRUCT_KINDS: Dict[str, EntityType] = {
    # modules
    "program": EntityType.MODULE,
    "internal_module": EntityType.MODULE,
    "module": EntityType.MODULE,
    # types
    "class_declaration": EntityType.CLASS,
    "abstract_class_declaration": EntityType.CLASS,
    "class": EntityType.CLASS,
    "interface_declaration": EntityType.INTERFACE,
    "enum_declaration": EntityType.ENUM,
    "type_alias_declaration": EntityType.TYPE,
    # callables
    "function_declaration": EntityType.FUNCTION,
    "generator_function_declaration": EntityType.FUNCTION,
    "function_signature": EntityType.FUNCTION,
    "function_expression": EntityType.FUNCTION,
    "function": EntityType.FUNCTION,
    "generator_function": EntityType.FUNCTION,
    "arrow_function": EntityType.FUNCTION,
    # members
    "method_definition": EntityType.METHOD,
    "method_signature": EntityType.METHOD,
    "abstract_method_signature": EntityType.METHOD,
    "public_field_definition": EntityType.PROPERTY,
    "property_signature": EntityType.PROPERTY,
    "get_accessor": EntityType.GETTER,
    "set_accessor": EntityType.SETTER,
    "constructor": EntityType.CONSTRUCTOR,
    # values
    "variable_declarator": EntityType.VARIABLE,
    "decorator": EntityType.DECORATOR,
    "namespace_import": EntityType.NAMESPACE_IMPORT,
    # references to packages
    "external_import": EntityType.EXTERNAL_IMPORT_ENTITY,
    "external_module": EntityType.EXTERNAL_MODULE,
}


def classify(construct_kind: str, file_path: Optional[str] = None) -> EntityType:
    """Return the entity type for *construct_kind*; unknown kinds are fatal."""
    try:
        return CONSTRUCT_KINDS[construct_kind]
    except KeyError:
        raise UnrecognizedConstructError(construct_kind, file_path) from None


def classifiable_entity_types() -> FrozenSet[EntityType]:
    return frozenset(CONSTRUCT_KINDS.values())
