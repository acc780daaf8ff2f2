"""Tests for declaration-kind classification."""

import pytest

from tsgraph.classifier import CONSTRUCT_KINDS, classifiable_entity_types, classify
from tsgraph.errors import TsGraphError, UnrecognizedConstructError
from tsgraph.models import EntityType


@pytest.mark.parametrize(
    "kind, expected",
    [
        ("program", EntityType.MODULE),
        ("class_declaration", EntityType.CLASS),
        ("abstract_class_declaration", EntityType.CLASS),
        ("interface_declaration", EntityType.INTERFACE),
        ("function_declaration", EntityType.FUNCTION),
        ("arrow_function", EntityType.FUNCTION),
        ("method_definition", EntityType.METHOD),
        ("get_accessor", EntityType.GETTER),
        ("set_accessor", EntityType.SETTER),
        ("constructor", EntityType.CONSTRUCTOR),
        ("public_field_definition", EntityType.PROPERTY),
        ("variable_declarator", EntityType.VARIABLE),
        ("enum_declaration", EntityType.ENUM),
        ("type_alias_declaration", EntityType.TYPE),
        ("decorator", EntityType.DECORATOR),
        ("namespace_import", EntityType.NAMESPACE_IMPORT),
        ("external_import", EntityType.EXTERNAL_IMPORT_ENTITY),
        ("external_module", EntityType.EXTERNAL_MODULE),
    ],
)
def test_classify_known_kinds(kind, expected):
    assert classify(kind) is expected


def test_unknown_kind_is_fatal():
    with pytest.raises(UnrecognizedConstructError) as exc_info:
        classify("number", "/src/answer.ts")

    assert exc_info.value.construct_kind == "number"
    assert exc_info.value.file_path == "/src/answer.ts"
    assert "[file=/src/answer.ts]" in str(exc_info.value)
    assert isinstance(exc_info.value, TsGraphError)


def test_every_entity_type_is_reachable():
    assert classifiable_entity_types() == frozenset(EntityType)


def test_kinds_map_to_entity_types():
    assert all(isinstance(value, EntityType) for value in CONSTRUCT_KINDS.values())
