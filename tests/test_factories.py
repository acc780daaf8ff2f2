"""Tests for the node factory registry and edge construction."""

import pytest

from tsgraph import factories
from tsgraph.errors import MalformedPayloadError, RegistryMismatchError, UnknownEntityTypeError
from tsgraph.factories import NODE_FACTORIES, check_registry, create_edge, create_node, get_factory
from tsgraph.identity import empty_source_location
from tsgraph.models import EntityType, NodeStatus, Relationship, Scope
from tsgraph.payloads import ClassData, GetterData, ModuleData, PropertyData


def _location():
    return empty_source_location()


def test_registry_covers_every_entity_type():
    assert set(NODE_FACTORIES) == set(EntityType)
    check_registry()


def test_registry_mismatch_is_reported(monkeypatch):
    monkeypatch.delitem(factories.NODE_FACTORIES, EntityType.ENUM)

    with pytest.raises(RegistryMismatchError) as exc_info:
        check_registry()

    assert exc_info.value.missing == ["enum"]
    assert exc_info.value.extra == []


def test_create_node_fills_payload_defaults():
    node = create_node(
        EntityType.CLASS, "/a.ts::class::A", "A",
        Scope.NAMED_EXPORT, NodeStatus.RESOLVED, _location(),
        {"implements": ["Named"]},
    )

    assert isinstance(node.data, ClassData)
    assert node.data.implements == ["Named"]
    assert node.data.structure.member_names.methods == []
    assert node.data.decorators == []


def test_create_node_accepts_string_type():
    node = create_node(
        "module", "/a.ts::module::a", "a",
        Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
    )
    assert node.type is EntityType.MODULE
    assert isinstance(node.data, ModuleData)
    assert node.data.module_kind == "unresolved"


def test_unresolved_datatype_defaults():
    getter = create_node(
        EntityType.GETTER, "/a.ts::getter::A.x", "x",
        Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
    )
    prop = create_node(
        EntityType.PROPERTY, "/a.ts::property::A.y", "y",
        Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
    )

    assert isinstance(getter.data, GetterData)
    assert getter.data.datatype.base_type == "unresolved"
    assert isinstance(prop.data, PropertyData)
    assert prop.data.has_getter is False


def test_unknown_field_is_rejected():
    with pytest.raises(MalformedPayloadError) as exc_info:
        create_node(
            EntityType.ENUM, "/a.ts::enum::E", "E",
            Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
            {"colour": "red"},
        )

    assert exc_info.value.entity_type == "enum"
    assert exc_info.value.node_id == "/a.ts::enum::E"
    assert "colour" in str(exc_info.value)


def test_placeholder_must_be_internal():
    with pytest.raises(MalformedPayloadError):
        create_node(
            EntityType.CLASS, "/a.ts::class::A", "A",
            Scope.NAMED_EXPORT, NodeStatus.PLACEHOLDER, _location(),
        )


def test_placeholder_with_internal_scope():
    node = create_node(
        EntityType.CLASS, "/a.ts::class::A", "A",
        Scope.INTERNAL, NodeStatus.PLACEHOLDER, _location(),
    )
    assert node.status is NodeStatus.PLACEHOLDER


def test_invalid_literal_value():
    with pytest.raises(MalformedPayloadError):
        create_node(
            EntityType.FUNCTION, "/a.ts::function::f", "f",
            Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
            {"declaration_style": "lambda"},
        )


def test_unknown_entity_type():
    with pytest.raises(UnknownEntityTypeError) as exc_info:
        get_factory("widget")
    assert exc_info.value.entity_type == "widget"


def test_nodes_are_immutable():
    node = create_node(
        EntityType.VARIABLE, "/a.ts::variable::v", "v",
        Scope.INTERNAL, NodeStatus.RESOLVED, _location(),
    )
    with pytest.raises(Exception):
        node.name = "w"


def test_create_edge():
    edge = create_edge("/a.ts::class::A", Relationship.EXTENDS, "/b.ts::class::B")

    assert edge.id == "/a.ts::class::A-->extends-->/b.ts::class::B"
    assert edge.source == "/a.ts::class::A"
    assert edge.target == "/b.ts::class::B"
    assert edge.label is Relationship.EXTENDS
    assert edge.alias is None


def test_create_edge_with_alias():
    edge = create_edge("/a.ts::module::a", Relationship.IMPORTS_NAMED, "/b.ts::class::B", alias="Base")
    assert edge.alias == "Base"
