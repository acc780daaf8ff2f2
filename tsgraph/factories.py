"""Node factory registry and edge construction."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from .classifier import classifiable_entity_types
from .errors import MalformedPayloadError, RegistryMismatchError, UnknownEntityTypeError
from .identity import generate_edge_id
from .models import Edge, EntityType, Node, NodeStatus, Relationship, Scope, SourceLocation
from .payloads import PAYLOAD_MODELS

PayloadInput = Union[BaseModel, Mapping[str, Any], None]
NodeFactory = Callable[[str, str, Scope, NodeStatus, SourceLocation, PayloadInput], Node]


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _node_factory(entity_type: EntityType) -> NodeFactory:
    payload_model = PAYLOAD_MODELS[entity_type.value]

    def create(
        node_id: str,
        name: str,
        scope: Scope,
        status: NodeStatus,
        location: SourceLocation,
        data: PayloadInput = None,
    ) -> Node:
        try:
            if isinstance(data, payload_model):
                payload = data
            else:
                payload = payload_model.model_validate(dict(data or {}))
            return Node(
                id=node_id,
                name=name,
                type=entity_type,
                scope=scope,
                status=status,
                location=location,
                data=payload,
            )
        except ValidationError as exc:
            raise MalformedPayloadError(entity_type.value, _summarize(exc), node_id) from exc

    create.__name__ = f"create_{entity_type.name.lower()}_node"
    return create


NODE_FACTORIES: Dict[EntityType, NodeFactory] = {
    EntityType.MODULE: _node_factory(EntityType.MODULE),
    EntityType.CLASS: _node_factory(EntityType.CLASS),
    EntityType.INTERFACE: _node_factory(EntityType.INTERFACE),
    EntityType.METHOD: _node_factory(EntityType.METHOD),
    EntityType.FUNCTION: _node_factory(EntityType.FUNCTION),
    EntityType.PROPERTY: _node_factory(EntityType.PROPERTY),
    EntityType.GETTER: _node_factory(EntityType.GETTER),
    EntityType.SETTER: _node_factory(EntityType.SETTER),
    EntityType.CONSTRUCTOR: _node_factory(EntityType.CONSTRUCTOR),
    EntityType.VARIABLE: _node_factory(EntityType.VARIABLE),
    EntityType.ENUM: _node_factory(EntityType.ENUM),
    EntityType.TYPE: _node_factory(EntityType.TYPE),
    EntityType.DECORATOR: _node_factory(EntityType.DECORATOR),
    EntityType.NAMESPACE_IMPORT: _node_factory(EntityType.NAMESPACE_IMPORT),
    EntityType.EXTERNAL_IMPORT_ENTITY: _node_factory(EntityType.EXTERNAL_IMPORT_ENTITY),
    EntityType.EXTERNAL_MODULE: _node_factory(EntityType.EXTERNAL_MODULE),
}


def check_registry() -> None:
    """Fail if the classifier can produce an entity type the registry cannot build."""
    produced = {t.value for t in classifiable_entity_types()}
    registered = {t.value for t in NODE_FACTORIES}
    if produced != registered:
        raise RegistryMismatchError(produced - registered, registered - produced)


check_registry()


def get_factory(entity_type: Union[str, EntityType]) -> NodeFactory:
    try:
        return NODE_FACTORIES[EntityType(entity_type)]
    except (KeyError, ValueError):
        raise UnknownEntityTypeError(str(getattr(entity_type, "value", entity_type))) from None


def create_node(
    entity_type: Union[str, EntityType],
    node_id: str,
    name: str,
    scope: Scope,
    status: NodeStatus,
    location: SourceLocation,
    data: PayloadInput = None,
) -> Node:
    return get_factory(entity_type)(node_id, name, scope, status, location, data)


def create_edge(
    source_id: str,
    label: Relationship,
    target_id: str,
    alias: Optional[str] = None,
) -> Edge:
    return Edge(
        id=generate_edge_id(source_id, label, target_id),
        source=source_id,
        target=target_id,
        label=label,
        alias=alias,
    )
