"""Core graph models shared by every mapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_validator

from .payloads import PAYLOAD_MODELS


class EntityType(str, Enum):
    MODULE = "module"
    CLASS = "class"
    INTERFACE = "interface"
    METHOD = "method"
    FUNCTION = "function"
    PROPERTY = "property"
    GETTER = "getter"
    SETTER = "setter"
    CONSTRUCTOR = "constructor"
    VARIABLE = "variable"
    ENUM = "enum"
    TYPE = "type"
    DECORATOR = "decorator"
    NAMESPACE_IMPORT = "namespace-import"
    EXTERNAL_IMPORT_ENTITY = "external-import-entity"
    EXTERNAL_MODULE = "external-module"


class Scope(str, Enum):
    INTERNAL = "internal"
    NAMED_EXPORT = "named-export"
    DEFAULT_EXPORT = "default-export"
    EXTERNAL = "external"


class NodeStatus(str, Enum):
    RESOLVED = "resolved"
    PLACEHOLDER = "placeholder"


class Relationship(str, Enum):
    CONTAINS = "contains"
    EXPORTS_NAMED = "exports-named"
    EXPORTS_DEFAULT = "exports-default"
    IMPORTS_NAMED = "imports-named"
    IMPORTS_DEFAULT = "imports-default"
    IMPORTS_NAMESPACE = "imports-namespace"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    ALIAS_OF = "alias-of"
    RE_EXPORTS = "re-exports"


if set(PAYLOAD_MODELS) != {member.value for member in EntityType}:
    raise RuntimeError("payload models do not cover every entity type")


class SourceLocation(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    file_path: str
    start_line: int = Field(ge=0)
    start_column: int = Field(ge=0)
    end_line: int = Field(ge=0)
    end_column: int = Field(ge=0)


class Node(BaseModel):
    """One entity in a file's graph fragment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: EntityType
    scope: Scope
    status: NodeStatus
    location: SourceLocation
    data: SerializeAsAny[BaseModel]

    @model_validator(mode="after")
    def _check_consistency(self) -> "Node":
        if self.status is NodeStatus.PLACEHOLDER and self.scope is not Scope.INTERNAL:
            raise ValueError("placeholder nodes must have internal scope")
        expected = PAYLOAD_MODELS[self.type.value]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"{self.type.value} node carries {type(self.data).__name__}, "
                f"expected {expected.__name__}"
            )
        return self


class Edge(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    label: Relationship
    alias: Optional[str] = None


@dataclass(frozen=True)
class MappingResult:
    """Nodes, edges and partial module data produced by one mapping step."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.model_dump(mode="json") for n in self.nodes],
            "edges": [e.model_dump(mode="json", exclude_none=True) for e in self.edges],
            "data": self.data,
        }
