"""Typed entity payloads carried in ``Node.data``.

Every entity type has its own model.  Payloads never inherit from one another;
the shared fragments (``StructureData``, ``CallableData``,
``StructureMemberData``) are embedded by value under a named field.  Every
field has a default so a factory can build a payload from partial data.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

_STRICT = ConfigDict(extra="forbid", frozen=True)

ConstraintKind = Literal["extends", "super", "equals", "none"]
Accessibility = Literal["public", "protected", "private"]
Capability = Literal["sync", "async", "generator", "async_generator"]
DeclarationStyle = Literal["standard", "function expression", "arrow function", "unresolved"]
DeclarationKind = Literal["let", "const", "var", "declare", "unresolved"]
DestructuringKind = Literal["object", "array", "none", "unresolved"]
TypeKind = Literal[
    "alias", "union", "intersection", "mapped", "conditional", "literal", "tuple",
    "keyof", "indexed", "inferred", "template", "object", "unresolved",
]
DecoratorTarget = Literal["class", "method", "property", "parameter", "accessor", "unresolved"]
ModuleKind = Literal["es6", "namespace", "ambient", "unresolved"]


# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------

class GenericTypeReference(BaseModel):
    model_config = _STRICT

    base_type: str = "void"
    type_arguments: List[GenericTypeReference] = Field(default_factory=list)


class GenericConstraint(BaseModel):
    model_config = _STRICT

    type: ConstraintKind = "none"
    value: Optional[str] = None


class GenericDeclaration(BaseModel):
    model_config = _STRICT

    name: str = Field(min_length=1)
    constraint: GenericConstraint = Field(default_factory=GenericConstraint)
    default_type: str = "any"


class MemberNames(BaseModel):
    model_config = _STRICT

    methods: List[str] = Field(default_factory=list)
    properties: List[str] = Field(default_factory=list)


class StructureData(BaseModel):
    """Shape shared by classes and interfaces."""

    model_config = _STRICT

    generics: List[GenericDeclaration] = Field(default_factory=list)
    extends: List[str] = Field(default_factory=list)
    member_names: MemberNames = Field(default_factory=MemberNames)


class MemberModifiers(BaseModel):
    model_config = _STRICT

    readonly: bool = False
    optional: bool = False
    abstract: bool = False
    static: bool = False


class StructureMemberData(BaseModel):
    """Shape shared by class and interface members."""

    model_config = _STRICT

    modifiers: MemberModifiers = Field(default_factory=MemberModifiers)
    accessibility: Accessibility = "public"
    decorators: List[str] = Field(default_factory=list)


class Parameter(BaseModel):
    model_config = _STRICT

    name: str = Field(min_length=1)
    type: GenericTypeReference = Field(default_factory=GenericTypeReference)
    is_rest: bool = False
    is_optional: bool = False
    default_value: str = ""
    decorators: List[str] = Field(default_factory=list)


class CallableData(BaseModel):
    """Shape shared by functions, methods, constructors and setters."""

    model_config = _STRICT

    parameters: List[Parameter] = Field(default_factory=list)
    return_type: GenericTypeReference = Field(default_factory=GenericTypeReference)
    generics: List[GenericDeclaration] = Field(default_factory=list)
    capability: Capability = "sync"


def _unresolved_type() -> GenericTypeReference:
    return GenericTypeReference(base_type="unresolved")


# ---------------------------------------------------------------------------
# Per-entity payloads
# ---------------------------------------------------------------------------

class ClassData(BaseModel):
    model_config = _STRICT

    structure: StructureData = Field(default_factory=StructureData)
    decorators: List[str] = Field(default_factory=list)
    implements: List[str] = Field(default_factory=list)
    constructors: List[CallableData] = Field(default_factory=list)


class InterfaceData(BaseModel):
    model_config = _STRICT

    structure: StructureData = Field(default_factory=StructureData)


class FunctionData(BaseModel):
    model_config = _STRICT

    signature: CallableData = Field(default_factory=CallableData)
    declaration_style: DeclarationStyle = "unresolved"


class MethodData(BaseModel):
    model_config = _STRICT

    signature: CallableData = Field(default_factory=CallableData)
    member: StructureMemberData = Field(default_factory=StructureMemberData)


class ConstructorData(BaseModel):
    model_config = _STRICT

    signature: CallableData = Field(default_factory=CallableData)
    member: StructureMemberData = Field(default_factory=StructureMemberData)


class SetterData(BaseModel):
    model_config = _STRICT

    signature: CallableData = Field(default_factory=CallableData)
    member: StructureMemberData = Field(default_factory=StructureMemberData)


class GetterData(BaseModel):
    model_config = _STRICT

    datatype: GenericTypeReference = Field(default_factory=_unresolved_type)
    member: StructureMemberData = Field(default_factory=StructureMemberData)


class PropertyData(BaseModel):
    model_config = _STRICT

    datatype: GenericTypeReference = Field(default_factory=_unresolved_type)
    has_getter: bool = False
    has_setter: bool = False
    member: StructureMemberData = Field(default_factory=StructureMemberData)


class Destructuring(BaseModel):
    model_config = _STRICT

    kind: DestructuringKind = "unresolved"
    names: List[str] = Field(default_factory=list)


class VariableData(BaseModel):
    model_config = _STRICT

    declaration_kind: DeclarationKind = "unresolved"
    datatype: GenericTypeReference = Field(default_factory=GenericTypeReference)
    has_initializer: bool = False
    is_readonly: bool = False
    destructuring: Destructuring = Field(default_factory=Destructuring)
    decorators: List[str] = Field(default_factory=list)


class EnumMember(BaseModel):
    model_config = _STRICT

    name: str = Field(min_length=1)
    value: Optional[Union[int, float, str]] = None


class EnumData(BaseModel):
    model_config = _STRICT

    members: List[EnumMember] = Field(default_factory=list)


class TypeData(BaseModel):
    model_config = _STRICT

    kind: TypeKind = "unresolved"
    generics: List[GenericDeclaration] = Field(default_factory=list)
    base_type: Optional[GenericTypeReference] = None
    union_types: Optional[List[GenericTypeReference]] = None
    intersection_types: Optional[List[GenericTypeReference]] = None
    literal_values: Optional[List[str]] = None
    tuple_types: Optional[List[GenericTypeReference]] = None
    keyof_type: Optional[GenericTypeReference] = None
    indexed_type: Optional[GenericTypeReference] = None
    conditional_type: Optional[Dict[str, GenericTypeReference]] = None
    properties: Optional[Dict[str, GenericTypeReference]] = None


class DecoratorData(BaseModel):
    model_config = _STRICT

    target: DecoratorTarget = "unresolved"
    arguments: List[str] = Field(default_factory=list)


class NamespaceImportData(BaseModel):
    model_config = _STRICT

    namespace_name: str = "unresolved"


class ExternalImportEntityData(BaseModel):
    model_config = _STRICT

    entity_type: Literal["external-import-entity"] = "external-import-entity"


class ExternalModuleData(BaseModel):
    model_config = _STRICT


# ---------------------------------------------------------------------------
# Module payload
# ---------------------------------------------------------------------------

class NamedImport(BaseModel):
    model_config = _STRICT

    module_path: str
    name: str
    alias: Optional[str] = None


class NamespaceImport(BaseModel):
    model_config = _STRICT

    module_path: str
    alias: str = "namespace"


class DefaultImport(BaseModel):
    model_config = _STRICT

    module_path: str
    alias: Optional[str] = None


class ModuleImports(BaseModel):
    model_config = _STRICT

    named: List[NamedImport] = Field(default_factory=list)
    namespaces: List[NamespaceImport] = Field(default_factory=list)
    defaults: List[DefaultImport] = Field(default_factory=list)


class ExportedEntity(BaseModel):
    model_config = _STRICT

    exported_name: str
    local_name: str
    source: Optional[str] = None


class ReExport(BaseModel):
    model_config = _STRICT

    source: str
    name: str
    alias: Optional[str] = None


class ModuleExports(BaseModel):
    model_config = _STRICT

    named: List[ExportedEntity] = Field(default_factory=list)
    re_exports: List[ReExport] = Field(default_factory=list)
    wildcards: List[str] = Field(default_factory=list)
    default: Optional[ExportedEntity] = None


class ModuleData(BaseModel):
    model_config = _STRICT

    path: str = ""
    module_kind: ModuleKind = "unresolved"
    imports: ModuleImports = Field(default_factory=ModuleImports)
    exports: ModuleExports = Field(default_factory=ModuleExports)


# Keyed by EntityType value; models.py checks this against the enum.
PAYLOAD_MODELS: Dict[str, Type[BaseModel]] = {
    "module": ModuleData,
    "class": ClassData,
    "interface": InterfaceData,
    "method": MethodData,
    "function": FunctionData,
    "property": PropertyData,
    "getter": GetterData,
    "setter": SetterData,
    "constructor": ConstructorData,
    "variable": VariableData,
    "enum": EnumData,
    "type": TypeData,
    "decorator": DecoratorData,
    "namespace-import": NamespaceImportData,
    "external-import-entity": ExternalImportEntityData,
    "external-module": ExternalModuleData,
}


def module_defaults() -> Dict[str, object]:
    """JSON-shaped defaults for module data, the witness used when combining."""
    return ModuleData().model_dump(mode="json")
