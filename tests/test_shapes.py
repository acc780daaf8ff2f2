"""Tests for entity payload extraction."""

import pytest

from tsgraph.models import EntityType
from tsgraph.shapes import extends_names, extract_entity_data, implements_names, type_alias_target


@pytest.fixture
def parse(ts_parser):
    def _parse(source: str):
        return ts_parser.parse("/src/shapes.ts", source)

    return _parse


def _member(decl, kind, name):
    return next(m for m in decl.members() if m.kind == kind and m.name == name)


def test_function_signature(parse):
    decl = parse(
        "export async function load<T extends object = {}>(url: string, retries = 3, ...rest: T[]): Promise<T> {}"
    ).declarations["load"]

    data = extract_entity_data(EntityType.FUNCTION, decl)
    signature = data["signature"]

    assert data["declaration_style"] == "standard"
    assert signature["capability"] == "async"
    assert signature["generics"] == [
        {"name": "T", "constraint": {"type": "extends", "value": "object"}, "default_type": "{}"}
    ]
    assert [p["name"] for p in signature["parameters"]] == ["url", "retries", "rest"]
    url, retries, rest = signature["parameters"]
    assert url["type"] == {"base_type": "string", "type_arguments": []}
    assert retries["is_optional"] is True
    assert retries["default_value"] == "3"
    assert rest["is_rest"] is True
    assert signature["return_type"] == {
        "base_type": "Promise",
        "type_arguments": [{"base_type": "T", "type_arguments": []}],
    }


def test_generator_capability(parse):
    decl = parse("function* ids() { yield 1; }").declarations["ids"]
    assert extract_entity_data(EntityType.FUNCTION, decl)["signature"]["capability"] == "generator"


def test_class_shape(parse):
    decl = parse("""
        @Injectable()
        export class Repo<T> extends Base<T> implements Store, Disposable {
          items: T[] = [];
          constructor(private db: Db) { super(); }
          find(id: string): T | undefined { return undefined; }
        }
    """).declarations["Repo"]

    data = extract_entity_data(EntityType.CLASS, decl)

    assert data["decorators"] == ["Injectable"]
    assert data["implements"] == ["Store", "Disposable"]
    assert data["structure"]["extends"] == ["Base"]
    assert data["structure"]["generics"] == [{"name": "T"}]
    assert data["structure"]["member_names"] == {"methods": ["find"], "properties": ["items"]}
    assert len(data["constructors"]) == 1
    assert data["constructors"][0]["parameters"][0]["name"] == "db"


def test_heritage_names(parse):
    source_file = parse("""
        interface A extends B, C<string> {}
        class D extends E implements F {}
    """)

    assert extends_names(source_file.declarations["A"]) == ["B", "C"]
    assert extends_names(source_file.declarations["D"]) == ["E"]
    assert implements_names(source_file.declarations["D"]) == ["F"]


def test_member_modifiers(parse):
    decl = parse("""
        abstract class Shape {
          protected static readonly sides?: number;
          abstract area(): number;
          get name(): string { return "shape"; }
        }
    """).declarations["Shape"]

    sides = extract_entity_data(EntityType.PROPERTY, _member(decl, "public_field_definition", "sides"))
    area = extract_entity_data(EntityType.METHOD, _member(decl, "abstract_method_signature", "area"))
    name = extract_entity_data(EntityType.GETTER, _member(decl, "get_accessor", "name"))

    assert sides["member"]["accessibility"] == "protected"
    assert sides["member"]["modifiers"] == {
        "readonly": True, "optional": True, "abstract": False, "static": True,
    }
    assert sides["datatype"]["base_type"] == "number"
    assert area["member"]["modifiers"]["abstract"] is True
    assert name["datatype"] == {"base_type": "string", "type_arguments": []}


def test_variable_shapes(parse):
    source_file = parse("""
        export const { a, b: renamed } = source;
        let counter: number;
        var legacy = 1;
        export const handler = async () => {};
    """)

    destructured = extract_entity_data(EntityType.VARIABLE, source_file.declarations["renamed"])
    counter = extract_entity_data(EntityType.VARIABLE, source_file.declarations["counter"])
    legacy = extract_entity_data(EntityType.VARIABLE, source_file.declarations["legacy"])

    assert destructured["destructuring"] == {"kind": "object", "names": ["a", "renamed"]}
    assert destructured["is_readonly"] is True
    assert counter["declaration_kind"] == "let"
    assert counter["has_initializer"] is False
    assert counter["datatype"]["base_type"] == "number"
    assert legacy["declaration_kind"] == "var"
    assert legacy["destructuring"]["kind"] == "none"


def test_ambient_variable(parse):
    decl = parse("declare const VERSION: string;").declarations["VERSION"]
    assert extract_entity_data(EntityType.VARIABLE, decl)["declaration_kind"] == "declare"


def test_enum_members(parse):
    decl = parse('enum Level { Low, Mid = 5, High = "high", Hex = 0x10 }').declarations["Level"]

    assert extract_entity_data(EntityType.ENUM, decl)["members"] == [
        {"name": "Low"},
        {"name": "Mid", "value": 5},
        {"name": "High", "value": "high"},
        {"name": "Hex", "value": 16},
    ]


@pytest.mark.parametrize(
    "source, kind, key",
    [
        ("type A = string;", "alias", "base_type"),
        ("type A = B | C;", "union", "union_types"),
        ("type A = B & C;", "intersection", "intersection_types"),
        ('type A = "on";', "literal", "literal_values"),
        ("type A = [string, number];", "tuple", "tuple_types"),
        ("type A = keyof B;", "keyof", "keyof_type"),
        ('type A = B["c"];', "indexed", "indexed_type"),
        ("type A<T> = T extends string ? 1 : 2;", "conditional", "conditional_type"),
        ("type A = { x: number; y?: string };", "object", "properties"),
    ],
)
def test_type_alias_kinds(parse, source, kind, key):
    decl = parse(source).declarations["A"]

    data = extract_entity_data(EntityType.TYPE, decl)

    assert data["kind"] == kind
    assert data[key]


def test_union_members(parse):
    decl = parse("type A = B | C | undefined;").declarations["A"]
    data = extract_entity_data(EntityType.TYPE, decl)
    assert [t["base_type"] for t in data["union_types"]] == ["B", "C", "undefined"]


def test_type_alias_target(parse):
    source_file = parse("type A = B;\ntype C = ns.D;\ntype E = Partial<F>;\ntype G = string;")

    assert type_alias_target(source_file.declarations["A"]) == "B"
    assert type_alias_target(source_file.declarations["C"]) == "ns.D"
    assert type_alias_target(source_file.declarations["E"]) is None
    assert type_alias_target(source_file.declarations["G"]) is None
