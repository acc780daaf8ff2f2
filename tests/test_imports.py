"""Tests for mapping import declarations."""

from tsgraph.import_resolver import default_export_ids, map_default_import
from tsgraph.models import EntityType, NodeStatus, Relationship, Scope


def _by_label(result, label):
    return [e for e in result.edges if e.label is label]


def _node(result, node_id):
    return next(n for n in result.nodes if n.id == node_id)


def test_named_import_targets_defining_file(make_project, map_file, node_id):
    project = make_project({
        "src/user.ts": "export class User {}",
        "src/index.ts": 'export { User } from "./user";',
        "src/app.ts": 'import { User as Person } from "./index";',
    })

    result = map_file(project, "src/app.ts")

    target = node_id("src/user.ts", "class", "User")
    (edge,) = _by_label(result, Relationship.IMPORTS_NAMED)
    assert edge.source == node_id("src/app.ts", "module", "app")
    assert edge.target == target
    assert edge.alias == "Person"

    node = _node(result, target)
    assert node.status is NodeStatus.PLACEHOLDER
    assert node.scope is Scope.INTERNAL
    assert node.location.file_path == ""

    assert result.data["imports"]["named"] == [{"module_path": "./index", "name": "User", "alias": "Person"}]


def test_same_symbol_same_id_from_every_importer(make_project, map_file):
    project = make_project({
        "src/user.ts": "export class User {}",
        "src/a.ts": 'import { User } from "./user";',
        "src/b.ts": 'import { User as U } from "./user";',
    })

    a_targets = {e.target for e in map_file(project, "src/a.ts").edges}
    b_targets = {e.target for e in map_file(project, "src/b.ts").edges}

    assert a_targets == b_targets


def test_external_named_and_default_imports(make_project, map_file):
    project = make_project({"app.ts": 'import express, { Router } from "express";'})

    result = map_file(project, "app.ts")

    (default_edge,) = _by_label(result, Relationship.IMPORTS_DEFAULT)
    (named_edge,) = _by_label(result, Relationship.IMPORTS_NAMED)
    assert default_edge.target == "express::external-import-entity::default"
    assert default_edge.alias == "express"
    assert named_edge.target == "express::external-import-entity::Router"

    router = _node(result, named_edge.target)
    assert router.type is EntityType.EXTERNAL_IMPORT_ENTITY
    assert router.scope is Scope.EXTERNAL
    assert router.status is NodeStatus.RESOLVED
    assert result.data["imports"]["defaults"] == [{"module_path": "express", "alias": "express"}]


def test_dotted_package_names_are_external(make_project, map_file):
    project = make_project({
        "app.ts": (
            'import { io } from "socket.io";\n'
            'import Chart from "chart.js";\n'
            'import * as merge from "lodash.merge";'
        ),
    })

    result = map_file(project, "app.ts")

    assert [e.target for e in _by_label(result, Relationship.IMPORTS_NAMED)] == [
        "socket.io::external-import-entity::io"
    ]
    assert [e.target for e in _by_label(result, Relationship.IMPORTS_DEFAULT)] == [
        "chart.js::external-import-entity::default"
    ]
    assert [e.target for e in _by_label(result, Relationship.IMPORTS_NAMESPACE)] == [
        "lodash.merge::external-module::lodash.merge"
    ]
    assert result.data["imports"]["named"] == [{"module_path": "socket.io", "name": "io", "alias": None}]


def test_default_import_of_local_class(make_project, map_file, node_id):
    project = make_project({
        "logger.ts": "export default class Logger {}",
        "app.ts": 'import Log from "./logger";',
    })

    result = map_file(project, "app.ts")

    (edge,) = _by_label(result, Relationship.IMPORTS_DEFAULT)
    assert edge.target == node_id("logger.ts", "class", "Logger")
    assert edge.alias == "Log"
    assert _node(result, edge.target).type is EntityType.CLASS


def test_default_export_resolved_once_per_import(make_project, monkeypatch):
    project = make_project({
        "logger.ts": "export default class Logger {}",
        "app.ts": 'import Log from "./logger";',
    })
    app = project.get_source_file("app.ts")
    logger_file = project.get_source_file("logger.ts")
    calls = []
    resolve_export = project.resolve_export

    def counting(source_file, exported_name, *args):
        calls.append(exported_name)
        return resolve_export(source_file, exported_name, *args)

    monkeypatch.setattr(project, "resolve_export", counting)
    (imp,) = app.imports

    result = map_default_import(project, app, "app::module::app", imp, logger_file)

    assert calls == ["default"]
    assert len(result.edges) == 1
    assert default_export_ids(None) == []

def test_default_import_of_anonymous_function(make_project, map_file, node_id):
    project = make_project({
        "task.ts": "export default function () {}",
        "app.ts": 'import run from "./task";',
    })

    result = map_file(project, "app.ts")

    (edge,) = _by_label(result, Relationship.IMPORTS_DEFAULT)
    assert edge.target == node_id("task.ts", "function", "default")


def test_default_import_without_default_export(make_project, map_file):
    project = make_project({
        "util.ts": "export const x = 1;",
        "app.ts": 'import util from "./util";',
    })

    result = map_file(project, "app.ts")

    assert _by_label(result, Relationship.IMPORTS_DEFAULT) == []
    assert result.data["imports"]["defaults"] == []


def test_namespace_imports(make_project, map_file, node_id):
    project = make_project({
        "helpers.ts": "export const a = 1;",
        "app.ts": 'import * as helpers from "./helpers";\nimport * as fs from "node:fs";',
    })

    result = map_file(project, "app.ts")

    local, external = _by_label(result, Relationship.IMPORTS_NAMESPACE)
    assert local.target == node_id("helpers.ts", "module", "helpers")
    assert local.alias == "helpers"
    assert external.target == "node:fs::external-module::node:fs"
    assert _node(result, external.target).type is EntityType.EXTERNAL_MODULE

    module_placeholder = _node(result, local.target)
    assert module_placeholder.status is NodeStatus.PLACEHOLDER
    assert module_placeholder.data.path.endswith("helpers.ts")
    assert [ns["alias"] for ns in result.data["imports"]["namespaces"]] == ["helpers", "fs"]


def test_side_effect_and_unresolved_imports_are_skipped(make_project, map_file):
    project = make_project({
        "app.ts": 'import "./polyfills";\nimport { Missing } from "./missing";',
        "user.ts": "export class User {}",
        "other.ts": 'import { Nope } from "./user";',
    })

    assert map_file(project, "app.ts").edges == []
    assert map_file(project, "other.ts").edges == []


def test_sample_service_imports(sample_project, map_file):
    result = map_file(sample_project, "src/services/userService.ts")
    root = sample_project.root

    named = {e.target for e in _by_label(result, Relationship.IMPORTS_NAMED)}
    assert f"{root}/src/models/user.ts::class::User" in named
    assert f"{root}/src/models/user.ts::enum::Role" in named
    assert f"{root}/src/services/baseService.ts::class::BaseService" in named
    assert "express::external-import-entity::Router" in named

    namespaces = {e.alias: e.target for e in _by_label(result, Relationship.IMPORTS_NAMESPACE)}
    assert namespaces["path"] == "path::external-module::path"
    assert namespaces["fmt"] == f"{root}/src/utils/format.ts::module::format"
