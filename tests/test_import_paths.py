"""Tests for module specifier classification and tsconfig loading."""

import json
from pathlib import Path

import pytest

from tsgraph.import_paths import (
    ImportPathType,
    ModuleCategory,
    alias_candidates,
    get_import_path_type,
    get_module_category,
    is_external_specifier,
    is_path_specifier,
    load_tsconfig,
)


class TestImportPathType:
    @pytest.mark.parametrize("specifier", ["./utils/helper", "../config/constants", ".", "../../utils/helper"])
    def test_relative(self, specifier):
        assert get_import_path_type(specifier) is ImportPathType.RELATIVE

    @pytest.mark.parametrize("specifier", ["/src/utils/helper", "C:\\src\\utils\\helper"])
    def test_absolute(self, specifier):
        assert get_import_path_type(specifier) is ImportPathType.ABSOLUTE

    @pytest.mark.parametrize("specifier", ["@/components/Button", "@/utils/helpers/string"])
    def test_alias(self, specifier):
        assert get_import_path_type(specifier) is ImportPathType.ALIAS

    @pytest.mark.parametrize("specifier", ["node:fs", "fs", "path"])
    def test_node_built_in(self, specifier):
        assert get_import_path_type(specifier) is ImportPathType.NODE_BUILT_IN

    @pytest.mark.parametrize(
        "specifier",
        ["react", "lodash", "typescript", "@types/node", "@angular/core", "lodash/fp", "@angular/core/testing"],
    )
    def test_npm(self, specifier):
        assert get_import_path_type(specifier) is ImportPathType.NPM

    def test_empty_specifier(self):
        with pytest.raises(ValueError):
            get_import_path_type("")

    @pytest.mark.parametrize("specifier", ["~/utils/helper", "$invalid/path"])
    def test_unrecognized(self, specifier):
        with pytest.raises(ValueError, match="Unrecognized import type"):
            get_import_path_type(specifier)


class TestModuleCategory:
    @pytest.mark.parametrize("specifier", ["lodash", "fs", "node:path", "@angular/core"])
    def test_external(self, specifier):
        assert get_module_category(specifier) is ModuleCategory.EXTERNAL

    @pytest.mark.parametrize("specifier", ["./utils/helper", "/src/utils/helper", "@/components/Button"])
    def test_internal(self, specifier):
        assert get_module_category(specifier) is ModuleCategory.INTERNAL

    def test_unrecognized_propagates(self):
        with pytest.raises(ValueError, match="Unrecognized import type"):
            get_module_category("~/utils/helper")

    def test_is_external_never_raises(self):
        assert is_external_specifier("react") is True
        assert is_external_specifier("./local") is False
        assert is_external_specifier("~/odd") is False

    @pytest.mark.parametrize(
        "specifier, expected",
        [
            ("./a", True), ("../a", True), ("/abs/a", True), ("C:\\src\\a", True),
            ("@/utils", True), ("socket.io", False), ("@scope/pkg", False), ("~/odd", False),
        ],
    )
    def test_is_path_specifier(self, specifier, expected):
        assert is_path_specifier(specifier) is expected


class TestLoadTsconfig:
    def test_loads_paths(self, temp_dir: Path):
        content = {
            "compilerOptions": {
                "baseUrl": "./src",
                "paths": {"@/components/*": ["components/*"], "@/utils/*": ["utils/*"]},
            },
        }
        (temp_dir / "tsconfig.json").write_text(json.dumps(content))

        assert load_tsconfig(temp_dir) == content

    def test_missing_file(self, temp_dir: Path):
        assert load_tsconfig(temp_dir) is None

    def test_invalid_json(self, temp_dir: Path):
        (temp_dir / "tsconfig.json").write_text("{ invalidJson: true ")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_tsconfig(temp_dir)

    def test_empty_object(self, temp_dir: Path):
        (temp_dir / "tsconfig.json").write_text("{}")
        assert load_tsconfig(temp_dir) == {}

    def test_comments_and_trailing_commas(self, temp_dir: Path):
        (temp_dir / "tsconfig.json").write_text(
            '{\n'
            '  // compiler settings\n'
            '  "compilerOptions": {\n'
            '    /* where aliases start */\n'
            '    "baseUrl": ".",\n'
            '    "paths": { "@/*": ["src/*"], },\n'
            '  },\n'
            '}\n'
        )
        assert load_tsconfig(temp_dir) == {"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]}}}

    def test_custom_file_name(self, temp_dir: Path):
        (temp_dir / "tsconfig.build.json").write_text('{"compilerOptions": {}}')
        assert load_tsconfig(temp_dir, "tsconfig.build.json") == {"compilerOptions": {}}


class TestAliasCandidates:
    def test_wildcard_pattern(self, temp_dir: Path):
        tsconfig = {"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]}}}

        candidates = alias_candidates("@/utils/format", tsconfig, temp_dir)

        assert candidates == [temp_dir / "src" / "utils" / "format"]

    def test_exact_patterns_come_first(self, temp_dir: Path):
        tsconfig = {
            "compilerOptions": {
                "baseUrl": "src",
                "paths": {"config*": ["settings/*"], "config": ["config/index"]},
            },
        }

        candidates = alias_candidates("config", tsconfig, temp_dir)

        assert candidates == [temp_dir / "src" / "config" / "index", temp_dir / "src" / "settings"]

    def test_no_match(self, temp_dir: Path):
        tsconfig = {"compilerOptions": {"paths": {"@/*": ["src/*"]}}}
        assert alias_candidates("lodash", tsconfig, temp_dir) == []

    def test_no_tsconfig(self, temp_dir: Path):
        assert alias_candidates("@/anything", None, temp_dir) == []
