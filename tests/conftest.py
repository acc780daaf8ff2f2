"""Pytest configuration and fixtures for tsgraph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, Optional

import pytest

from tsgraph.identity import generate_node_id
from tsgraph.models import MappingResult
from tsgraph.module_mapper import map_module
from tsgraph.parser import Project, TypeScriptParser, normalize_path


@pytest.fixture(scope="session")
def ts_parser() -> TypeScriptParser:
    """Grammars are loaded once per test session."""
    return TypeScriptParser()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample TypeScript project."""
    return Path(__file__).parent / "fixtures" / "ts_project"


@pytest.fixture
def sample_project(sample_project_path: Path, ts_parser: TypeScriptParser) -> Project:
    """The sample project with every source file loaded."""
    project = Project(sample_project_path, parser=ts_parser)
    project.add_directory()
    return project


@pytest.fixture
def make_project(temp_dir: Path, ts_parser: TypeScriptParser) -> Callable[..., Project]:
    """Write ``{relative path: source}`` into a temp dir and load it as a project."""

    def _make(files: Dict[str, str], tsconfig: Optional[str] = None) -> Project:
        for rel_path, text in files.items():
            target = temp_dir / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        if tsconfig is not None:
            (temp_dir / "tsconfig.json").write_text(tsconfig, encoding="utf-8")
        project = Project(temp_dir, parser=ts_parser)
        project.add_directory()
        return project

    return _make


@pytest.fixture
def node_id(temp_dir: Path) -> Callable[[str, str, str], str]:
    """Node ID for an entity declared in a file under ``temp_dir``."""

    def _node_id(rel_path: str, entity_type: str, name: str) -> str:
        return generate_node_id(normalize_path(temp_dir / rel_path), entity_type, name)

    return _node_id


@pytest.fixture
def map_file() -> Callable[[Project, str], MappingResult]:
    def _map(project: Project, rel_path: str) -> MappingResult:
        return map_module(project.get_source_file(rel_path), project)

    return _map
