"""Typer-based CLI for mapping TypeScript projects to code-graph fragments."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__, config
from .config_manager import CONFIG_FILE, load_project_config, save_config
from .errors import TsGraphError
from .module_mapper import map_module, map_project
from .parser import Project

app = typer.Typer(
    help="tsgraph: map TypeScript modules to code-graph fragments.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"tsgraph v{__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    pkg_logger = logging.getLogger("tsgraph")
    pkg_logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=err_console, show_path=False))


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        config.LOG_LEVEL, "--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
):
    """tsgraph: turn TypeScript source files into typed graph fragments."""
    _configure_logging(log_level)


def _open_project(project_dir: Path) -> Project:
    settings = load_project_config(project_dir)
    try:
        return Project(
            project_dir,
            extensions=settings["extensions"],
            skip_dirs=settings["skip_dirs"],
            tsconfig_name=settings["tsconfig"],
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _write_json(payload: Any, output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    err_console.print(f"[green]✓[/green] Wrote {output}")


@app.command("map")
def map_file(
    project_dir: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root (holds tsconfig.json)."),
    file: Path = typer.Argument(..., help="File to map, absolute or relative to the project root."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the fragment here instead of stdout."),
):
    """Map one file and print its graph fragment as JSON."""
    project = _open_project(project_dir)
    try:
        source_file = project.get_source_file(file)
        fragment = map_module(source_file, project)
    except TsGraphError as exc:
        err_console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=1)
    _write_json(fragment.to_dict(), output)


@app.command("scan")
def scan_project(
    project_dir: Path = typer.Argument(..., exists=True, file_okay=False, help="Project root to scan."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write every fragment to this JSON file."),
):
    """Map every TypeScript file under a project and summarize the result."""
    project = _open_project(project_dir)
    project.add_directory()
    scanned = project.source_files
    fragments = map_project(project)

    if not fragments:
        console.print("[yellow]No TypeScript files mapped.[/yellow]")
        raise typer.Exit(code=0)

    table = Table(title="Mapped modules", show_header=True, show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Kind", width=10)
    table.add_column("Nodes", justify="right")
    table.add_column("Edges", justify="right")

    total_nodes = total_edges = 0
    for path, fragment in fragments.items():
        table.add_row(
            os.path.relpath(path, project.root),
            fragment.data["module_kind"],
            str(len(fragment.nodes)),
            str(len(fragment.edges)),
        )
        total_nodes += len(fragment.nodes)
        total_edges += len(fragment.edges)
    console.print(table)

    skipped = sum(1 for f in scanned if f.file_path not in fragments)
    console.print(
        f"Files: {len(fragments)} | Nodes: {total_nodes} | Edges: {total_edges}"
        + (f" | [red]Skipped: {skipped}[/red]" if skipped > 0 else "")
    )

    if output is not None:
        payload: Dict[str, Any] = {path: fragment.to_dict() for path, fragment in fragments.items()}
        _write_json(payload, output)


@app.command("show-config")
def show_config(
    project_dir: Optional[Path] = typer.Argument(None, exists=True, file_okay=False, help="Project whose tsgraph.toml to include."),
):
    """Show the effective configuration."""
    settings = load_project_config(project_dir or Path.cwd())
    console.print(f"[bold]User config:[/bold] {CONFIG_FILE}")
    for key, value in settings.items():
        console.print(f"  {key} = {value!r}")


@app.command("set-log-level")
def set_log_level(
    level: str = typer.Argument(..., help="DEBUG, INFO, WARNING or ERROR."),
):
    """Persist the default log level in the user config file."""
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        raise typer.BadParameter(f"Unknown log level '{level}'")
    target = save_config({"log_level": level}, CONFIG_FILE)
    console.print(f"[green]✓[/green] log_level = {level!r} saved to {target}")
