"""Click CLI with context, validate, index, graph, tree and serve subcommands."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path

import click

from project_context.errors import ProjectRootError
from project_context.formatter import generate_folder_tree
from project_context.models import Completeness, ContextConfig, ContextRequest, Scope
from project_context.paths import normalize_project_path
from project_context.pipeline import (
    build_context,
    get_dependency_graph,
    get_project_analysis,
    open_index,
    validate_context,
)

_SCOPE_CHOICES = [s.value for s in Scope]
_COMPLETENESS_CHOICES = [c.value for c in Completeness]
_DEFAULTS = ContextConfig()


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _open_index(root: str):
    try:
        return open_index(root)
    except ProjectRootError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """project-context: Assemble query-focused context documents from a codebase."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("query")
@click.argument("root", default=".")
@click.option("--scope", "-s", type=click.Choice(_SCOPE_CHOICES), default=_DEFAULTS.scope, help="Selection scope")
@click.option(
    "--completeness", "-c", type=click.Choice(_COMPLETENESS_CHOICES),
    default=_DEFAULTS.completeness, help="Requested detail level (informational, does not change the output)",
)
@click.option("--max-tokens", "-m", type=int, default=_DEFAULTS.max_tokens, help="Token budget (0 disables compression)")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
def context(query: str, root: str, scope: str, completeness: str, max_tokens: int, as_json: bool):
    """Build a context document for QUERY from the project at ROOT."""
    request = ContextRequest(
        query=query,
        project_root=root,
        scope=scope,
        completeness=completeness,
        max_tokens=max_tokens or None,
    )
    result = build_context(request)

    if as_json:
        _echo_json(asdict(result))
    else:
        click.echo(result.document)
        meta = result.metadata
        click.echo(
            click.style(
                f"\n{meta.file_count} files, {meta.line_count} lines, "
                f"~{meta.token_estimate} tokens ({result.compression_level})",
                dim=True,
            ),
            err=True,
        )

    if result.compression_level == "error":
        raise SystemExit(1)


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def validate(document: Path, query: str, as_json: bool):
    """Score a context DOCUMENT file against QUERY."""
    result = validate_context(document.read_text(encoding="utf-8"), query)

    if as_json:
        _echo_json(asdict(result))
        return

    status = click.style("complete", fg="green") if result.is_complete else click.style("incomplete", fg="yellow")
    click.echo(f"Completeness: {result.completeness_score:.2f} ({status})")
    click.echo(f"Confidence:   {result.confidence_score:.2f}")
    for title, entries, color in (
        ("Strengths", result.strengths, "green"),
        ("Missing", result.missing_elements, "red"),
        ("Warnings", result.warnings, "yellow"),
        ("Suggestions", result.suggestions, "cyan"),
    ):
        if entries:
            click.echo(click.style(f"\n{title}:", fg=color))
            for entry in entries:
                click.echo(f"  - {entry}")


@cli.command()
@click.argument("root", default=".")
@click.option("--watch", "-w", is_flag=True, help="Keep re-indexing files as they change")
def index(root: str, watch: bool):
    """Index the project at ROOT and print statistics."""
    project = _open_index(root)
    stats = project.stats()
    click.echo(f"Indexed {stats.files_indexed} files under {project.project_root}")
    click.echo(f"  functions:    {stats.functions_found}")
    click.echo(f"  classes:      {stats.classes_found}")
    click.echo(f"  modules:      {stats.modules_found}")
    click.echo(f"  dependencies: {stats.dependencies_mapped}")

    if not watch:
        return

    from project_context.watcher import watch_project

    def report(paths: list[str]) -> None:
        for p in paths:
            click.echo(f"  re-indexed {p}")

    click.echo("Watching for changes (Ctrl+C to stop)...")
    try:
        asyncio.run(watch_project(project, on_change=report))
    except KeyboardInterrupt:
        pass


@cli.command()
@click.argument("target")
@click.argument("root", default=".")
@click.option("--tests/--no-tests", "include_tests", default=True, help="Include test files as dependents")
@click.option("--json", "as_json", is_flag=True, help="Print nodes and edges as JSON")
def graph(target: str, root: str, include_tests: bool, as_json: bool):
    """Show dependencies and dependents of TARGET."""
    project = _open_index(root)
    result = get_dependency_graph(target, root, include_tests, index=project)

    if as_json:
        _echo_json(result.to_dict())
        return
    if not result.graph.nodes:
        raise click.ClickException(f"Target not found: {target}")

    click.echo(click.style(result.target, fg="cyan"))
    click.echo("Dependencies:")
    for dep in result.dependencies or ["(none)"]:
        click.echo(f"  → {dep}")
    click.echo("Dependents:")
    for dep in result.dependents or ["(none)"]:
        click.echo(f"  ← {dep}")


@cli.command()
@click.argument("root", default=".")
def tree(root: str):
    """Print the folder tree of ROOT."""
    click.echo(generate_folder_tree(normalize_project_path(root).normalized_path))


@cli.command()
@click.argument("root", default=".")
def analyze(root: str):
    """Print the project insight report as JSON."""
    project = _open_index(root)
    _echo_json(get_project_analysis(root, index=project))


@cli.command()
@click.argument("query")
@click.argument("root", default=".")
def search(query: str, root: str):
    """List files whose path, functions or classes match QUERY."""
    matches = _open_index(root).search_files(query)
    if not matches:
        click.echo("No matching files found.")
        return
    for f in matches:
        click.echo(f"{f.relative_path}  {click.style(f.language.value, dim=True)}")


@cli.command()
@click.argument("symbol")
@click.argument("root", default=".")
def refs(symbol: str, root: str):
    """Find definitions and imports of SYMBOL."""
    references = _open_index(root).find_references(symbol)
    if not references:
        click.echo(f"No references to {symbol} found.")
        return
    for entry in references:
        click.echo(click.style(entry["file"], fg="cyan"))
        for ref in entry["references"]:
            click.echo(f"  {ref['type']}  L{ref['line']}")


@cli.command()
@click.option("--port", "-p", default=8420, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'project-context[web]'"
        )

    from project_context.web import create_app

    click.echo(f"Starting project-context API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
