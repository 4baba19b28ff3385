# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/cli.py

"""Command line interface for layer-diff."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.filesize import decimal
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .archive import read_docker_archive
from .ci import CIRules, evaluate, passed
from .filenode import FileNode
from .image import Image, ImageAnalysis, analyze_image
from .types import WHITEOUT_PREFIX, DiffType, NodeKind

app = typer.Typer(help="Inspect container image layers for wasted space")
console = Console()
err_console = Console(stderr=True)

DIFF_STYLES = {
    DiffType.ADDED: "green",
    DiffType.REMOVED: "red",
    DiffType.MODIFIED: "yellow",
    DiffType.UNMODIFIED: "white",
}


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load(archive: Path, workers: int | None, debug: bool) -> ImageAnalysis:
    _configure_logging(debug)
    if debug:
        err_console.print(f"[blue]Loading image archive:[/blue] {archive}")
    image = read_docker_archive(archive)
    return analyze_image(image, max_workers=workers)


@app.command()
def report(
    archive: Path = typer.Argument(..., help="Path to a `docker save` tarball"),
    output_format: str = typer.Option("table", "--format", "-f",
                                      help="Output format: table, json"),
    limit: int = typer.Option(50, "--limit", "-n",
                              help="Rows to show in the table (0 for all)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w",
                                          help="Threads used to build layer trees"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Show the image efficiency score and the paths that waste space."""
    try:
        analysis = _load(archive, workers, debug)

        if output_format == "json":
            typer.echo(json.dumps({'image': analysis.image.name,
                               **analysis.efficiency.to_dict()}, indent=2))
        elif output_format == "table":
            _print_report(analysis, limit)
        else:
            typer.echo(f"Unknown format: {output_format}", err=True)
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def layers(
    archive: Path = typer.Argument(..., help="Path to a `docker save` tarball"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """List the image's layers with their size and build command."""
    try:
        _configure_logging(debug)
        image = read_docker_archive(archive)
        _print_layers(image)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def tree(
    archive: Path = typer.Argument(..., help="Path to a `docker save` tarball"),
    layer: Optional[int] = typer.Option(None, "--layer", "-l",
                                        help="Show one layer's changes instead of the squashed image"),
    changes_only: bool = typer.Option(False, "--changes-only", "-c",
                                      help="Hide unmodified paths"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Print the squashed filesystem, or what a single layer changed."""
    try:
        _configure_logging(debug)
        image = read_docker_archive(archive)
        if layer is None:
            file_tree = image.squash()
            title = f"{image.name} (squashed)"
        else:
            file_tree = image.layer_changes(layer)
            title = f"{image.name} layer {layer}: {image.layers[layer].command}"

        view = Tree(f"[bold]{title}[/bold]")
        _add_children(view, file_tree.root, changes_only)
        console.print(view)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def ci(
    archive: Path = typer.Argument(..., help="Path to a `docker save` tarball"),
    lowest_efficiency: Optional[float] = typer.Option(
        0.9, "--lowest-efficiency",
        help="Fail when the efficiency score is below this ratio"),
    highest_wasted_bytes: Optional[int] = typer.Option(
        None, "--highest-wasted-bytes",
        help="Fail when more bytes than this are wasted"),
    highest_user_wasted_percent: Optional[float] = typer.Option(
        0.1, "--highest-user-wasted-percent",
        help="Fail when wasted bytes exceed this ratio of bytes above the base layer"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w",
                                          help="Threads used to build layer trees"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output")
) -> None:
    """Check the image against efficiency rules; exit 1 on any failure."""
    try:
        analysis = _load(archive, workers, debug)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    rules = CIRules(
        lowest_efficiency=lowest_efficiency,
        highest_wasted_bytes=highest_wasted_bytes,
        highest_user_wasted_percent=highest_user_wasted_percent,
    )
    results = evaluate(analysis.efficiency, rules)

    console.print(f"[bold]Evaluating image:[/bold] {analysis.image.name}")
    for result in results:
        style = {"pass": "green", "fail": "red", "skip": "yellow"}[result.status]
        line = f"  [{style}]{result.status.upper()}[/{style}]: {result.name}"
        if result.message:
            line += f": {result.message}"
        console.print(line)

    if not passed(results):
        console.print("[red]Result: FAIL[/red]")
        raise typer.Exit(1)
    console.print("[green]Result: PASS[/green]")


def _print_report(analysis: ImageAnalysis, limit: int) -> None:
    """Print the image details pane: summary lines, then worst paths first."""
    efficiency = analysis.efficiency
    console.print(f"[bold]Image name:[/bold] {analysis.image.name}")
    console.print(f"[bold]Total Image size:[/bold] {decimal(efficiency.image_size)}")
    console.print(f"[bold]Potential wasted space:[/bold] {decimal(efficiency.wasted_bytes)}")
    console.print(f"[bold]Image efficiency score:[/bold] {int(100.0 * efficiency.score)} %")

    table = Table(title="Inefficient Files")
    table.add_column("Count", style="cyan", justify="right")
    table.add_column("Total Space", style="magenta", justify="right")
    table.add_column("Path", style="green")

    worst_first = list(reversed(efficiency.inefficiencies))
    shown = worst_first[:limit] if limit > 0 else worst_first
    for data in shown:
        table.add_row(str(data.count), decimal(data.cumulative_size), data.path)

    if len(worst_first) > len(shown):
        table.add_row("...", "", f"({len(worst_first) - len(shown)} more)")

    console.print(table)


def _print_layers(image: Image) -> None:
    table = Table(title=f"Layers of {image.name}")
    table.add_column("Index", style="cyan", justify="right")
    table.add_column("Id", style="yellow")
    table.add_column("Size", style="magenta", justify="right")
    table.add_column("Command", style="green")

    for layer in image.layers:
        command = layer.command
        if len(command) > 60:
            command = command[:60] + "..."
        table.add_row(str(layer.index), layer.short_id, decimal(layer.size), command)

    console.print(table)


def _node_label(node: FileNode) -> str:
    match node.kind:
        case NodeKind.DIRECTORY:
            return f"{node.name}/"
        case NodeKind.SYMLINK:
            return f"{node.name} → {node.link_target}"
        case NodeKind.FILE:
            return f"{node.name} ({decimal(node.size)})"
        case NodeKind.WHITEOUT:
            return f"{node.name[len(WHITEOUT_PREFIX):]} (deleted)"
        case NodeKind.OPAQUE_WHITEOUT:
            return "* (directory contents replaced)"


def _add_children(view: Tree, node: FileNode, changes_only: bool) -> None:
    for child in node.sorted_children():
        diff_type = DiffType.REMOVED if child.kind.is_whiteout else child.diff_type
        changed = diff_type is not DiffType.UNMODIFIED
        if changes_only and not changed and not _has_changes(child):
            continue
        style = DIFF_STYLES[diff_type]
        branch = view.add(f"[{style}]{escape(_node_label(child))}[/{style}]")
        _add_children(branch, child, changes_only)


def _has_changes(node: FileNode) -> bool:
    return any(child.kind.is_whiteout or child.diff_type is not DiffType.UNMODIFIED
               for child in node.walk())


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
