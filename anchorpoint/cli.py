"""CLI for the path-geometry engine.

Usage:
    python -m anchorpoint.cli smooth "M 0 0 L 50 20 L 100 0"
    python -m anchorpoint.cli simplify "M 0 0 L 1 0.1 L 2 0 L 100 0" --tolerance 1
    python -m anchorpoint.cli simplify @drawing.svg --curves
    python -m anchorpoint.cli actions "M 0 0 L 50 0 L 100 50" --anchor 1
    python -m anchorpoint.cli normalize "M 0 0 L 50 0 L 100 50" -a 1 --action convert-and-normalize
"""

from pathlib import Path as FilePath

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from anchorpoint.errors import AnchorpointError
from anchorpoint.geometry import grid_snapper
from anchorpoint.interpolation import Snap
from anchorpoint.logging_config import setup_logging_from_settings
from anchorpoint.normalize import AnchorNormalizer
from anchorpoint.simplify import simplify as simplify_commands
from anchorpoint.smooth import smooth as smooth_commands
from anchorpoint.svg import extract_path_data, format_path_d, parse_path_d
from anchorpoint.types import Command, NormalizeActionType

app = typer.Typer(
    name="anchorpoint",
    help="Smooth, simplify and normalize SVG path data",
    add_completion=False,
)
console = Console()


@app.callback()
def main() -> None:
    setup_logging_from_settings()


def _load_commands(source: str) -> list[Command]:
    """Read path data from a d-string or an @file.svg reference."""
    if source.startswith("@"):
        svg_file = FilePath(source[1:])
        try:
            text = svg_file.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Cannot read {svg_file}: {e}[/red]")
            raise typer.Exit(1) from e
        paths = extract_path_data(text)
        if not paths:
            console.print(f"[red]No <path> elements in {svg_file}[/red]")
            raise typer.Exit(1)
        source = paths[0]

    commands = parse_path_d(source, strict=True)
    if not commands:
        console.print("[red]Path data is empty[/red]")
        raise typer.Exit(1)
    return commands


def _snapper(grid: float | None) -> Snap | None:
    if grid is None:
        return None
    if grid <= 0:
        console.print("[red]Grid size must be positive[/red]")
        raise typer.Exit(1)
    return grid_snapper(grid)


def _anchor_id(commands: list[Command], index: int) -> str:
    if not 0 <= index < len(commands):
        console.print(f"[red]Anchor index out of range: {index} (0-{len(commands) - 1})[/red]")
        raise typer.Exit(1)
    return commands[index].id


@app.command("smooth")
def smooth_cmd(
    path: str = typer.Argument(..., help="SVG path data or @file.svg"),
    grid: float | None = typer.Option(None, "--grid", "-g", help="Snap output to this grid"),
    precision: int = typer.Option(3, "--precision", "-p", help="Decimal places in output"),
) -> None:
    """Fit a Catmull-Rom spline through the path's anchors."""
    try:
        commands = _load_commands(path)
        result = smooth_commands(commands, snap=_snapper(grid))
    except AnchorpointError as e:
        console.print(f"[red]Failed to smooth path: {e}[/red]")
        raise typer.Exit(1) from e
    console.print(format_path_d(result, precision), soft_wrap=True)


@app.command("simplify")
def simplify_cmd(
    path: str = typer.Argument(..., help="SVG path data or @file.svg"),
    tolerance: float | None = typer.Option(None, "--tolerance", "-t", help="Max deviation"),
    min_spacing: float | None = typer.Option(
        None, "--min-spacing", "-s", help="Drop points closer than this"
    ),
    curves: bool = typer.Option(False, "--curves", help="Re-fit the result with curves"),
    grid: float | None = typer.Option(None, "--grid", "-g", help="Snap output to this grid"),
    precision: int = typer.Option(3, "--precision", "-p", help="Decimal places in output"),
) -> None:
    """Reduce the path to the fewest anchors within tolerance.

    Examples:
        anchorpoint simplify "M 0 0 L 1 0.1 L 2 0 L 100 0"
        anchorpoint simplify @drawing.svg -t 0.5 --curves
    """
    if tolerance is not None and tolerance < 0:
        console.print("[red]Tolerance must not be negative[/red]")
        raise typer.Exit(1)

    try:
        commands = _load_commands(path)
        result = simplify_commands(
            commands, tolerance, min_spacing, fit_curves=curves, snap=_snapper(grid)
        )
    except AnchorpointError as e:
        console.print(f"[red]Failed to simplify path: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(format_path_d(result, precision), soft_wrap=True)
    console.print(f"[dim]{len(commands)} → {len(result)} commands[/dim]", highlight=False)


@app.command("actions")
def actions_cmd(
    path: str = typer.Argument(..., help="SVG path data or @file.svg"),
    anchor: int = typer.Option(..., "--anchor", "-a", help="Index of the anchor command"),
    modifier: bool = typer.Option(False, "--modifier", "-m", help="Alternate behavior held"),
) -> None:
    """List normalization actions offered for an anchor."""
    try:
        commands = _load_commands(path)
    except AnchorpointError as e:
        console.print(f"[red]Failed to read path: {e}[/red]")
        raise typer.Exit(1) from e

    normalizer = AnchorNormalizer()
    normalizer.select(_anchor_id(commands, anchor))
    normalizer.set_modifier(modifier)
    info = normalizer.analyze(commands)
    actions = normalizer.available_actions(commands)

    if info is not None:
        console.print(
            f"Anchor {anchor}: incoming [cyan]{info.incoming.value}[/cyan], "
            f"outgoing [cyan]{info.outgoing.value}[/cyan]"
        )
    if not actions:
        console.print("[yellow]No actions available[/yellow]")
        return

    table = Table(title="Actions", box=box.ROUNDED)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Label", style="green")
    table.add_column("Description")
    for action in actions:
        table.add_row(action.type.value, action.label, action.description)
    console.print(table)


@app.command("normalize")
def normalize_cmd(
    path: str = typer.Argument(..., help="SVG path data or @file.svg"),
    anchor: int = typer.Option(..., "--anchor", "-a", help="Index of the anchor command"),
    action: NormalizeActionType = typer.Option(..., "--action", help="Action to apply"),
    modifier: bool = typer.Option(False, "--modifier", "-m", help="Alternate behavior held"),
    precision: int = typer.Option(3, "--precision", "-p", help="Decimal places in output"),
) -> None:
    """Apply a normalization action to one anchor."""
    try:
        commands = _load_commands(path)
        anchor_id = _anchor_id(commands, anchor)
        normalizer = AnchorNormalizer()
        normalizer.set_modifier(modifier)
        offered = {a.type for a in normalizer.available_actions(commands, anchor_id)}
        if action not in offered:
            console.print(f"[red]{action.value} is not available for anchor {anchor}[/red]")
            raise typer.Exit(1)
        result = normalizer.execute(commands, action, anchor_id)
    except AnchorpointError as e:
        console.print(f"[red]Failed to normalize anchor: {e}[/red]")
        raise typer.Exit(1) from e

    if result == commands:
        console.print("[yellow]Geometry is degenerate, path unchanged[/yellow]")
    console.print(format_path_d(result, precision), soft_wrap=True)


# Entry point
if __name__ == "__main__":
    app()
