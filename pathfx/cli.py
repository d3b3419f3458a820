"""CLI for pathfx - measure paths and run path effects.

Usage:
    python -m pathfx.cli measure "M 0 0 L 100 0"
    python -m pathfx.cli extract "M 0 0 L 100 0" --start 10 --end 60
    python -m pathfx.cli position "M 0 0 L 100 0" 25
    python -m pathfx.cli dash "M 0 0 L 100 0" -i 10 -i 5 --phase 2
    python -m pathfx.cli corner "M 0 0 L 100 0 L 100 100" --radius 20
    python -m pathfx.cli stamp "M 0 0 L 500 0" --advance 50
    python -m pathfx.cli effect "M 0 0 L 500 0" '{"kind": "dash", "intervals": [10, 5]}'
    python -m pathfx.cli clock --hours 3
    python -m pathfx.cli render "M 0 0 L 100 100" --output preview.png
"""

import logging
import time
from pathlib import Path as FilePath

import typer
from pydantic import TypeAdapter, ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from pathfx.canvas import parse_svg_path_d, render_path_to_svg_d
from pathfx.clock import clock_time_from_millis, generate_clock_face_at
from pathfx.config import settings
from pathfx.effects import EffectResult, apply_effect, corner_round, dash, stamp
from pathfx.errors import PathFxError
from pathfx.logging_config import configure_logging
from pathfx.measure import PathMeasure
from pathfx.rendering import (
    RenderOptions,
    options_from_settings,
    render_clock_face,
    render_preview,
)
from pathfx.types import ClockStyle, ClockTime, Path, PathEffect, StampInstance, StampStyle

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pathfx",
    help="Path measurement and path effects",
    add_completion=False,
)
console = Console()

DEFAULT_STAMP_SHAPE = "M 0 -6 L -6 12 L 6 12 Z"

_effect_adapter: TypeAdapter[PathEffect] = TypeAdapter(PathEffect)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Path measurement and path effects."""
    configure_logging(log_level=logging.DEBUG if verbose else None)


def _fail(message: str, error: Exception) -> typer.Exit:
    console.print(f"[red]{message}: {error}[/red]")
    return typer.Exit(1)


def _parse(d: str) -> Path:
    path = parse_svg_path_d(d)
    logger.debug(f"Parsed {path.segment_count} segments in {len(path.contours)} contours")
    return path


def _measure(d: str) -> PathMeasure:
    try:
        return PathMeasure(_parse(d), settings.flatten_tolerance)
    except PathFxError as e:
        raise _fail("Cannot measure path", e) from e


def _print_stamps(stamps: list[StampInstance]) -> None:
    if not stamps:
        console.print("[yellow]No stamps placed[/yellow]")
        return

    table = Table(title=f"Stamps ({len(stamps)})", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Distance", justify="right", style="cyan")
    table.add_column("Position", style="green")
    table.add_column("Rotation", justify="right", style="yellow")
    table.add_column("Bend", justify="right")

    for i, instance in enumerate(stamps):
        transform = instance.transform
        table.add_row(
            str(i),
            f"{instance.distance:.2f}",
            f"({transform.translate.x:.2f}, {transform.translate.y:.2f})",
            f"{transform.rotation_degrees:.2f}",
            f"{transform.bend:.4f}",
        )

    console.print(table)


def _print_result(result: EffectResult) -> None:
    if isinstance(result, Path):
        typer.echo(render_path_to_svg_d(result))
    else:
        _print_stamps(result)


def _run_effect(effect: PathEffect, path: Path) -> EffectResult:
    try:
        return apply_effect(effect, path, settings.flatten_tolerance)
    except PathFxError as e:
        raise _fail("Effect failed", e) from e


# =============================================================================
# Measurement Commands
# =============================================================================


@app.command("measure")
def measure_command(
    d: str = typer.Argument(..., help="SVG path data"),
) -> None:
    """Show the length of a path and of each contour."""
    measure = _measure(d)

    table = Table(title="Path Length", box=box.ROUNDED)
    table.add_column("Contour", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Closed")
    table.add_column("Length", justify="right", style="cyan")

    for i, contour_measure in enumerate(measure.contours):
        table.add_row(
            str(i),
            str(len(contour_measure.contour.segments)),
            "yes" if contour_measure.closed else "no",
            f"{contour_measure.length:.3f}",
        )
    table.add_row("total", str(measure.path.segment_count), "", f"{measure.length:.3f}")

    console.print(table)


@app.command("extract")
def extract_command(
    d: str = typer.Argument(..., help="SVG path data"),
    start: float = typer.Option(0.0, "--start", "-s", help="Start arc length"),
    end: float = typer.Option(..., "--end", "-e", help="End arc length"),
) -> None:
    """Print the sub-path between two arc lengths as SVG path data."""
    measure = _measure(d)
    piece = measure.extract_segment(start, end)
    if piece.is_empty:
        console.print("[yellow]Empty sub-path[/yellow]")
        return
    typer.echo(render_path_to_svg_d(piece))


@app.command("position")
def position_command(
    d: str = typer.Argument(..., help="SVG path data"),
    distance: float = typer.Argument(..., help="Arc length from the path start"),
) -> None:
    """Show position, tangent and marker rotation at an arc length."""
    measure = _measure(d)
    position, tangent = measure.position_and_tangent_at(distance)
    transform = measure.marker_transform_at(distance)

    table = Table(title=f"Position at {distance:g}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Position", f"({position.x:.3f}, {position.y:.3f})")
    table.add_row("Tangent", f"({tangent.x:.3f}, {tangent.y:.3f})")
    table.add_row("Rotation", f"{transform.rotation_degrees:.3f}")

    console.print(table)


# =============================================================================
# Effect Commands
# =============================================================================


@app.command("dash")
def dash_command(
    d: str = typer.Argument(..., help="SVG path data"),
    intervals: list[float] = typer.Option(
        ..., "--interval", "-i", help="On/off lengths (repeat the option)"
    ),
    phase: float = typer.Option(0.0, "--phase", "-p", help="Offset into the pattern"),
) -> None:
    """Dash a path.

    Examples:
        pathfx dash "M 0 0 L 100 0" -i 10 -i 5
    """
    try:
        effect = dash(intervals, phase)
    except PathFxError as e:
        raise _fail("Invalid dash", e) from e
    _print_result(_run_effect(effect, _parse(d)))


@app.command("corner")
def corner_command(
    d: str = typer.Argument(..., help="SVG path data"),
    radius: float = typer.Option(..., "--radius", "-r", help="Corner radius"),
) -> None:
    """Round the corners of a path."""
    try:
        effect = corner_round(radius)
    except PathFxError as e:
        raise _fail("Invalid corner radius", e) from e
    _print_result(_run_effect(effect, _parse(d)))


@app.command("stamp")
def stamp_command(
    d: str = typer.Argument(..., help="SVG path data"),
    shape: str = typer.Option(DEFAULT_STAMP_SHAPE, "--shape", help="Stamp shape path data"),
    advance: float = typer.Option(..., "--advance", "-a", help="Distance between stamps"),
    phase: float = typer.Option(0.0, "--phase", "-p", help="Offset of the first stamp"),
    style: StampStyle = typer.Option(StampStyle.ROTATE, "--style", help="Stamp style"),
) -> None:
    """List stamp placements along a path."""
    try:
        effect = stamp(_parse(shape), advance, phase, style)
    except PathFxError as e:
        raise _fail("Invalid stamp", e) from e
    _print_result(_run_effect(effect, _parse(d)))


@app.command("effect")
def effect_command(
    d: str = typer.Argument(..., help="SVG path data"),
    effect_json: str = typer.Argument(..., help="Effect definition as JSON"),
) -> None:
    """Apply an effect (or chain of effects) given as JSON.

    Examples:
        pathfx effect "M 0 0 L 100 0" '{"kind": "corner_round", "radius": 5}'
    """
    try:
        effect = _effect_adapter.validate_json(effect_json)
    except ValidationError as e:
        raise _fail("Invalid effect definition", e) from e
    _print_result(_run_effect(effect, _parse(d)))


# =============================================================================
# Clock and Preview Commands
# =============================================================================


@app.command("clock")
def clock_command(
    hours: float = typer.Option(0.0, "--hours", help="Fractional hours"),
    minutes: float = typer.Option(0.0, "--minutes", help="Fractional minutes"),
    seconds: float = typer.Option(0.0, "--seconds", help="Fractional seconds"),
    now: bool = typer.Option(False, "--now", help="Use the current time"),
    output: FilePath | None = typer.Option(None, "--output", "-o", help="Write a PNG"),
) -> None:
    """Show clock hand angles, optionally rendering the face."""
    if now:
        clock_time = clock_time_from_millis(time.time() * 1000)
    else:
        clock_time = ClockTime(hours=hours, minutes=minutes, seconds=seconds)
    style = ClockStyle()
    face = generate_clock_face_at(clock_time, style)

    table = Table(title="Clock Hands", box=box.ROUNDED)
    table.add_column("Hand", style="cyan")
    table.add_column("Angle", justify="right", style="green")
    table.add_column("End", style="yellow")

    for hand in face.hands:
        table.add_row(
            hand.kind.value,
            f"{hand.angle_degrees:.2f}",
            f"({hand.end.x:.2f}, {hand.end.y:.2f})",
        )

    console.print(table)
    console.print(f"{len(face.ticks)} ticks around radius {face.radius:g}")

    if output is not None:
        side = int(round(face.radius * 2))
        options = RenderOptions(width=side, height=side, background_color=style.background_color)
        output.write_bytes(render_clock_face(face, options))
        console.print(f"[green]Wrote {output}[/green]")


@app.command("render")
def render_command(
    d: str = typer.Argument(..., help="SVG path data"),
    output: FilePath = typer.Option(..., "--output", "-o", help="PNG file to write"),
    effect_json: str | None = typer.Option(
        None, "--effect", help="Effect to apply before rendering, as JSON"
    ),
) -> None:
    """Render a path (optionally after an effect) to a PNG preview."""
    path = _parse(d)
    if path.is_empty:
        console.print("[red]Nothing to render: path is empty[/red]")
        raise typer.Exit(1)

    paths = [path]
    stamps: list[StampInstance] = []
    if effect_json is not None:
        try:
            effect = _effect_adapter.validate_json(effect_json)
        except ValidationError as e:
            raise _fail("Invalid effect definition", e) from e
        result = _run_effect(effect, path)
        if isinstance(result, Path):
            paths = [result]
        else:
            stamps = result

    png = render_preview(paths, stamps, options_from_settings())
    output.write_bytes(png)
    console.print(f"[green]Wrote {output}[/green]")


if __name__ == "__main__":
    app()
