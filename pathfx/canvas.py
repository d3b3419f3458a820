"""Path conversion utilities for rasterizers.

Pure functions for converting paths to and from SVG path data and to point
lists - no state access.
"""

import logging
import math

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path
from svgpathtools import Path as SVGPath

from pathfx.interpolation import flatten_path
from pathfx.types import (
    Contour,
    CubicSegment,
    LineSegment,
    Path,
    Point,
    QuadraticSegment,
    Segment,
    StampInstance,
    points_match,
)

logger = logging.getLogger(__name__)

MAX_ARC_PIECE_DEGREES = 90.0


def _point(value: complex) -> Point:
    return Point(x=value.real, y=value.imag)


def _arc_to_cubics(arc: Arc, start: Point) -> list[Segment]:
    """Approximate an elliptical arc with cubic pieces of at most 90 degrees."""
    sweep = math.radians(arc.delta)
    pieces = max(1, math.ceil(abs(arc.delta) / MAX_ARC_PIECE_DEGREES))
    segments: list[Segment] = []
    previous = start
    for i in range(pieces):
        t0 = i / pieces
        t1 = (i + 1) / pieces
        piece_sweep = sweep * (t1 - t0)
        end = _point(arc.point(t1))
        if piece_sweep == 0:
            segments.append(LineSegment(start=previous, end=end))
            previous = end
            continue
        # Tangent handles of length (4/3) tan(angle / 4) * radius
        scale = (t1 - t0) * (4 / 3) * math.tan(piece_sweep / 4) / piece_sweep
        d0 = arc.derivative(t0) * scale
        d1 = arc.derivative(t1) * scale
        segments.append(
            CubicSegment(
                start=previous,
                control1=Point(x=previous.x + d0.real, y=previous.y + d0.imag),
                control2=Point(x=end.x - d1.real, y=end.y - d1.imag),
                end=end,
            )
        )
        previous = end
    return segments


def _convert_segment(segment: object, start: Point) -> list[Segment]:
    """Convert one svgpathtools segment, reusing `start` so contours stay joined."""
    if isinstance(segment, Line):
        return [LineSegment(start=start, end=_point(segment.end))]
    if isinstance(segment, QuadraticBezier):
        return [
            QuadraticSegment(
                start=start,
                control=_point(segment.control),
                end=_point(segment.end),
            )
        ]
    if isinstance(segment, CubicBezier):
        return [
            CubicSegment(
                start=start,
                control1=_point(segment.control1),
                control2=_point(segment.control2),
                end=_point(segment.end),
            )
        ]
    if isinstance(segment, Arc):
        return _arc_to_cubics(segment, start)
    logger.warning(f"Skipping unsupported SVG segment: {type(segment).__name__}")
    return []


def parse_svg_path_d(d: str) -> Path:
    """Parse an SVG path 'd' attribute string into a Path.

    Each continuous run of segments becomes one contour; a run that ends
    where it starts is closed. Arcs are converted to cubic Beziers.

    Args:
        d: SVG path data string (e.g., "M 0 0 L 100 100")

    Returns:
        Parsed path (empty for blank or malformed input)
    """
    if not d or not d.strip():
        return Path()

    try:
        svg_path: SVGPath = parse_path(d)
    except Exception as e:
        logger.warning(f"Could not parse SVG path data {d!r}: {e}")
        return Path()

    contours: list[Contour] = []

    for subpath in svg_path.continuous_subpaths():
        if len(subpath) == 0:
            continue
        segments: list[Segment] = []
        current = _point(subpath.start)
        for svg_segment in subpath:
            converted = _convert_segment(svg_segment, current)
            segments.extend(converted)
            if converted:
                current = converted[-1].end
        if not segments:
            continue
        closed = points_match(segments[-1].end, segments[0].start)
        contours.append(Contour(segments=tuple(segments), closed=closed))

    return Path(contours=tuple(contours))


def render_path_to_svg_d(path: Path) -> str:
    """Convert a path to SVG path 'd' attribute."""
    d_parts: list[str] = []
    for contour in path.contours:
        start = contour.start
        d_parts.append(f"M {start.x} {start.y}")
        for segment in contour.segments:
            match segment:
                case LineSegment(end=p):
                    d_parts.append(f"L {p.x} {p.y}")
                case QuadraticSegment(control=c, end=p):
                    d_parts.append(f"Q {c.x} {c.y} {p.x} {p.y}")
                case CubicSegment(control1=c1, control2=c2, end=p):
                    d_parts.append(f"C {c1.x} {c1.y} {c2.x} {c2.y} {p.x} {p.y}")
        if contour.closed:
            d_parts.append("Z")
    return " ".join(d_parts)


def stamps_to_path(stamps: list[StampInstance]) -> Path:
    """Merge placed stamp shapes into one path for stroking or filling."""
    contours: list[Contour] = []
    for instance in stamps:
        contours.extend(instance.placed_shape().contours)
    return Path(contours=tuple(contours))


def path_to_point_lists(
    path: Path, tolerance: float | None = None
) -> list[list[tuple[float, float]]]:
    """Convert a path to one list of (x, y) tuples per contour for PIL drawing."""
    return [[(p.x, p.y) for p in polyline] for polyline in flatten_path(path, tolerance)]
