"""Pure functions for segment evaluation and flattening.

This module contains stateless, pure mathematical functions for
evaluating, splitting and flattening path segments. No side effects or I/O.

Flattening subdivides curves with De Casteljau splits until every control
point lies within `tolerance` of its chord, so arc lengths computed from the
resulting polyline are within a bounded error of the true curve.
"""

import logging
import math

from pathfx.config import settings
from pathfx.errors import InvalidParameterError
from pathfx.types import (
    ZERO_VECTOR,
    Contour,
    CubicSegment,
    LineSegment,
    Path,
    Point,
    QuadraticSegment,
    Segment,
    Vector,
)

logger = logging.getLogger(__name__)

# (t, point) pairs along one segment, excluding the segment start
SegmentVertices = list[tuple[float, Point]]


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def lerp_point(p1: Point, p2: Point, t: float) -> Point:
    """Linearly interpolate between two points."""
    return Point(x=lerp(p1.x, p2.x, t), y=lerp(p1.y, p2.y, t))


def distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def vector_between(p1: Point, p2: Point) -> Vector:
    return Vector(x=p2.x - p1.x, y=p2.y - p1.y)


def quadratic_bezier(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    """Evaluate quadratic bezier at t."""
    one_minus_t = 1 - t
    return Point(
        x=one_minus_t**2 * p0.x + 2 * one_minus_t * t * p1.x + t**2 * p2.x,
        y=one_minus_t**2 * p0.y + 2 * one_minus_t * t * p1.y + t**2 * p2.y,
    )


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate cubic bezier at t."""
    one_minus_t = 1 - t
    return Point(
        x=(
            one_minus_t**3 * p0.x
            + 3 * one_minus_t**2 * t * p1.x
            + 3 * one_minus_t * t**2 * p2.x
            + t**3 * p3.x
        ),
        y=(
            one_minus_t**3 * p0.y
            + 3 * one_minus_t**2 * t * p1.y
            + 3 * one_minus_t * t**2 * p2.y
            + t**3 * p3.y
        ),
    )


def evaluate_segment(segment: Segment, t: float) -> Point:
    """Point on a segment at parameter t in [0, 1]."""
    match segment:
        case LineSegment(start=p0, end=p1):
            return lerp_point(p0, p1, t)
        case QuadraticSegment(start=p0, control=c, end=p1):
            return quadratic_bezier(p0, c, p1, t)
        case CubicSegment(start=p0, control1=c1, control2=c2, end=p1):
            return cubic_bezier(p0, c1, c2, p1, t)
    raise TypeError(f"Unknown segment: {segment!r}")


def split_segment(segment: Segment, t: float) -> tuple[Segment, Segment]:
    """Split a segment at t with De Casteljau's construction."""
    match segment:
        case LineSegment(start=p0, end=p1):
            mid = lerp_point(p0, p1, t)
            return LineSegment(start=p0, end=mid), LineSegment(start=mid, end=p1)

        case QuadraticSegment(start=p0, control=c, end=p1):
            a = lerp_point(p0, c, t)
            b = lerp_point(c, p1, t)
            mid = lerp_point(a, b, t)
            return (
                QuadraticSegment(start=p0, control=a, end=mid),
                QuadraticSegment(start=mid, control=b, end=p1),
            )

        case CubicSegment(start=p0, control1=c1, control2=c2, end=p1):
            a = lerp_point(p0, c1, t)
            b = lerp_point(c1, c2, t)
            c = lerp_point(c2, p1, t)
            ab = lerp_point(a, b, t)
            bc = lerp_point(b, c, t)
            mid = lerp_point(ab, bc, t)
            return (
                CubicSegment(start=p0, control1=a, control2=ab, end=mid),
                CubicSegment(start=mid, control1=bc, control2=c, end=p1),
            )
    raise TypeError(f"Unknown segment: {segment!r}")


def sub_segment(segment: Segment, t0: float, t1: float) -> Segment:
    """The part of a segment between parameters t0 <= t1."""
    t0 = max(0.0, t0)
    t1 = min(1.0, t1)
    if t0 <= 0.0 and t1 >= 1.0:
        return segment
    if t1 < 1.0:
        segment = split_segment(segment, t1)[0]
    if t0 > 0.0:
        relative = t0 / t1 if t1 > 0 else 0.0
        segment = split_segment(segment, relative)[1]
    return segment


def with_endpoints(segment: Segment, start: Point, end: Point) -> Segment:
    """Same segment kind with its endpoints replaced (controls unchanged)."""
    return segment.model_copy(update={"start": start, "end": end})


def segment_start_tangent(segment: Segment) -> Vector:
    """Direction leaving the segment start (zero if fully degenerate)."""
    for point in segment.points[1:]:
        if point != segment.start:
            return vector_between(segment.start, point)
    return ZERO_VECTOR


def segment_end_tangent(segment: Segment) -> Vector:
    """Direction arriving at the segment end (zero if fully degenerate)."""
    for point in reversed(segment.points[:-1]):
        if point != segment.end:
            return vector_between(point, segment.end)
    return ZERO_VECTOR


def segment_tangent_at(segment: Segment, t: float) -> Vector:
    """Derivative direction at t, falling back to the end tangents."""
    match segment:
        case LineSegment(start=p0, end=p1):
            derivative = vector_between(p0, p1)
        case QuadraticSegment(start=p0, control=c, end=p1):
            a = lerp_point(p0, c, t)
            b = lerp_point(c, p1, t)
            derivative = vector_between(a, b)
        case CubicSegment(start=p0, control1=c1, control2=c2, end=p1):
            a = lerp_point(p0, c1, t)
            b = lerp_point(c1, c2, t)
            c = lerp_point(c2, p1, t)
            derivative = vector_between(lerp_point(a, b, t), lerp_point(b, c, t))
        case _:
            raise TypeError(f"Unknown segment: {segment!r}")
    if derivative.is_zero():
        return segment_start_tangent(segment) if t < 0.5 else segment_end_tangent(segment)
    return derivative


def _distance_to_chord(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to the chord segment start-end."""
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return distance(point, start)
    # Clamp the projection so control points overshooting the chord count
    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def flatness(segment: Segment) -> float:
    """Largest distance of any control point from the segment's chord."""
    controls = segment.points[1:-1]
    if not controls:
        return 0.0
    return max(_distance_to_chord(p, segment.start, segment.end) for p in controls)


def _resolve(tolerance: float | None, max_depth: int | None) -> tuple[float, int]:
    tol = settings.flatten_tolerance if tolerance is None else tolerance
    depth = settings.flatten_max_depth if max_depth is None else max_depth
    if tol <= 0:
        raise InvalidParameterError(f"flatten tolerance must be positive, got {tol}")
    if depth < 0:
        raise InvalidParameterError(f"flatten max depth must be >= 0, got {depth}")
    return tol, depth


def flatten_segment(
    segment: Segment,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> SegmentVertices:
    """Flatten one segment into (t, point) vertices.

    The segment start is not included; the last vertex is always (1.0, end).
    Lines are exact. Curves stop subdividing at `max_depth`, accepting
    whatever flatness remains.
    """
    tol, depth_limit = _resolve(tolerance, max_depth)
    if isinstance(segment, LineSegment):
        return [(1.0, segment.end)]

    vertices: SegmentVertices = []
    depth_limited = False

    def subdivide(piece: Segment, t0: float, t1: float, depth: int) -> None:
        nonlocal depth_limited
        if flatness(piece) <= tol:
            vertices.append((t1, piece.end))
            return
        if depth >= depth_limit:
            depth_limited = True
            vertices.append((t1, piece.end))
            return
        left, right = split_segment(piece, 0.5)
        t_mid = (t0 + t1) / 2
        subdivide(left, t0, t_mid, depth + 1)
        subdivide(right, t_mid, t1, depth + 1)

    subdivide(segment, 0.0, 1.0, 0)
    if depth_limited:
        logger.debug(
            f"Flattening {segment.kind} segment stopped at depth {depth_limit} "
            f"above tolerance {tol}"
        )
    return vertices


def flatten_contour(
    contour: Contour,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> list[tuple[int, float, Point]]:
    """Flatten a contour into (segment_index, t, point) vertices.

    The first vertex is the contour start at (0, 0.0).
    """
    vertices: list[tuple[int, float, Point]] = [(0, 0.0, contour.start)]
    for index, segment in enumerate(contour.segments):
        vertices.extend(
            (index, t, point) for t, point in flatten_segment(segment, tolerance, max_depth)
        )
    return vertices


def flatten_path(
    path: Path,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> list[list[Point]]:
    """Flatten a path into one polyline per contour."""
    return [
        [point for _, _, point in flatten_contour(contour, tolerance, max_depth)]
        for contour in path.contours
    ]


def polyline_length(points: list[Point]) -> float:
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))


def segment_length(
    segment: Segment,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> float:
    """Arc length of one segment from its flattening."""
    previous = segment.start
    total = 0.0
    for _, point in flatten_segment(segment, tolerance, max_depth):
        total += distance(previous, point)
        previous = point
    return total


def segment_parameter_at_length(
    segment: Segment,
    length: float,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> float:
    """Parameter t at which the arc length from the start reaches `length`.

    t is interpolated linearly inside the bracketing flattened edge.
    """
    if length <= 0:
        return 0.0
    previous_t = 0.0
    previous = segment.start
    travelled = 0.0
    for t, point in flatten_segment(segment, tolerance, max_depth):
        edge = distance(previous, point)
        if travelled + edge >= length and edge > 0:
            return lerp(previous_t, t, (length - travelled) / edge)
        travelled += edge
        previous_t = t
        previous = point
    return 1.0
