"""Path effect pipeline.

This module takes a Path and an effect definition and rewrites the path into
renderable output: dashed or corner-rounded paths, or a list of stamp
placements. Every function here is pure; per-frame inputs such as the dash
phase are fields of the effect passed in on each call.
"""

import logging
import math
from collections.abc import Sequence

from pathfx.builder import PathBuilder
from pathfx.errors import IncompatibleChainError, InvalidParameterError
from pathfx.interpolation import (
    evaluate_segment,
    segment_end_tangent,
    segment_length,
    segment_parameter_at_length,
    segment_start_tangent,
    segment_tangent_at,
    sub_segment,
    with_endpoints,
)
from pathfx.measure import MeasureCache, PathMeasure, marker_rotation_degrees
from pathfx.types import (
    ZERO_VECTOR,
    ChainEffect,
    Contour,
    CornerRoundEffect,
    CubicSegment,
    DashEffect,
    LineSegment,
    Path,
    PathEffect,
    Point,
    QuadraticSegment,
    Segment,
    StampEffect,
    StampInstance,
    StampStyle,
    Transform,
    Vector,
)

logger = logging.getLogger(__name__)

EffectResult = Path | list[StampInstance]

# Turns smaller than this (radians) count as straight
MIN_CORNER_TURN = 1e-6


def dash(intervals: Sequence[float], phase: float = 0.0) -> DashEffect:
    effect = DashEffect(intervals=tuple(intervals), phase=phase)
    validate_effect(effect)
    return effect


def corner_round(radius: float) -> CornerRoundEffect:
    effect = CornerRoundEffect(radius=radius)
    validate_effect(effect)
    return effect


def stamp(
    shape: Path,
    advance: float,
    phase: float = 0.0,
    style: StampStyle = StampStyle.ROTATE,
) -> StampEffect:
    effect = StampEffect(shape=shape, advance=advance, phase=phase, style=style)
    validate_effect(effect)
    return effect


def chain(outer: PathEffect, inner: PathEffect) -> ChainEffect:
    """Compose effects: `inner` runs first, `outer` runs on its output."""
    effect = ChainEffect(outer=outer, inner=inner)
    validate_effect(effect)
    return effect


def validate_effect(effect: PathEffect) -> None:
    """Raise InvalidParameterError / IncompatibleChainError for bad effects."""
    match effect:
        case DashEffect(intervals=intervals, phase=phase):
            if any(not math.isfinite(i) or i < 0 for i in intervals):
                raise InvalidParameterError(f"dash intervals must be >= 0, got {intervals}")
            if not math.isfinite(phase):
                raise InvalidParameterError(f"dash phase must be finite, got {phase}")
        case CornerRoundEffect(radius=radius):
            if not math.isfinite(radius) or radius < 0:
                raise InvalidParameterError(f"corner radius must be >= 0, got {radius}")
        case StampEffect(advance=advance, phase=phase):
            if not math.isfinite(advance) or advance <= 0:
                raise InvalidParameterError(f"stamp advance must be > 0, got {advance}")
            if not math.isfinite(phase):
                raise InvalidParameterError(f"stamp phase must be finite, got {phase}")
        case ChainEffect(outer=outer, inner=inner):
            if not inner.produces_path:
                raise IncompatibleChainError(
                    f"inner effect of a chain must produce a path, got {inner.kind}"
                )
            validate_effect(inner)
            validate_effect(outer)


def apply_effect(
    effect: PathEffect,
    path: Path,
    tolerance: float | None = None,
    cache: MeasureCache | None = None,
) -> EffectResult:
    """Apply an effect to a path.

    Returns a Path for dash and corner effects (and chains ending in one),
    or a list of StampInstance for stamp effects. An empty input path gives
    an empty result rather than an error.
    """
    validate_effect(effect)
    return _apply(effect, path, tolerance, cache)


def _apply(
    effect: PathEffect,
    path: Path,
    tolerance: float | None,
    cache: MeasureCache | None,
) -> EffectResult:
    match effect:
        case DashEffect():
            return _dash_path(path, effect, tolerance, cache)
        case CornerRoundEffect(radius=radius):
            return _round_corners(path, radius, tolerance)
        case StampEffect():
            return _stamp_path(path, effect, tolerance, cache)
        case ChainEffect(outer=outer, inner=inner):
            intermediate = _apply(inner, path, tolerance, cache)
            if not isinstance(intermediate, Path):
                raise IncompatibleChainError("inner effect of a chain produced stamps")
            return _apply(outer, intermediate, tolerance, cache)
    raise TypeError(f"Unknown effect: {effect!r}")


def _measure(
    path: Path,
    tolerance: float | None,
    cache: MeasureCache | None,
) -> PathMeasure | None:
    if path.segment_count == 0:
        return None
    if cache is not None:
        return cache.get(path)
    return PathMeasure(path, tolerance)


# =============================================================================
# Dash
# =============================================================================


def _dash_start(intervals: list[float], phase: float) -> tuple[int, float]:
    """Interval index and its remaining length at `phase` into the pattern."""
    index = 0
    while phase >= intervals[index]:
        phase -= intervals[index]
        index += 1
        if index == len(intervals):
            # phase rounded up to the full pattern length
            return 0, intervals[0]
    return index, intervals[index] - phase


def _dash_path(
    path: Path,
    effect: DashEffect,
    tolerance: float | None,
    cache: MeasureCache | None,
) -> Path:
    intervals = list(effect.intervals)
    pattern_length = sum(intervals)
    if not intervals or pattern_length == 0:
        logger.debug("Dash with empty or zero-length pattern leaves path unchanged")
        return path
    measure = _measure(path, tolerance, cache)
    if measure is None:
        return path
    if len(intervals) % 2 == 1:
        # Repeat odd patterns so on/off alternate
        intervals = intervals * 2
        pattern_length *= 2

    start_index, start_remaining = _dash_start(intervals, effect.phase % pattern_length)
    dashes: list[Contour] = []

    for contour_measure in measure.contours:
        length = contour_measure.length
        if length == 0:
            continue
        spans: list[tuple[float, float]] = []
        position = 0.0
        index = start_index
        remaining = start_remaining
        while position < length:
            if index % 2 == 0:
                end = min(position + remaining, length)
                if end > position:
                    spans.append((position, end))
            position += remaining
            index = (index + 1) % len(intervals)
            remaining = intervals[index]

        pieces = [contour_measure.extract_segment(start, end) for start, end in spans]
        contours = [piece for piece in pieces if piece is not None]
        wraps_seam = (
            contour_measure.closed
            and len(spans) > 1
            and spans[0][0] == 0.0
            and spans[-1][1] == length
            and len(contours) == len(spans)
        )
        if wraps_seam:
            # The last dash runs through the seam into the first one
            joined = Contour(segments=contours[-1].segments + contours[0].segments)
            contours = [joined, *contours[1:-1]]
        dashes.extend(contours)

    return Path(contours=tuple(dashes))


# =============================================================================
# Corner rounding
# =============================================================================


def _turn_angle(u: Vector, v: Vector) -> float:
    """Unsigned angle in radians between two unit vectors."""
    return math.acos(max(-1.0, min(1.0, u.x * v.x + u.y * v.y)))


def _corner_blend(
    start: Point, u: Vector, end: Point, v: Vector, radius: float
) -> CubicSegment:
    """Cubic approximation of the circular arc from `start` (heading u) to `end` (heading v)."""
    handle = 4 / 3 * math.tan(_turn_angle(u, v) / 4) * radius
    return CubicSegment(
        start=start,
        control1=Point(x=start.x + u.x * handle, y=start.y + u.y * handle),
        control2=Point(x=end.x - v.x * handle, y=end.y - v.y * handle),
        end=end,
    )


def _round_contour(contour: Contour, radius: float, tolerance: float | None) -> Contour:
    segments = contour.segments
    count = len(segments)
    lengths = [segment_length(segment, tolerance) for segment in segments]
    trim_start = [0.0] * count
    trim_end = [0.0] * count
    # junction j joins segments[j - 1] to segments[j]; junction 0 is the closing seam
    arc_radius: dict[int, float] = {}

    junctions = list(range(1, count))
    if contour.closed and count >= 2:
        junctions.append(0)

    for j in junctions:
        before = (j - 1) % count
        u = segment_end_tangent(segments[before]).normalized()
        v = segment_start_tangent(segments[j]).normalized()
        if u.is_zero() or v.is_zero():
            continue
        turn = _turn_angle(u, v)
        if turn < MIN_CORNER_TURN or turn > math.pi - MIN_CORNER_TURN:
            # Straight through, or a full reversal that no arc can blend
            continue
        half_interior = (math.pi - turn) / 2
        tangent_distance = radius / math.tan(half_interior)
        limit = min(lengths[before], lengths[j]) / 2
        if tangent_distance > limit:
            logger.debug(f"Corner {j} blend clamped from {tangent_distance:.2f} to {limit:.2f}")
            tangent_distance = limit
        if tangent_distance <= 0:
            continue
        trim_end[before] = tangent_distance
        trim_start[j] = tangent_distance
        arc_radius[j] = tangent_distance * math.tan(half_interior)

    if not arc_radius:
        return contour

    t_start: list[float] = []
    t_end: list[float] = []
    for i, segment in enumerate(segments):
        t0 = segment_parameter_at_length(segment, trim_start[i], tolerance) if trim_start[i] else 0.0
        t1 = (
            segment_parameter_at_length(segment, lengths[i] - trim_end[i], tolerance)
            if trim_end[i]
            else 1.0
        )
        if t1 < t0:
            # Both corners meet in the middle of this segment
            t0 = t1 = (t0 + t1) / 2
        t_start.append(t0)
        t_end.append(t1)

    start_points = [
        evaluate_segment(segment, t) if t > 0 else segment.start
        for segment, t in zip(segments, t_start, strict=True)
    ]
    end_points = [
        evaluate_segment(segment, t) if t < 1 else segment.end
        for segment, t in zip(segments, t_end, strict=True)
    ]

    def blend(j: int) -> CubicSegment:
        before = (j - 1) % count
        return _corner_blend(
            end_points[before],
            segment_tangent_at(segments[before], t_end[before]).normalized(),
            start_points[j],
            segment_tangent_at(segments[j], t_start[j]).normalized(),
            arc_radius[j],
        )

    output: list[Segment] = []
    for i, segment in enumerate(segments):
        if i in arc_radius and i > 0:
            output.append(blend(i))
        if t_end[i] > t_start[i]:
            piece = sub_segment(segment, t_start[i], t_end[i])
            if piece is not segment:
                piece = with_endpoints(piece, start_points[i], end_points[i])
            output.append(piece)
    if 0 in arc_radius:
        output.append(blend(0))
    return Contour(segments=tuple(output), closed=contour.closed)


def _round_corners(path: Path, radius: float, tolerance: float | None) -> Path:
    if radius == 0 or path.is_empty:
        return path
    return Path(
        contours=tuple(_round_contour(contour, radius, tolerance) for contour in path.contours)
    )


# =============================================================================
# Stamping
# =============================================================================


def _wrap_angle(radians: float) -> float:
    """Wrap an angle difference into (-pi, pi]."""
    wrapped = math.fmod(radians + math.pi, 2 * math.pi)
    if wrapped <= 0:
        wrapped += 2 * math.pi
    return wrapped - math.pi


def _oriented_tangents(tangents: list[Vector]) -> list[Vector]:
    """Replace zero tangents with the previous orientation (or the next one at the start)."""
    oriented: list[Vector] = []
    previous: Vector | None = None
    for tangent in tangents:
        if not tangent.is_zero():
            previous = tangent
        oriented.append(previous if previous is not None else ZERO_VECTOR)
    first = next((t for t in oriented if not t.is_zero()), ZERO_VECTOR)
    return [first if t.is_zero() else t for t in oriented]


def _stamp_transforms(
    positions: list[Point],
    tangents: list[Vector],
    style: StampStyle,
    advance: float,
) -> list[Transform]:
    oriented = _oriented_tangents(tangents)
    headings = [math.atan2(t.y, t.x) for t in oriented]
    transforms: list[Transform] = []
    for k, position in enumerate(positions):
        match style:
            case StampStyle.TRANSLATE:
                transforms.append(Transform(translate=position))
            case StampStyle.ROTATE:
                transforms.append(
                    Transform(
                        translate=position,
                        rotation_degrees=marker_rotation_degrees(oriented[k]),
                    )
                )
            case StampStyle.MORPH:
                if len(positions) < 2 or oriented[k].is_zero():
                    turn = 0.0
                elif k == 0:
                    turn = _wrap_angle(headings[1] - headings[0])
                else:
                    turn = _wrap_angle(headings[k] - headings[k - 1])
                transforms.append(
                    Transform(
                        translate=position,
                        rotation_degrees=marker_rotation_degrees(oriented[k]),
                        bend=turn / advance,
                    )
                )
    return transforms


def _stamp_path(
    path: Path,
    effect: StampEffect,
    tolerance: float | None,
    cache: MeasureCache | None,
) -> list[StampInstance]:
    """Stamp the shape at phase mod advance, then every advance, end exclusive.

    Stops are spaced along the whole path: the walk continues from one
    contour into the next, so the gaps between contours (such as the off
    intervals of a dash) never restart it.
    """
    measure = _measure(path, tolerance, cache)
    if measure is None:
        return []
    offset = effect.phase % effect.advance
    instances: list[StampInstance] = []
    contour_start = 0.0

    for contour_measure in measure.contours:
        contour_end = contour_start + contour_measure.length
        # first stop at or after the contour start
        k = max(0, math.ceil((contour_start - offset) / effect.advance))
        distances: list[float] = []
        while (d := offset + k * effect.advance) < contour_end:
            distances.append(d)
            k += 1
        placements = [
            contour_measure.position_and_tangent_at(d - contour_start) for d in distances
        ]
        contour_start = contour_end
        transforms = _stamp_transforms(
            [position for position, _ in placements],
            [tangent for _, tangent in placements],
            effect.style,
            effect.advance,
        )
        instances.extend(
            StampInstance(transform=transform, shape=effect.shape, distance=d)
            for transform, d in zip(transforms, distances, strict=True)
        )
    return instances


# =============================================================================
# Transforms and markers
# =============================================================================


def transform_segment(segment: Segment, transform: Transform) -> Segment:
    apply = transform.apply
    match segment:
        case LineSegment(start=p0, end=p1):
            return LineSegment(start=apply(p0), end=apply(p1))
        case QuadraticSegment(start=p0, control=c, end=p1):
            return QuadraticSegment(start=apply(p0), control=apply(c), end=apply(p1))
        case CubicSegment(start=p0, control1=c1, control2=c2, end=p1):
            return CubicSegment(
                start=apply(p0), control1=apply(c1), control2=apply(c2), end=apply(p1)
            )
    raise TypeError(f"Unknown segment: {segment!r}")


def transform_path(path: Path, transform: Transform) -> Path:
    """Apply a transform to every control point.

    Exact for the affine part; a bent shape is approximated by bending its
    control points.
    """
    return Path(
        contours=tuple(
            Contour(
                segments=tuple(transform_segment(s, transform) for s in contour.segments),
                closed=contour.closed,
            )
            for contour in path.contours
        )
    )


def arrow_marker(position: Point, tangent: Vector, size: float = 30.0) -> Path:
    """Closed triangle pointing along `tangent`, anchored at `position`.

    The tip sits `size` ahead of the anchor and the base `2 * size` behind it.
    """
    local = (
        PathBuilder()
        .move_to(0.0, -size)
        .line_to(-size, 2 * size)
        .line_to(size, 2 * size)
        .close()
        .build()
    )
    transform = Transform(translate=position, rotation_degrees=marker_rotation_degrees(tangent))
    return transform_path(local, transform)
