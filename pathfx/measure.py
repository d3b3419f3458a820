"""Arc-length measurement of paths.

A measure flattens each contour once into an arc-length table and answers
length, sub-path and position/tangent queries from it with binary search.
Measures never change after construction, so one measure can serve every
animation frame for the same path.

Positions inside a flattened edge are linear interpolations between its
vertices, and curve parameters are interpolated linearly across the edge.
Both are approximations bounded by the flattening tolerance.
"""

import logging
import math
from bisect import bisect_left, bisect_right
from collections import OrderedDict
from dataclasses import dataclass

from pathfx.config import settings
from pathfx.errors import EmptyPathError
from pathfx.interpolation import (
    distance,
    flatten_contour,
    lerp,
    lerp_point,
    sub_segment,
    with_endpoints,
)
from pathfx.types import (
    ZERO_VECTOR,
    Contour,
    Path,
    Point,
    Segment,
    Transform,
    Vector,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArcLengthSample:
    """A flattened vertex and the arc length from the contour start to it."""

    distance: float
    segment_index: int
    t: float
    point: Point


def marker_rotation_degrees(tangent: Vector) -> float:
    """Rotation (degrees, y-down canvas) that turns local up (0, -1) onto `tangent`.

    Equal to -atan2(tx, ty) - 180 modulo 360, normalized to (-180, 180].
    A zero tangent gives 0.
    """
    if tangent.is_zero():
        return 0.0
    degrees = math.degrees(math.atan2(tangent.x, -tangent.y))
    return 180.0 if degrees == -180.0 else degrees


class ContourMeasure:
    """Arc-length table and queries for a single contour."""

    def __init__(
        self,
        contour: Contour,
        tolerance: float | None = None,
        max_depth: int | None = None,
    ) -> None:
        self.contour = contour
        samples: list[ArcLengthSample] = []
        cumulative = 0.0
        previous: Point | None = None
        for segment_index, t, point in flatten_contour(contour, tolerance, max_depth):
            if previous is not None:
                edge = distance(previous, point)
                # Duplicate vertices add nothing and would give zero-length edges
                if edge == 0:
                    continue
                cumulative += edge
            samples.append(ArcLengthSample(cumulative, segment_index, t, point))
            previous = point
        self.table: tuple[ArcLengthSample, ...] = tuple(samples)
        self._distances = [sample.distance for sample in samples]
        self.length = cumulative

    @property
    def closed(self) -> bool:
        return self.contour.closed

    def _edge(self, index: int, fraction: float) -> tuple[int, float, Point]:
        """Segment index, curve parameter and point at a fraction of edge `index`."""
        a = self.table[index - 1]
        b = self.table[index]
        t_start = a.t if a.segment_index == b.segment_index else 0.0
        return (
            b.segment_index,
            lerp(t_start, b.t, fraction),
            lerp_point(a.point, b.point, fraction),
        )

    def _fraction(self, index: int, d: float) -> float:
        a = self.table[index - 1]
        b = self.table[index]
        return (d - a.distance) / (b.distance - a.distance)

    def _edge_ending_at_or_after(self, d: float) -> int:
        index = bisect_left(self._distances, d)
        return max(1, min(index, len(self.table) - 1))

    def _edge_starting_at_or_before(self, d: float) -> int:
        index = bisect_right(self._distances, d)
        return max(1, min(index, len(self.table) - 1))

    def position_and_tangent_at(self, d: float) -> tuple[Point, Vector]:
        """Point at arc length `d` and the unit direction of its flattened edge.

        The tangent is the zero vector for a zero-length contour.
        """
        if len(self.table) < 2:
            return self.contour.start, ZERO_VECTOR
        d = max(0.0, min(self.length, d))
        index = self._edge_ending_at_or_after(d)
        a = self.table[index - 1]
        b = self.table[index]
        position = lerp_point(a.point, b.point, self._fraction(index, d))
        tangent = Vector(x=b.point.x - a.point.x, y=b.point.y - a.point.y).normalized()
        return position, tangent

    def extract_segment(self, start: float, end: float) -> Contour | None:
        """Sub-contour between two arc lengths, or None if nothing remains."""
        start = max(0.0, start)
        end = min(self.length, end)
        if start >= end:
            return None
        if start == 0.0 and end == self.length:
            return self.contour

        start_index = self._edge_starting_at_or_before(start)
        end_index = self._edge_ending_at_or_after(end)
        first_index, t_first, p_first = self._edge(start_index, self._fraction(start_index, start))
        last_index, t_last, p_last = self._edge(end_index, self._fraction(end_index, end))
        segments = self.contour.segments

        pieces: list[Segment]
        if first_index == last_index:
            piece = sub_segment(segments[first_index], t_first, t_last)
            pieces = [with_endpoints(piece, p_first, p_last)]
        else:
            head = sub_segment(segments[first_index], t_first, 1.0)
            tail = sub_segment(segments[last_index], 0.0, t_last)
            pieces = [
                with_endpoints(head, p_first, head.end),
                *segments[first_index + 1 : last_index],
                with_endpoints(tail, tail.start, p_last),
            ]
        return Contour(segments=tuple(pieces))


class PathMeasure:
    """Arc-length measure over every contour of a path.

    Distances run continuously across contours in order; the gaps between
    contours have no length.
    """

    def __init__(
        self,
        path: Path,
        tolerance: float | None = None,
        max_depth: int | None = None,
    ) -> None:
        if path.segment_count == 0:
            raise EmptyPathError("cannot measure a path with no segments")
        self.path = path
        self.tolerance = settings.flatten_tolerance if tolerance is None else tolerance
        self.max_depth = settings.flatten_max_depth if max_depth is None else max_depth
        self.contours = tuple(
            ContourMeasure(contour, self.tolerance, self.max_depth) for contour in path.contours
        )
        self._offsets: list[float] = []
        total = 0.0
        for contour_measure in self.contours:
            self._offsets.append(total)
            total += contour_measure.length
        self.length = total

    def _contour_for_position(self, d: float) -> int:
        # At a boundary prefer the contour that starts there, except at the very end
        if d >= self.length:
            index = bisect_left(self._offsets, self.length) - 1
        else:
            index = bisect_right(self._offsets, d) - 1
        return max(0, min(index, len(self.contours) - 1))

    def position_and_tangent_at(self, d: float) -> tuple[Point, Vector]:
        """Position and unit tangent at arc length `d` (clamped to the path).

        A zero tangent means the bracketing edge is degenerate; keep the
        previous orientation.
        """
        d = max(0.0, min(self.length, d))
        index = self._contour_for_position(d)
        return self.contours[index].position_and_tangent_at(d - self._offsets[index])

    def marker_transform_at(self, d: float) -> Transform:
        """Transform placing a marker at `d` with local up along the tangent."""
        position, tangent = self.position_and_tangent_at(d)
        return Transform(translate=position, rotation_degrees=marker_rotation_degrees(tangent))

    def extract_segment(self, start: float, end: float) -> Path:
        """Sub-path between two arc lengths, clamped to [0, length].

        Returns an empty path when start >= end.
        """
        start = max(0.0, start)
        end = min(self.length, end)
        if start >= end:
            return Path()
        pieces: list[Contour] = []
        for contour_measure, offset in zip(self.contours, self._offsets, strict=True):
            low = max(start, offset)
            high = min(end, offset + contour_measure.length)
            if low >= high:
                continue
            piece = contour_measure.extract_segment(low - offset, high - offset)
            if piece is not None:
                pieces.append(piece)
        return Path(contours=tuple(pieces))


def build_measure(
    path: Path,
    tolerance: float | None = None,
    max_depth: int | None = None,
) -> PathMeasure:
    """Measure a path. Raises EmptyPathError for a path with no segments."""
    return PathMeasure(path, tolerance, max_depth)


def path_length(path: Path, tolerance: float | None = None) -> float:
    """Flattened length of a path; 0.0 for an empty path."""
    if path.segment_count == 0:
        return 0.0
    return PathMeasure(path, tolerance).length


class MeasureCache:
    """Least-recently-used memo of measures keyed on path content.

    Owned by the caller (one per animation, screen or pipeline); equal paths
    share one measure.
    """

    def __init__(self, maxsize: int | None = None, tolerance: float | None = None) -> None:
        self.maxsize = settings.measure_cache_size if maxsize is None else maxsize
        self.tolerance = tolerance
        self._entries: OrderedDict[Path, PathMeasure] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: Path) -> PathMeasure:
        measure = self._entries.get(path)
        if measure is not None:
            self.hits += 1
            self._entries.move_to_end(path)
            return measure

        self.misses += 1
        measure = PathMeasure(path, self.tolerance)
        logger.debug(
            f"Measured path with {path.segment_count} segments, length {measure.length:.2f}"
        )
        self._entries[path] = measure
        while len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return measure

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
