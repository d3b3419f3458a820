"""Path model: segments, contours and multi-contour paths."""

import math
from collections.abc import Iterator, Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pathfx.types.geometry import Bounds, Point, SegmentType

# Endpoints closer than this are treated as joined
CONTIGUITY_TOLERANCE = 1e-6


class LineSegment(BaseModel):
    """Straight segment from start to end."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["line"] = "line"
    start: Point
    end: Point

    @property
    def type(self) -> SegmentType:
        return SegmentType.LINE

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.start, self.end)


class QuadraticSegment(BaseModel):
    """Quadratic Bezier with one control point."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["quadratic"] = "quadratic"
    start: Point
    control: Point
    end: Point

    @property
    def type(self) -> SegmentType:
        return SegmentType.QUADRATIC

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.start, self.control, self.end)


class CubicSegment(BaseModel):
    """Cubic Bezier with two control points."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["cubic"] = "cubic"
    start: Point
    control1: Point
    control2: Point
    end: Point

    @property
    def type(self) -> SegmentType:
        return SegmentType.CUBIC

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.start, self.control1, self.control2, self.end)


Segment = Annotated[
    LineSegment | QuadraticSegment | CubicSegment,
    Field(discriminator="kind"),
]


def points_match(a: Point, b: Point) -> bool:
    """True if two endpoints are close enough to be considered joined."""
    return math.isclose(a.x, b.x, abs_tol=CONTIGUITY_TOLERANCE) and math.isclose(
        a.y, b.y, abs_tol=CONTIGUITY_TOLERANCE
    )


class Contour(BaseModel):
    """A run of contiguous segments.

    Each segment starts where the previous one ends. A closed contour also
    ends where it starts; the closing line, if any, is an explicit segment.
    """

    model_config = ConfigDict(frozen=True)

    segments: tuple[Segment, ...]
    closed: bool = False

    @model_validator(mode="after")
    def _check_contiguous(self) -> "Contour":
        if not self.segments:
            raise ValueError("contour must have at least one segment")
        for i in range(len(self.segments) - 1):
            if not points_match(self.segments[i].end, self.segments[i + 1].start):
                raise ValueError(f"segment {i + 1} does not start where segment {i} ends")
        if self.closed and not points_match(self.segments[-1].end, self.segments[0].start):
            raise ValueError("closed contour must end at its start point")
        return self

    @property
    def start(self) -> Point:
        return self.segments[0].start

    @property
    def end(self) -> Point:
        return self.segments[-1].end


class Path(BaseModel):
    """An immutable path made of zero or more contours.

    Built with PathBuilder or parsed from SVG path data. Safe to share between
    measures and effects since nothing mutates it after construction.
    """

    model_config = ConfigDict(frozen=True)

    contours: tuple[Contour, ...] = ()

    @classmethod
    def from_segments(cls, segments: Sequence[Segment], closed: bool = False) -> "Path":
        """Build a single-contour path (empty path if no segments)."""
        if not segments:
            return cls()
        return cls(contours=(Contour(segments=tuple(segments), closed=closed),))

    @property
    def is_empty(self) -> bool:
        return not self.contours

    @property
    def segment_count(self) -> int:
        return sum(len(contour.segments) for contour in self.contours)

    def iter_segments(self) -> Iterator[LineSegment | QuadraticSegment | CubicSegment]:
        for contour in self.contours:
            yield from contour.segments

    def bounds(self) -> Bounds | None:
        """Bounding box of all segment control points (None for empty paths).

        Control points bound the curve, so the box may be larger than the
        drawn stroke.
        """
        xs: list[float] = []
        ys: list[float] = []
        for segment in self.iter_segments():
            for point in segment.points:
                xs.append(point.x)
                ys.append(point.y)
        if not xs:
            return None
        return Bounds(left=min(xs), top=min(ys), right=max(xs), bottom=max(ys))
