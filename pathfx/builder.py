"""Append-only path builder.

Collects drawing commands and yields an immutable Path from build(). The
builder never hands out its internal lists, so a built Path cannot change
when the builder is used again.
"""

import math

from pathfx.types import (
    Contour,
    CubicSegment,
    LineSegment,
    Path,
    Point,
    QuadraticSegment,
    Segment,
)

# Handle length ratio for a quarter-circle cubic
OVAL_KAPPA = 0.5522847498307936
MAX_ARC_PIECE_DEGREES = 90.0


class PathBuilder:
    """Build a Path from move/line/curve/close commands.

    Coordinates are canvas units on a y-down canvas; angles are degrees,
    0 along +x, positive clockwise.
    """

    def __init__(self) -> None:
        self._contours: list[Contour] = []
        self._segments: list[Segment] = []
        self._start: Point | None = None
        self._current: Point | None = None

    def _finish_contour(self, closed: bool = False) -> None:
        if self._segments:
            self._contours.append(Contour(segments=tuple(self._segments), closed=closed))
        self._segments = []

    def _current_point(self) -> Point:
        if self._current is None:
            # Drawing without a move starts at the origin
            self._start = self._current = Point(x=0.0, y=0.0)
        return self._current

    def _append(self, segment: Segment) -> "PathBuilder":
        self._segments.append(segment)
        self._current = segment.end
        return self

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._finish_contour()
        self._start = self._current = Point(x=x, y=y)
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        return self._append(LineSegment(start=self._current_point(), end=Point(x=x, y=y)))

    def quadratic_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        return self._append(
            QuadraticSegment(
                start=self._current_point(),
                control=Point(x=cx, y=cy),
                end=Point(x=x, y=y),
            )
        )

    def cubic_to(
        self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float
    ) -> "PathBuilder":
        return self._append(
            CubicSegment(
                start=self._current_point(),
                control1=Point(x=c1x, y=c1y),
                control2=Point(x=c2x, y=c2y),
                end=Point(x=x, y=y),
            )
        )

    def close(self) -> "PathBuilder":
        """Close the current contour with a line back to its start if needed."""
        if not self._segments or self._start is None:
            return self
        if self._current != self._start:
            self._segments.append(LineSegment(start=self._current_point(), end=self._start))
        self._finish_contour(closed=True)
        self._current = self._start
        return self

    def add_rect(self, left: float, top: float, width: float, height: float) -> "PathBuilder":
        """Closed clockwise rectangle starting at its top-left corner."""
        right = left + width
        bottom = top + height
        return (
            self.move_to(left, top)
            .line_to(right, top)
            .line_to(right, bottom)
            .line_to(left, bottom)
            .close()
        )

    def add_oval(self, left: float, top: float, right: float, bottom: float) -> "PathBuilder":
        """Closed clockwise ellipse inscribed in the box, starting at its right middle."""
        cx = (left + right) / 2
        cy = (top + bottom) / 2
        rx = (right - left) / 2
        ry = (bottom - top) / 2
        kx = rx * OVAL_KAPPA
        ky = ry * OVAL_KAPPA
        return (
            self.move_to(right, cy)
            .cubic_to(right, cy + ky, cx + kx, bottom, cx, bottom)
            .cubic_to(cx - kx, bottom, left, cy + ky, left, cy)
            .cubic_to(left, cy - ky, cx - kx, top, cx, top)
            .cubic_to(cx + kx, top, right, cy - ky, right, cy)
            .close()
        )

    def add_circle(self, cx: float, cy: float, radius: float) -> "PathBuilder":
        return self.add_oval(cx - radius, cy - radius, cx + radius, cy + radius)

    def add_arc(
        self,
        left: float,
        top: float,
        right: float,
        bottom: float,
        start_angle: float,
        sweep_angle: float,
    ) -> "PathBuilder":
        """Open elliptical arc as a new contour, in cubic pieces of at most 90 degrees."""
        cx = (left + right) / 2
        cy = (top + bottom) / 2
        rx = (right - left) / 2
        ry = (bottom - top) / 2

        def on_ellipse(angle: float) -> tuple[float, float]:
            return cx + rx * math.cos(angle), cy + ry * math.sin(angle)

        def derivative(angle: float) -> tuple[float, float]:
            return -rx * math.sin(angle), ry * math.cos(angle)

        pieces = max(1, math.ceil(abs(sweep_angle) / MAX_ARC_PIECE_DEGREES))
        step = math.radians(sweep_angle) / pieces
        angle = math.radians(start_angle)
        self.move_to(*on_ellipse(angle))
        if sweep_angle == 0:
            return self
        handle = 4 / 3 * math.tan(step / 4)
        for _ in range(pieces):
            next_angle = angle + step
            x0, y0 = on_ellipse(angle)
            x1, y1 = on_ellipse(next_angle)
            dx0, dy0 = derivative(angle)
            dx1, dy1 = derivative(next_angle)
            self.cubic_to(
                x0 + handle * dx0,
                y0 + handle * dy0,
                x1 - handle * dx1,
                y1 - handle * dy1,
                x1,
                y1,
            )
            angle = next_angle
        return self

    def build(self) -> Path:
        """Finish the open contour and return the immutable path."""
        self._finish_contour()
        return Path(contours=tuple(self._contours))
