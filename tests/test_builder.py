"""Tests for PathBuilder."""

import math

import pytest

from pathfx.builder import PathBuilder
from pathfx.interpolation import evaluate_segment
from pathfx.measure import path_length
from pathfx.types import CubicSegment, LineSegment, Point, QuadraticSegment


class TestCommands:
    def test_line_path(self) -> None:
        path = PathBuilder().move_to(0, 0).line_to(100, 0).build()
        assert path.segment_count == 1
        segment = path.contours[0].segments[0]
        assert isinstance(segment, LineSegment)
        assert segment.end == Point(x=100, y=0)

    def test_curves_join_up(self) -> None:
        path = (
            PathBuilder()
            .move_to(0, 0)
            .quadratic_to(50, 50, 100, 0)
            .cubic_to(120, -20, 140, 20, 160, 0)
            .build()
        )
        first, second = path.contours[0].segments
        assert isinstance(first, QuadraticSegment)
        assert isinstance(second, CubicSegment)
        assert second.start == first.end

    def test_drawing_without_move_starts_at_origin(self) -> None:
        path = PathBuilder().line_to(10, 0).build()
        assert path.contours[0].start == Point(x=0, y=0)

    def test_move_starts_new_contour(self) -> None:
        path = PathBuilder().move_to(0, 0).line_to(10, 0).move_to(50, 50).line_to(60, 50).build()
        assert len(path.contours) == 2
        assert path.contours[1].start == Point(x=50, y=50)

    def test_lone_move_adds_nothing(self) -> None:
        assert PathBuilder().move_to(5, 5).build().is_empty

    def test_close_adds_closing_line(self) -> None:
        path = PathBuilder().move_to(0, 0).line_to(10, 0).line_to(10, 10).close().build()
        contour = path.contours[0]
        assert contour.closed
        assert len(contour.segments) == 3
        assert contour.segments[-1].end == Point(x=0, y=0)

    def test_close_at_start_adds_no_line(self) -> None:
        path = (
            PathBuilder()
            .move_to(0, 0)
            .line_to(10, 0)
            .line_to(10, 10)
            .line_to(0, 0)
            .close()
            .build()
        )
        assert len(path.contours[0].segments) == 3
        assert path.contours[0].closed

    def test_drawing_after_close_continues_from_start(self) -> None:
        path = PathBuilder().move_to(5, 5).line_to(10, 5).line_to(10, 10).close().line_to(0, 0).build()
        assert len(path.contours) == 2
        assert path.contours[1].start == Point(x=5, y=5)

    def test_built_path_is_unaffected_by_reuse(self) -> None:
        builder = PathBuilder().move_to(0, 0).line_to(10, 0)
        first = builder.build()
        builder.move_to(0, 0).line_to(0, 10)
        assert first.segment_count == 1


class TestShapes:
    def test_rect(self) -> None:
        path = PathBuilder().add_rect(10, 20, 100, 50).build()
        contour = path.contours[0]
        assert contour.closed
        assert len(contour.segments) == 4
        assert path_length(path) == pytest.approx(300)

    def test_oval_starts_at_right_middle(self) -> None:
        path = PathBuilder().add_oval(0, 0, 200, 100).build()
        contour = path.contours[0]
        assert contour.closed
        assert len(contour.segments) == 4
        assert contour.start == Point(x=200, y=50)
        # clockwise on a y-down canvas: the first quarter runs to the bottom
        assert contour.segments[0].end == Point(x=100, y=100)

    def test_circle_circumference(self) -> None:
        path = PathBuilder().add_circle(0, 0, 100).build()
        assert path_length(path, tolerance=0.05) == pytest.approx(2 * math.pi * 100, rel=1e-3)

    def test_circle_points_lie_on_circle(self) -> None:
        path = PathBuilder().add_circle(50, 50, 40).build()
        for segment in path.iter_segments():
            p = evaluate_segment(segment, 0.5)
            assert math.hypot(p.x - 50, p.y - 50) == pytest.approx(40, rel=1e-3)

    def test_arc_pieces(self) -> None:
        path = PathBuilder().add_arc(-100, -100, 100, 100, 0, 180).build()
        contour = path.contours[0]
        assert not contour.closed
        assert len(contour.segments) == 2
        assert contour.start.x == pytest.approx(100)
        assert contour.end.x == pytest.approx(-100)
        assert contour.end.y == pytest.approx(0, abs=1e-9)
        mid = contour.segments[0].end
        assert (mid.x, mid.y) == pytest.approx((0, 100), abs=1e-9)

    def test_negative_sweep_runs_counterclockwise(self) -> None:
        path = PathBuilder().add_arc(-100, -100, 100, 100, 0, -90).build()
        end = path.contours[0].end
        assert (end.x, end.y) == pytest.approx((0, -100), abs=1e-9)

    def test_zero_sweep_is_empty(self) -> None:
        assert PathBuilder().add_arc(0, 0, 10, 10, 0, 0).build().is_empty
