"""Tests for segment evaluation and flattening."""

import math

import pytest

from pathfx.builder import OVAL_KAPPA, PathBuilder
from pathfx.errors import InvalidParameterError
from pathfx.interpolation import (
    cubic_bezier,
    evaluate_segment,
    flatness,
    flatten_contour,
    flatten_path,
    flatten_segment,
    lerp,
    lerp_point,
    polyline_length,
    quadratic_bezier,
    segment_end_tangent,
    segment_length,
    segment_parameter_at_length,
    segment_start_tangent,
    segment_tangent_at,
    split_segment,
    sub_segment,
)
from pathfx.types import CubicSegment, LineSegment, Point, QuadraticSegment


def quarter_circle(radius: float = 100.0) -> CubicSegment:
    """Cubic approximation of the quarter circle from (r, 0) to (0, r)."""
    k = radius * OVAL_KAPPA
    return CubicSegment(
        start=Point(x=radius, y=0),
        control1=Point(x=radius, y=k),
        control2=Point(x=k, y=radius),
        end=Point(x=0, y=radius),
    )


class TestLerp:
    def test_lerp_start(self) -> None:
        assert lerp(0, 100, 0) == 0

    def test_lerp_end(self) -> None:
        assert lerp(0, 100, 1) == 100

    def test_lerp_middle(self) -> None:
        assert lerp(0, 100, 0.5) == 50

    def test_lerp_point(self) -> None:
        result = lerp_point(Point(x=0, y=0), Point(x=100, y=100), 0.5)
        assert result.x == 50
        assert result.y == 50


class TestBezier:
    def test_quadratic_bezier_midpoint(self) -> None:
        result = quadratic_bezier(Point(x=0, y=0), Point(x=50, y=100), Point(x=100, y=0), 0.5)
        assert result.x == pytest.approx(50)
        assert result.y == pytest.approx(50)

    def test_cubic_bezier_endpoints(self) -> None:
        p0 = Point(x=0, y=0)
        p1 = Point(x=33, y=100)
        p2 = Point(x=66, y=100)
        p3 = Point(x=100, y=0)
        start = cubic_bezier(p0, p1, p2, p3, 0)
        end = cubic_bezier(p0, p1, p2, p3, 1)
        assert (start.x, start.y) == pytest.approx((0, 0))
        assert (end.x, end.y) == pytest.approx((100, 0))

    def test_evaluate_segment_dispatches_on_kind(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=10, y=0))
        quad = QuadraticSegment(
            start=Point(x=0, y=0), control=Point(x=50, y=100), end=Point(x=100, y=0)
        )
        assert evaluate_segment(line, 0.3).x == pytest.approx(3)
        assert evaluate_segment(quad, 0.5).y == pytest.approx(50)


class TestSplit:
    def test_split_cubic_meets_at_curve_point(self) -> None:
        segment = quarter_circle()
        left, right = split_segment(segment, 0.5)
        expected = evaluate_segment(segment, 0.5)
        assert left.end == right.start
        assert left.end.x == pytest.approx(expected.x)
        assert left.end.y == pytest.approx(expected.y)
        assert left.start == segment.start
        assert right.end == segment.end

    def test_split_quadratic_keeps_kind(self) -> None:
        segment = QuadraticSegment(
            start=Point(x=0, y=0), control=Point(x=50, y=100), end=Point(x=100, y=0)
        )
        left, right = split_segment(segment, 0.25)
        assert isinstance(left, QuadraticSegment)
        assert isinstance(right, QuadraticSegment)

    def test_sub_segment_whole_returns_same_segment(self) -> None:
        segment = quarter_circle()
        assert sub_segment(segment, 0.0, 1.0) is segment

    def test_sub_segment_of_line(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=100, y=0))
        piece = sub_segment(line, 0.25, 0.75)
        assert piece.start.x == pytest.approx(25)
        assert piece.end.x == pytest.approx(75)

    def test_sub_segment_of_cubic_matches_curve(self) -> None:
        segment = quarter_circle()
        piece = sub_segment(segment, 0.2, 0.6)
        for expected, actual in [
            (evaluate_segment(segment, 0.2), piece.start),
            (evaluate_segment(segment, 0.4), evaluate_segment(piece, 0.5)),
            (evaluate_segment(segment, 0.6), piece.end),
        ]:
            assert actual.x == pytest.approx(expected.x)
            assert actual.y == pytest.approx(expected.y)


class TestTangents:
    def test_line_tangents(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=10, y=0))
        assert segment_start_tangent(line).normalized().x == pytest.approx(1)
        assert segment_end_tangent(line).normalized().x == pytest.approx(1)
        assert segment_tangent_at(line, 0.5).normalized().x == pytest.approx(1)

    def test_cubic_end_tangents_follow_controls(self) -> None:
        segment = quarter_circle()
        start = segment_start_tangent(segment).normalized()
        end = segment_end_tangent(segment).normalized()
        assert (start.x, start.y) == pytest.approx((0, 1))
        assert (end.x, end.y) == pytest.approx((-1, 0))

    def test_coincident_control_falls_back_to_next_point(self) -> None:
        segment = CubicSegment(
            start=Point(x=0, y=0),
            control1=Point(x=0, y=0),
            control2=Point(x=10, y=10),
            end=Point(x=20, y=0),
        )
        tangent = segment_start_tangent(segment).normalized()
        assert tangent.x == pytest.approx(math.sqrt(0.5))
        assert tangent.y == pytest.approx(math.sqrt(0.5))
        assert not segment_tangent_at(segment, 0.0).is_zero()

    def test_degenerate_segment_has_zero_tangent(self) -> None:
        point = Point(x=5, y=5)
        line = LineSegment(start=point, end=point)
        assert segment_start_tangent(line).is_zero()


class TestFlatten:
    def test_line_is_exact(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=100, y=0))
        assert flatten_segment(line) == [(1.0, line.end)]

    def test_curve_ends_at_segment_end(self) -> None:
        segment = quarter_circle()
        vertices = flatten_segment(segment)
        assert vertices[-1] == (1.0, segment.end)
        ts = [t for t, _ in vertices]
        assert ts == sorted(ts)
        assert len(set(ts)) == len(ts)

    def test_tighter_tolerance_gives_more_vertices(self) -> None:
        segment = quarter_circle()
        coarse = flatten_segment(segment, tolerance=1.0)
        fine = flatten_segment(segment, tolerance=0.01)
        assert len(fine) > len(coarse)

    def test_pieces_are_within_tolerance(self) -> None:
        segment = quarter_circle()
        tolerance = 0.1
        vertices = flatten_segment(segment, tolerance=tolerance)
        t_prev = 0.0
        for t, _ in vertices:
            assert flatness(sub_segment(segment, t_prev, t)) <= tolerance + 1e-9
            t_prev = t

    def test_max_depth_zero_gives_chord(self) -> None:
        segment = quarter_circle()
        assert flatten_segment(segment, tolerance=0.01, max_depth=0) == [(1.0, segment.end)]

    def test_invalid_tolerance_raises(self) -> None:
        with pytest.raises(InvalidParameterError):
            flatten_segment(quarter_circle(), tolerance=0)

    def test_negative_depth_raises(self) -> None:
        with pytest.raises(InvalidParameterError):
            flatten_segment(quarter_circle(), max_depth=-1)

    def test_flatten_contour_starts_at_contour_start(self) -> None:
        path = PathBuilder().move_to(0, 0).line_to(10, 0).line_to(10, 10).build()
        vertices = flatten_contour(path.contours[0])
        assert vertices[0] == (0, 0.0, Point(x=0, y=0))
        assert [index for index, _, _ in vertices] == [0, 0, 1]

    def test_flatten_path_one_polyline_per_contour(self) -> None:
        path = (
            PathBuilder().move_to(0, 0).line_to(10, 0).move_to(20, 0).line_to(30, 0).build()
        )
        polylines = flatten_path(path)
        assert len(polylines) == 2
        assert polyline_length(polylines[0]) == pytest.approx(10)


class TestSegmentLength:
    def test_line_length(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=30, y=40))
        assert segment_length(line) == pytest.approx(50)

    def test_quarter_circle_length(self) -> None:
        assert segment_length(quarter_circle()) == pytest.approx(math.pi * 50, rel=1e-2)

    def test_parameter_at_half_line(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=100, y=0))
        assert segment_parameter_at_length(line, 50) == pytest.approx(0.5)

    def test_parameter_clamps(self) -> None:
        line = LineSegment(start=Point(x=0, y=0), end=Point(x=100, y=0))
        assert segment_parameter_at_length(line, -5) == 0.0
        assert segment_parameter_at_length(line, 500) == 1.0

    def test_parameter_on_curve_reaches_requested_length(self) -> None:
        segment = quarter_circle()
        total = segment_length(segment, tolerance=0.01)
        t = segment_parameter_at_length(segment, total / 3, tolerance=0.01)
        head = sub_segment(segment, 0.0, t)
        assert segment_length(head, tolerance=0.01) == pytest.approx(total / 3, rel=1e-2)
