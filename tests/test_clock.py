"""Tests for clock face generation."""

import math

import pytest

from pathfx.clock import (
    clock_time_from_millis,
    generate_clock_face,
    generate_clock_face_at,
    generate_ticks,
    hand_angles,
    tick_type,
)
from pathfx.types import ClockFace, ClockStyle, ClockTime, HandKind, Point, TickType


class TestTicks:
    def test_sixty_ticks(self) -> None:
        face = generate_clock_face(0, 0, 0)
        assert len(face.ticks) == 60

    def test_tick_classification(self) -> None:
        assert tick_type(0) == TickType.FIVE_STEP
        assert tick_type(5) == TickType.FIVE_STEP
        assert tick_type(1) == TickType.NORMAL
        assert tick_type(59) == TickType.NORMAL
        face = generate_clock_face(0, 0, 0)
        assert sum(1 for t in face.ticks if t.type == TickType.FIVE_STEP) == 12

    def test_tick_zero_points_right(self) -> None:
        style = ClockStyle()
        tick = generate_ticks(style, Point(x=100, y=100))[0]
        assert tick.angle_degrees == 0
        assert (tick.start.x, tick.start.y) == pytest.approx((180, 100))
        assert (tick.end.x, tick.end.y) == pytest.approx((200, 100))
        assert tick.color == style.hour_step_color

    def test_tick_fifteen_points_down(self) -> None:
        tick = generate_ticks(ClockStyle(), Point(x=100, y=100))[15]
        assert tick.angle_degrees == 90
        assert (tick.end.x, tick.end.y) == pytest.approx((100, 200))
        assert tick.length == 20

    def test_minute_tick_style(self) -> None:
        style = ClockStyle()
        tick = generate_ticks(style, Point(x=100, y=100))[7]
        assert tick.type == TickType.NORMAL
        assert tick.length == style.minute_step_length
        assert tick.color == style.minute_step_color
        inner = math.hypot(tick.start.x - 100, tick.start.y - 100)
        assert inner == pytest.approx(style.clock_radius - style.minute_step_length)

    def test_custom_radius_moves_center(self) -> None:
        face = generate_clock_face(0, 0, 0, ClockStyle(clock_radius=50))
        assert face.center == Point(x=50, y=50)
        assert face.ticks[0].end.x == pytest.approx(100)


class TestHands:
    def test_three_oclock(self) -> None:
        face = generate_clock_face(3, 0, 0)
        assert face.hand(HandKind.HOURS).angle_degrees == 270
        assert face.hand(HandKind.MINUTES).angle_degrees == 180
        assert face.hand(HandKind.SECONDS).angle_degrees == 0

    def test_angles_are_not_wrapped(self) -> None:
        hours, minutes, seconds = hand_angles(13, 75, 90)
        assert hours == 13 * 30 + 180
        assert minutes == 75 * 6 + 180
        assert seconds == 540

    def test_hand_styles(self) -> None:
        face = generate_clock_face(0, 0, 0)
        hours = face.hand(HandKind.HOURS)
        seconds = face.hand(HandKind.SECONDS)
        assert (hours.length, hours.width, hours.color) == (150, 4, "#000000")
        assert (seconds.length, seconds.width, seconds.color) == (185, 2, "#FF0000")

    def test_hands_start_at_center(self) -> None:
        face = generate_clock_face(1, 2, 3)
        assert all(hand.start == face.center for hand in face.hands)

    def test_unrotated_hand_end(self) -> None:
        # the second hand at zero is drawn from the center to (center.x, length)
        face = generate_clock_face(0, 0, 0)
        end = face.hand(HandKind.SECONDS).end
        assert (end.x, end.y) == pytest.approx((100, 185))

    def test_rotated_hand_end(self) -> None:
        face = generate_clock_face(3, 0, 0)
        end = face.hand(HandKind.HOURS).end
        # 270 degrees turns the hand's offset (0, 50) into (50, 0)
        assert (end.x, end.y) == pytest.approx((150, 100))

    def test_face_at_time(self) -> None:
        time = ClockTime(hours=3)
        assert generate_clock_face_at(time) == generate_clock_face(3, 0, 0)

    def test_unknown_hand_raises(self) -> None:
        face = ClockFace(center=Point(x=0, y=0), radius=10, ticks=(), hands=())
        with pytest.raises(KeyError):
            face.hand(HandKind.SECONDS)


class TestClockTime:
    def test_from_millis(self) -> None:
        ms = (2 * 3600 + 30 * 60 + 15) * 1000
        time = clock_time_from_millis(ms)
        assert time.seconds == pytest.approx(15)
        assert time.minutes == pytest.approx(30.25)
        assert time.hours == pytest.approx(2.5 + 15 / 3600 + 1)

    def test_seconds_wrap(self) -> None:
        time = clock_time_from_millis(125_500)
        assert time.seconds == pytest.approx(5.5)

    def test_advanced(self) -> None:
        time = ClockTime(hours=1, minutes=10, seconds=20).advanced()
        assert time.seconds == 21
        assert time.minutes == pytest.approx(10 + 1 / 60)
        assert time.hours == pytest.approx(1 + 1 / 43200)
