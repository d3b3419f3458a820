"""Clock face generation.

Pure functions that turn a time reading into tick segments and hand
placements. Advancing the time is up to the caller's timer.
"""

import math

from pathfx.types import (
    ClockFace,
    ClockHand,
    ClockStyle,
    ClockTick,
    ClockTime,
    HandKind,
    Point,
    TickType,
)

TICK_COUNT = 60
DEGREES_PER_TICK = 360 / TICK_COUNT
DEGREES_PER_HOUR = 360 / 12
DEGREES_PER_MINUTE = 360 / 60

# Hands are drawn from the center towards +y, so the hour and minute hands
# are turned half a revolution to read correctly
HAND_OFFSET_DEGREES = 180.0


def _point_on_circle(center: Point, radius: float, radians: float) -> Point:
    return Point(
        x=center.x + radius * math.cos(radians),
        y=center.y + radius * math.sin(radians),
    )


def _rotate_about(point: Point, pivot: Point, degrees: float) -> Point:
    radians = math.radians(degrees)
    dx = point.x - pivot.x
    dy = point.y - pivot.y
    return Point(
        x=pivot.x + dx * math.cos(radians) - dy * math.sin(radians),
        y=pivot.y + dx * math.sin(radians) + dy * math.cos(radians),
    )


def tick_type(index: int) -> TickType:
    return TickType.FIVE_STEP if index % 5 == 0 else TickType.NORMAL


def generate_ticks(style: ClockStyle, center: Point) -> list[ClockTick]:
    """Sixty tick segments around the rim, tick 0 at 3 o'clock, clockwise."""
    radius = style.clock_radius
    ticks: list[ClockTick] = []
    for i in range(TICK_COUNT):
        angle = i * DEGREES_PER_TICK
        radians = math.radians(angle)
        kind = tick_type(i)
        if kind == TickType.FIVE_STEP:
            length = style.hour_step_length
            color = style.hour_step_color
        else:
            length = style.minute_step_length
            color = style.minute_step_color
        ticks.append(
            ClockTick(
                index=i,
                type=kind,
                angle_degrees=angle,
                start=_point_on_circle(center, radius - length, radians),
                end=_point_on_circle(center, radius, radians),
                length=length,
                color=color,
                width=style.step_width,
            )
        )
    return ticks


def hand_angles(hours: float, minutes: float, seconds: float) -> tuple[float, float, float]:
    """Hour, minute and second hand rotations in degrees (not wrapped)."""
    return (
        hours * DEGREES_PER_HOUR + HAND_OFFSET_DEGREES,
        minutes * DEGREES_PER_MINUTE + HAND_OFFSET_DEGREES,
        seconds * DEGREES_PER_MINUTE,
    )


def _hand(
    kind: HandKind,
    angle: float,
    length: float,
    width: float,
    color: str,
    center: Point,
) -> ClockHand:
    # Unrotated, the hand runs from the center to (center.x, length)
    unrotated_end = Point(x=center.x, y=length)
    return ClockHand(
        kind=kind,
        angle_degrees=angle,
        length=length,
        width=width,
        color=color,
        start=center,
        end=_rotate_about(unrotated_end, center, angle),
    )


def generate_clock_face(
    hours: float,
    minutes: float,
    seconds: float,
    style: ClockStyle | None = None,
) -> ClockFace:
    """Ticks and hands for one frame of the clock.

    The dial is centered at (radius, radius), i.e. inside a square canvas of
    side 2 * radius.
    """
    style = style or ClockStyle()
    center = Point(x=style.clock_radius, y=style.clock_radius)
    hours_angle, minutes_angle, seconds_angle = hand_angles(hours, minutes, seconds)
    hands = (
        _hand(
            HandKind.HOURS,
            hours_angle,
            style.hand_hours_length,
            style.hand_hours_width,
            style.hand_hours_color,
            center,
        ),
        _hand(
            HandKind.MINUTES,
            minutes_angle,
            style.hand_minutes_length,
            style.hand_minutes_width,
            style.hand_minutes_color,
            center,
        ),
        _hand(
            HandKind.SECONDS,
            seconds_angle,
            style.hand_seconds_length,
            style.hand_seconds_width,
            style.hand_seconds_color,
            center,
        ),
    )
    return ClockFace(
        center=center,
        radius=style.clock_radius,
        ticks=tuple(generate_ticks(style, center)),
        hands=hands,
    )


def generate_clock_face_at(time: ClockTime, style: ClockStyle | None = None) -> ClockFace:
    return generate_clock_face(time.hours, time.minutes, time.seconds, style)


def clock_time_from_millis(milliseconds: float) -> ClockTime:
    """Fractional readings for a wall-clock timestamp in epoch milliseconds.

    Hours are not wrapped and carry a +1 offset, matching the readings the
    clock screen starts from.
    """
    total_seconds = milliseconds / 1000
    return ClockTime(
        hours=total_seconds / 3600 + 1,
        minutes=(total_seconds / 60) % 60,
        seconds=total_seconds % 60,
    )
