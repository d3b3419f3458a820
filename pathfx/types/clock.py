"""Clock face types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from pathfx.types.geometry import Point


class TickType(str, Enum):
    """Tick mark classes around the dial."""

    NORMAL = "normal"  # Minute step
    FIVE_STEP = "five_step"  # Hour step (every fifth tick)


class HandKind(str, Enum):
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"


class ClockStyle(BaseModel):
    """Dial dimensions and colors.

    Lengths are in canvas units. Hand lengths are measured from the dial
    center, so they may exceed the radius.
    """

    model_config = ConfigDict(frozen=True)

    clock_radius: float = 100.0
    background_color: str = "#FFFFFF"

    hand_hours_color: str = "#000000"
    hand_hours_length: float = 150.0
    hand_hours_width: float = 4.0
    hand_minutes_color: str = "#000000"
    hand_minutes_length: float = 170.0
    hand_minutes_width: float = 3.0
    hand_seconds_color: str = "#FF0000"
    hand_seconds_length: float = 185.0
    hand_seconds_width: float = 2.0

    hour_step_color: str = "#444444"
    hour_step_length: float = 20.0
    minute_step_color: str = "#CCCCCC"
    minute_step_length: float = 15.0
    step_width: float = 1.0


class ClockTime(BaseModel):
    """Fractional clock readings fed to the face generator."""

    model_config = ConfigDict(frozen=True)

    hours: float = 0.0
    minutes: float = 0.0
    seconds: float = 0.0

    def advanced(self, seconds: float = 1.0) -> "ClockTime":
        """Time after `seconds` more seconds, with all three hands moving."""
        return ClockTime(
            hours=self.hours + seconds / (60 * 60 * 12),
            minutes=self.minutes + seconds / 60,
            seconds=self.seconds + seconds,
        )


class ClockTick(BaseModel):
    """One tick mark, a line segment from start (inner) to end (rim)."""

    model_config = ConfigDict(frozen=True)

    index: int
    type: TickType
    angle_degrees: float
    start: Point
    end: Point
    length: float
    color: str
    width: float


class ClockHand(BaseModel):
    """One hand: rotation about the center plus the resulting segment."""

    model_config = ConfigDict(frozen=True)

    kind: HandKind
    angle_degrees: float
    length: float
    width: float
    color: str
    start: Point
    end: Point


class ClockFace(BaseModel):
    """Everything needed to draw one frame of the clock."""

    model_config = ConfigDict(frozen=True)

    center: Point
    radius: float
    ticks: tuple[ClockTick, ...]
    hands: tuple[ClockHand, ...]

    def hand(self, kind: HandKind) -> ClockHand:
        for hand in self.hands:
            if hand.kind == kind:
                return hand
        raise KeyError(kind)
