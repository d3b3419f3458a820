"""Core geometry types."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """A 2D point."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(x=self.x + dx, y=self.y + dy)


class Vector(BaseModel):
    """A 2D direction or displacement."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Vector":
        """Unit vector in the same direction (zero vector stays zero)."""
        length = self.length()
        if length == 0:
            return ZERO_VECTOR
        return Vector(x=self.x / length, y=self.y / length)

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0


ZERO_VECTOR = Vector(x=0.0, y=0.0)


class Bounds(BaseModel):
    """Axis-aligned bounding box."""

    model_config = ConfigDict(frozen=True)

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Point:
        return Point(x=(self.left + self.right) / 2, y=(self.top + self.bottom) / 2)


class SegmentType(str, Enum):
    """Kinds of path segments."""

    LINE = "line"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"


def clamp_value(value: float, low: float, high: float) -> float:
    """Clamp a value to a range [low, high]."""
    return max(low, min(high, value))
