"""Stamp placement types produced by the stamp effect."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict

from pathfx.types.geometry import Point
from pathfx.types.paths import Path


class StampStyle(str, Enum):
    """How a stamped shape follows the path."""

    TRANSLATE = "translate"  # Position only
    ROTATE = "rotate"  # Position + rotate local up onto the tangent
    MORPH = "morph"  # Rotate + bend with local curvature


class Transform(BaseModel):
    """Placement of a shape in canvas coordinates.

    Applied to a local point in this order: bend, scale, rotate, translate.
    Rotation is in degrees, clockwise on a y-down canvas. `bend` displaces each
    point sideways by bend * y**2 / 2, approximating a shape wrapped along a
    curve of curvature `bend` whose forward axis is local up (-y).
    """

    model_config = ConfigDict(frozen=True)

    translate: Point = Point(x=0.0, y=0.0)
    rotation_degrees: float = 0.0
    scale: float = 1.0
    bend: float = 0.0

    def apply(self, point: Point) -> Point:
        x = point.x + self.bend * point.y * point.y / 2
        y = point.y
        x *= self.scale
        y *= self.scale
        radians = math.radians(self.rotation_degrees)
        cos_a = math.cos(radians)
        sin_a = math.sin(radians)
        return Point(
            x=x * cos_a - y * sin_a + self.translate.x,
            y=x * sin_a + y * cos_a + self.translate.y,
        )

    def to_affine(self) -> tuple[float, float, float, float, float, float]:
        """Affine part as an SVG-style (a, b, c, d, e, f) matrix.

        The bend is not affine and is left out.
        """
        radians = math.radians(self.rotation_degrees)
        cos_a = math.cos(radians) * self.scale
        sin_a = math.sin(radians) * self.scale
        return (cos_a, sin_a, -sin_a, cos_a, self.translate.x, self.translate.y)


class StampInstance(BaseModel):
    """One stamped copy of a shape: where to draw it and what to draw.

    `shape` is the caller's shape path itself, shared by every instance.
    """

    model_config = ConfigDict(frozen=True)

    transform: Transform
    shape: Path
    distance: float  # Arc length of the stop from the path start

    def placed_shape(self) -> Path:
        """The shape moved into canvas coordinates."""
        from pathfx.effects import transform_path

        return transform_path(self.shape, self.transform)
