"""Type definitions for pathfx.

This package contains all type definitions organized into focused modules:
- geometry: Core geometry types (Point, Vector, Bounds, SegmentType)
- paths: Segments, contours and the immutable Path model
- stamps: Stamp styles, transforms and stamp instances
- effects: Path effect definitions (dash, corner round, stamp, chain)
- clock: Clock style, time and face models
"""

from pathfx.types.clock import (
    ClockFace,
    ClockHand,
    ClockStyle,
    ClockTick,
    ClockTime,
    HandKind,
    TickType,
)
from pathfx.types.effects import (
    ChainEffect,
    CornerRoundEffect,
    DashEffect,
    PathEffect,
    StampEffect,
)
from pathfx.types.geometry import (
    ZERO_VECTOR,
    Bounds,
    Point,
    SegmentType,
    Vector,
    clamp_value,
)
from pathfx.types.paths import (
    Contour,
    CubicSegment,
    LineSegment,
    Path,
    QuadraticSegment,
    Segment,
    points_match,
)
from pathfx.types.stamps import StampInstance, StampStyle, Transform

__all__ = [
    # Geometry
    "Bounds",
    "Point",
    "SegmentType",
    "Vector",
    "ZERO_VECTOR",
    "clamp_value",
    # Paths
    "Contour",
    "CubicSegment",
    "LineSegment",
    "Path",
    "QuadraticSegment",
    "Segment",
    "points_match",
    # Stamps
    "StampInstance",
    "StampStyle",
    "Transform",
    # Effects
    "ChainEffect",
    "CornerRoundEffect",
    "DashEffect",
    "PathEffect",
    "StampEffect",
    # Clock
    "ClockFace",
    "ClockHand",
    "ClockStyle",
    "ClockTick",
    "ClockTime",
    "HandKind",
    "TickType",
]
