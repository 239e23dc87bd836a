"""Planar geometry for MapMeasure.

Value types for the two coordinate spaces and the pure functions of the
measurement engine: distance and bearing from the origin, polygon area,
and the compass drag conversion.

Pixel space has its origin at the image's top-left corner with y
growing downward. Real space is a Cartesian plane centred on the
user-chosen origin with y growing upward ("north" before rotation).
"""

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class PixelCoords:
    """A position in image pixel space."""

    x: float
    y: float


@dataclass(frozen=True)
class RealCoords:
    """A position in the calibrated real-world plane."""

    x: float
    y: float


@dataclass(frozen=True)
class Polar:
    """Distance and bearing of a real position as seen from the origin."""

    distance: float
    bearing: float


# Raw bearing used for the origin itself, where atan2(0, 0) has no meaning.
ORIGIN_RAW_BEARING = 0.0


def pixel_distance(p1: PixelCoords, p2: PixelCoords) -> float:
    """Euclidean distance between two pixel positions."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def normalize_degrees(angle: float) -> float:
    """Fold an angle in degrees into [0, 360)."""
    if not math.isfinite(angle):
        raise ValueError(f"Angle must be finite, got {angle!r}")
    folded = angle % 360.0
    # A tiny negative input folds to exactly 360.0 in float arithmetic.
    if folded >= 360.0:
        folded = 0.0
    return folded


def distance_and_bearing(real: RealCoords, reference_direction: float = 0.0) -> Polar:
    """Return distance from the origin and bearing clockwise from north.

    The raw bearing is measured from the positive y axis, clockwise
    positive, then offset by ``reference_direction`` degrees and folded
    into [0, 360). The origin itself takes ``ORIGIN_RAW_BEARING`` as its
    raw bearing, so it rotates with north like every other point: at a
    reference of 30 degrees it reads 330.
    """
    distance = math.hypot(real.x, real.y)
    if real.x == 0 and real.y == 0:
        raw = ORIGIN_RAW_BEARING
    else:
        raw = math.degrees(math.atan2(real.x, real.y))
    return Polar(distance=distance, bearing=normalize_degrees(raw - reference_direction))


def polygon_area(vertices: Sequence[RealCoords]) -> float:
    """Return the absolute area of a polygon using the shoelace formula.

    Fewer than three vertices enclose nothing and yield 0.0. The result
    does not depend on winding direction or on the starting vertex.
    """
    n = len(vertices)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        a = vertices[i]
        b = vertices[(i + 1) % n]
        area += a.x * b.y - b.x * a.y
    return abs(area) / 2.0


def rotation_from_drag(center: PixelCoords, pointer: PixelCoords) -> float:
    """Convert a compass drag gesture into a reference direction.

    ``center`` is the compass centre and ``pointer`` the current pointer
    position, both in screen space (y down). A pointer straight above
    the centre means no rotation; moving it clockwise rotates north
    clockwise.
    """
    angle = math.degrees(math.atan2(pointer.y - center.y, pointer.x - center.x)) + 90.0
    return normalize_degrees(angle)
