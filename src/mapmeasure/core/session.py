"""Measurement session for MapMeasure.

A session is the document being measured: the image identifier, its
calibration, the north reference direction, and the collections of
named points and areas recorded on it. Sessions live in memory only.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Sequence

from loguru import logger

from mapmeasure.core.calibration import DEFAULT_KNOWN_DISTANCE, CalibrationModel
from mapmeasure.core.errors import InvalidNameError, NotCalibratedError
from mapmeasure.core.geometry import (
    PixelCoords,
    RealCoords,
    distance_and_bearing,
    normalize_degrees,
    polygon_area,
)


MIN_AREA_VERTICES = 3


@dataclass(frozen=True)
class Point:
    """A named position with its derived real-world measurements."""

    name: str
    pixel_coords: PixelCoords
    real_coords: RealCoords
    distance: float
    bearing: float


@dataclass(frozen=True)
class Area:
    """A named polygon; its vertices are not part of the point list."""

    name: str
    points: tuple[Point, ...]
    real_area: float

    @property
    def vertices(self) -> tuple[RealCoords, ...]:
        return tuple(p.real_coords for p in self.points)


def clean_name(name: str) -> str:
    """Trim ``name`` and reject it if nothing is left."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidNameError("Name must not be empty")
    return cleaned


@dataclass
class Session:
    """Owns everything measured on one image."""

    image_id: str | None = None
    calibration: CalibrationModel = field(default_factory=CalibrationModel)
    reference_direction: float = 0.0
    _points: list[Point] = field(default_factory=list, repr=False)
    _areas: list[Area] = field(default_factory=list, repr=False)

    @property
    def points(self) -> tuple[Point, ...]:
        return tuple(self._points)

    @property
    def areas(self) -> tuple[Area, ...]:
        return tuple(self._areas)

    @property
    def is_measurable(self) -> bool:
        return self.calibration.is_measurable

    @property
    def has_measurements(self) -> bool:
        return bool(self._points or self._areas)

    def measure(self, pixel: PixelCoords, name: str) -> Point:
        """Derive a Point for ``pixel`` without storing it."""
        real = self.calibration.to_real(pixel)
        polar = distance_and_bearing(real, self.reference_direction)
        return Point(
            name=name,
            pixel_coords=pixel,
            real_coords=real,
            distance=polar.distance,
            bearing=polar.bearing,
        )

    def add_point(self, name: str, pixel: PixelCoords) -> Point:
        """Measure ``pixel`` and append it to the point list."""
        point = self.measure(pixel, clean_name(name))
        self.calibration.lock_origin()
        self._points.append(point)
        logger.info(
            f"Point '{point.name}' stored: distance {point.distance:.2f}, "
            f"bearing {point.bearing:.2f}"
        )
        return point

    def add_area(self, name: str, vertices: Sequence[Point]) -> Area:
        """Close ``vertices`` into a named area and append it."""
        cleaned = clean_name(name)
        if len(vertices) < MIN_AREA_VERTICES:
            raise ValueError(
                f"An area needs at least {MIN_AREA_VERTICES} vertices, got {len(vertices)}"
            )
        area = Area(
            name=cleaned,
            points=tuple(vertices),
            real_area=polygon_area([v.real_coords for v in vertices]),
        )
        self.calibration.lock_origin()
        self._areas.append(area)
        logger.info(f"Area '{area.name}' stored: {area.real_area:.2f} sq units")
        return area

    def set_reference_direction(self, degrees: float) -> float:
        """Rotate north to ``degrees`` and recompute every stored bearing.

        The recompute works from each point's stored real coordinates and
        swaps in the new list in one step. Distances are untouched.
        """
        if not self.is_measurable:
            raise NotCalibratedError("North can only be rotated on a calibrated map")
        direction = normalize_degrees(degrees)
        recomputed = [
            dataclasses.replace(
                p, bearing=distance_and_bearing(p.real_coords, direction).bearing
            )
            for p in self._points
        ]
        self.reference_direction = direction
        self._points = recomputed
        logger.debug(f"Reference direction {direction:.2f}, {len(recomputed)} bearings updated")
        return direction

    def rename_point(self, index: int, name: str) -> Point:
        point = dataclasses.replace(self._points[index], name=clean_name(name))
        self._points[index] = point
        return point

    def delete_point(self, index: int) -> Point:
        point = self._points.pop(index)
        logger.info(f"Point '{point.name}' deleted")
        return point

    def rename_area(self, index: int, name: str) -> Area:
        area = dataclasses.replace(self._areas[index], name=clean_name(name))
        self._areas[index] = area
        return area

    def delete_area(self, index: int) -> Area:
        area = self._areas.pop(index)
        logger.info(f"Area '{area.name}' deleted")
        return area

    def reset(self, known_distance: float = DEFAULT_KNOWN_DISTANCE):
        """Forget the image, the calibration and every measurement."""
        self.image_id = None
        self.calibration.reset(known_distance)
        self.reference_direction = 0.0
        self._points = []
        self._areas = []
        logger.info("Session reset")
