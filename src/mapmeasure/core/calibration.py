"""Scale calibration for MapMeasure.

Derives a pixels-per-unit scale from two clicks a known real-world
distance apart, and an origin that anchors pixel positions to the real
plane. Once both are set the model converts between the two spaces.
"""

import math

from loguru import logger

from mapmeasure.core.errors import (
    DegenerateCalibrationError,
    InvalidDistanceError,
    InvalidStateError,
    NotCalibratedError,
    OriginLockedError,
)
from mapmeasure.core.geometry import PixelCoords, RealCoords, pixel_distance


DEFAULT_KNOWN_DISTANCE = 10.0


def validate_known_distance(value: float) -> float:
    """Return ``value`` as a float, rejecting anything but a positive finite number."""
    try:
        distance = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidDistanceError(f"Known distance must be a number, got {value!r}") from e
    if not math.isfinite(distance) or distance <= 0:
        raise InvalidDistanceError(f"Known distance must be positive, got {value!r}")
    return distance


class CalibrationModel:
    """Tracks the calibration clicks, the derived scale and the origin."""

    def __init__(self, known_distance: float = DEFAULT_KNOWN_DISTANCE):
        self._known_distance = validate_known_distance(known_distance)
        self._points: list[PixelCoords] = []
        self._scale: float | None = None
        self._origin: PixelCoords | None = None
        self._origin_locked = False

    @property
    def known_distance(self) -> float:
        return self._known_distance

    @property
    def calibration_points(self) -> tuple[PixelCoords, ...]:
        return tuple(self._points)

    @property
    def scale(self) -> float | None:
        """Pixels per real unit, or None until calibration completes."""
        return self._scale

    @property
    def origin(self) -> PixelCoords | None:
        return self._origin

    @property
    def origin_locked(self) -> bool:
        return self._origin_locked

    @property
    def is_calibrated(self) -> bool:
        return self._scale is not None

    @property
    def is_measurable(self) -> bool:
        """True once both scale and origin are known."""
        return self._scale is not None and self._origin is not None

    def begin_calibration(self, known_distance: float):
        """Start a fresh calibration against ``known_distance`` real units.

        Clears any captured clicks and any previous scale and origin.
        """
        distance = validate_known_distance(known_distance)
        if self._origin_locked:
            raise InvalidStateError("Cannot recalibrate while measurements depend on the scale")
        self._known_distance = distance
        self._points.clear()
        self._scale = None
        self._origin = None
        logger.debug(f"Calibration started (known distance {distance})")

    def set_known_distance(self, known_distance: float):
        """Change the distance used by the next completed capture."""
        if self._scale is not None:
            raise InvalidStateError("Scale already defined; reset to recalibrate")
        self._known_distance = validate_known_distance(known_distance)

    def capture_calibration_point(self, p: PixelCoords) -> float | None:
        """Record one calibration click.

        Returns None after the first click and the new scale after the
        second. Coinciding or non-finite clicks raise
        DegenerateCalibrationError and leave the model exactly as it was
        before the call.
        """
        if self._scale is not None:
            raise InvalidStateError("Scale already defined; reset to recalibrate")
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise DegenerateCalibrationError(f"Calibration point is not finite: ({p.x}, {p.y})")
        if not self._points:
            self._points.append(p)
            return None

        first = self._points[0]
        span = pixel_distance(first, p)
        if not math.isfinite(span) or span == 0:
            raise DegenerateCalibrationError(
                f"Calibration points coincide at ({p.x}, {p.y})"
            )
        scale = span / self._known_distance
        if not math.isfinite(scale) or scale <= 0:
            raise DegenerateCalibrationError(f"Calibration yields an unusable scale ({scale})")

        self._points.append(p)
        self._scale = scale
        logger.info(
            f"Scale calibrated: {span:.2f} px over {self._known_distance} units "
            f"= {self._scale:.4f} px/unit"
        )
        return self._scale

    def discard_calibration_points(self):
        """Forget pending calibration clicks (only while no scale exists)."""
        if self._scale is None:
            self._points.clear()

    def set_origin(self, p: PixelCoords):
        """Anchor real (0, 0) at pixel ``p``."""
        if self._scale is None:
            raise NotCalibratedError("Set the scale before placing the origin")
        if self._origin_locked:
            raise OriginLockedError("Origin is fixed once measurements exist")
        self._origin = p
        logger.info(f"Origin set at pixel ({p.x:.1f}, {p.y:.1f})")

    def clear_origin(self):
        if self._origin_locked:
            raise OriginLockedError("Origin is fixed once measurements exist")
        self._origin = None

    def lock_origin(self):
        """Freeze the origin; called when the first measurement is stored."""
        if not self.is_measurable:
            raise NotCalibratedError("Nothing to lock before calibration completes")
        self._origin_locked = True

    def to_real(self, p: PixelCoords) -> RealCoords:
        """Convert a pixel position to real coordinates (y flipped upward)."""
        if self._scale is None or self._origin is None:
            raise NotCalibratedError("Scale and origin must be set before measuring")
        return RealCoords(
            x=(p.x - self._origin.x) / self._scale,
            y=(self._origin.y - p.y) / self._scale,
        )

    def to_pixel(self, r: RealCoords) -> PixelCoords:
        """Inverse of :meth:`to_real`."""
        if self._scale is None or self._origin is None:
            raise NotCalibratedError("Scale and origin must be set before measuring")
        return PixelCoords(
            x=self._origin.x + r.x * self._scale,
            y=self._origin.y - r.y * self._scale,
        )

    def reset(self, known_distance: float = DEFAULT_KNOWN_DISTANCE):
        """Return to the uncalibrated state."""
        self._known_distance = validate_known_distance(known_distance)
        self._points.clear()
        self._scale = None
        self._origin = None
        self._origin_locked = False
