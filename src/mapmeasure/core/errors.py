"""Exception types raised by the MapMeasure core.

Every failure is local to the operation that raised it; the session
stays usable and the caller may retry from the same state.
"""


class MeasurementError(Exception):
    """Base class for all MapMeasure core errors."""


class InvalidDistanceError(MeasurementError, ValueError):
    """The known calibration distance is not a positive finite number."""


class DegenerateCalibrationError(MeasurementError, ValueError):
    """The two calibration clicks coincide, so no scale can be derived."""


class NotCalibratedError(MeasurementError, RuntimeError):
    """A conversion was requested before scale and origin were defined."""


class OriginLockedError(MeasurementError, RuntimeError):
    """The origin can no longer move because measurements depend on it."""


class InvalidStateError(MeasurementError, RuntimeError):
    """An operation was requested in a workflow state that does not allow it."""


class InvalidNameError(MeasurementError, ValueError):
    """A point or area name is empty after trimming."""
