"""Report tables for MapMeasure.

Flattens a session into the records report writers consume: one row per
point, one row per area, and the overlay data needed to redraw every
measurement on top of the image. Writing CSV or PDF files is left to
the caller; everything here is derived losslessly from the session.
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from mapmeasure.config.defaults import default_value
from mapmeasure.config.manager import ConfigManager
from mapmeasure.core.errors import NotCalibratedError
from mapmeasure.core.geometry import PixelCoords
from mapmeasure.core.session import Session


class ReportTable(Enum):
    """Tables a report can contain."""

    POINTS = "points"
    AREAS = "areas"


@dataclass(frozen=True)
class PointRecord:
    name: str
    distance: float
    bearing: float
    x: float
    y: float


@dataclass(frozen=True)
class AreaRecord:
    name: str
    real_area: float


@dataclass(frozen=True)
class Overlay:
    """Pixel-space geometry for redrawing a session over its image."""

    origin: PixelCoords
    scale: float
    calibration_points: tuple[PixelCoords, ...]
    points: tuple[tuple[str, PixelCoords], ...]
    areas: tuple[tuple[str, tuple[PixelCoords, ...]], ...]


def point_records(session: Session) -> list[PointRecord]:
    """One record per stored point, in capture order."""
    return [
        PointRecord(
            name=p.name,
            distance=p.distance,
            bearing=p.bearing,
            x=p.real_coords.x,
            y=p.real_coords.y,
        )
        for p in session.points
    ]


def area_records(session: Session) -> list[AreaRecord]:
    """One record per stored area, in capture order."""
    return [AreaRecord(name=a.name, real_area=a.real_area) for a in session.areas]


def overlay(session: Session) -> Overlay:
    """Collect origin, scale and pixel positions of every measurement."""
    calibration = session.calibration
    if not calibration.is_measurable:
        raise NotCalibratedError("Nothing to draw before calibration completes")
    return Overlay(
        origin=calibration.origin,
        scale=calibration.scale,
        calibration_points=calibration.calibration_points,
        points=tuple((p.name, p.pixel_coords) for p in session.points),
        areas=tuple(
            (a.name, tuple(v.pixel_coords for v in a.points)) for a in session.areas
        ),
    )


def table_rows(
    session: Session,
    table: ReportTable,
    config: ConfigManager | None = None,
) -> list[list[str]]:
    """Header plus formatted rows for ``table``, ready for a CSV or PDF writer."""
    places = default_value("export", "decimal_places")
    unit = default_value("calibration", "unit_label")
    if config is not None:
        places = config.get("export", "decimal_places", places)
        unit = config.get("calibration", "unit_label", unit)

    def fmt(value: float) -> str:
        return f"{value:.{places}f}"

    if table is ReportTable.POINTS:
        rows = [["Name", f"Distance ({unit})", f"Coordinates ({unit})", "Bearing (°)"]]
        rows += [
            [r.name, fmt(r.distance), f"({fmt(r.x)}, {fmt(r.y)})", fmt(r.bearing)]
            for r in point_records(session)
        ]
    else:
        rows = [["Name", f"Area ({unit}²)"]]
        rows += [[r.name, fmt(r.real_area)] for r in area_records(session)]

    logger.debug(f"Built {table.value} table with {len(rows) - 1} rows")
    return rows
