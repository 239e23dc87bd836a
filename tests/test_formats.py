"""Tests for report tables."""

import pytest

from mapmeasure.core.errors import NotCalibratedError
from mapmeasure.core.geometry import PixelCoords
from mapmeasure.core.session import Session
from mapmeasure.exporters.formats import (
    ReportTable,
    area_records,
    overlay,
    point_records,
    table_rows,
)


@pytest.fixture
def measured(ready_machine):
    ready_machine.click(PixelCoords(150, 50))
    ready_machine.confirm("Gate")
    ready_machine.start_area()
    for p in [PixelCoords(50, 50), PixelCoords(150, 50), PixelCoords(150, 150), PixelCoords(50, 150)]:
        ready_machine.click(p)
    ready_machine.finish_area()
    ready_machine.confirm("Yard")
    return ready_machine.session


class TestRecords:
    def test_point_records(self, measured):
        (record,) = point_records(measured)
        assert record.name == "Gate"
        assert record.distance == pytest.approx(10)
        assert record.bearing == pytest.approx(90)
        assert (record.x, record.y) == pytest.approx((10, 0))

    def test_area_records(self, measured):
        (record,) = area_records(measured)
        assert record.name == "Yard"
        assert record.real_area == pytest.approx(100)

    def test_overlay(self, measured):
        data = overlay(measured)
        assert data.origin == PixelCoords(50, 50)
        assert data.scale == pytest.approx(10)
        assert data.calibration_points == (PixelCoords(0, 0), PixelCoords(100, 0))
        assert data.points == (("Gate", PixelCoords(150, 50)),)
        name, vertices = data.areas[0]
        assert name == "Yard"
        assert vertices[2] == PixelCoords(150, 150)

    def test_overlay_requires_calibration(self):
        with pytest.raises(NotCalibratedError):
            overlay(Session())


class TestTableRows:
    def test_points_table(self, measured):
        rows = table_rows(measured, ReportTable.POINTS)
        assert rows[0] == ["Name", "Distance (m)", "Coordinates (m)", "Bearing (°)"]
        assert rows[1] == ["Gate", "10.00", "(10.00, 0.00)", "90.00"]

    def test_areas_table_honours_config(self, measured, config_manager):
        config_manager.set("export", "decimal_places", 1)
        config_manager.set("calibration", "unit_label", "ft")
        rows = table_rows(measured, ReportTable.AREAS, config_manager)
        assert rows == [["Name", "Area (ft²)"], ["Yard", "100.0"]]

    def test_empty_session(self):
        assert table_rows(Session(), ReportTable.POINTS)[1:] == []
