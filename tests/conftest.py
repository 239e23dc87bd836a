"""Shared test fixtures for MapMeasure."""

import pytest

from mapmeasure.core.geometry import PixelCoords


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Provide a temporary configuration directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def config_manager(tmp_config_dir):
    """Provide a ConfigManager with a temp directory."""
    from mapmeasure.config.manager import ConfigManager

    mgr = ConfigManager(config_dir=tmp_config_dir)
    mgr.load()
    return mgr


@pytest.fixture
def machine(config_manager):
    """A fresh workflow with an image loaded, waiting for calibration."""
    from mapmeasure.core.workflow import InteractionMachine

    m = InteractionMachine(config=config_manager)
    m.load_image("plan.png")
    return m


@pytest.fixture
def ready_machine(machine):
    """Calibrated at 10 px/unit (100 px over 10 units) with the origin at (50, 50)."""
    machine.click(PixelCoords(0, 0))
    machine.click(PixelCoords(100, 0))
    machine.click(PixelCoords(50, 50))
    return machine

