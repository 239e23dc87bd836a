"""Tests for the configuration system."""

import json

from mapmeasure.config.manager import ConfigManager
from mapmeasure.config.defaults import DEFAULT_CONFIG


class TestConfigManager:
    def test_load_defaults(self, config_manager):
        """Config loads with default values."""
        assert config_manager.get("calibration", "default_known_distance") == 10.0
        assert config_manager.get("naming", "point_name_template") == "Point {n}"

    def test_set_and_get(self, config_manager):
        """Can set and retrieve values."""
        config_manager.set("calibration", "unit_label", "ft")
        assert config_manager.get("calibration", "unit_label") == "ft"

    def test_missing_key_uses_default_argument(self, config_manager):
        assert config_manager.get("naming", "nope", "fallback") == "fallback"

    def test_save_and_reload(self, tmp_config_dir):
        """Config persists across save/load cycles."""
        mgr = ConfigManager(config_dir=tmp_config_dir)
        mgr.load()
        mgr.set("export", "decimal_places", 3)
        mgr.save()

        mgr2 = ConfigManager(config_dir=tmp_config_dir)
        mgr2.load()
        assert mgr2.get("export", "decimal_places") == 3

    def test_partial_file_keeps_other_defaults(self, tmp_config_dir):
        path = tmp_config_dir / ConfigManager.CONFIG_FILENAME
        path.write_text(json.dumps({"naming": {"area_name_template": "Zone {n}"}}), encoding="utf-8")
        mgr = ConfigManager(config_dir=tmp_config_dir)
        mgr.load()
        assert mgr.get("naming", "area_name_template") == "Zone {n}"
        assert mgr.get("naming", "point_name_template") == "Point {n}"

    def test_corrupt_file_falls_back_to_defaults(self, tmp_config_dir):
        (tmp_config_dir / ConfigManager.CONFIG_FILENAME).write_text("{not json", encoding="utf-8")
        mgr = ConfigManager(config_dir=tmp_config_dir)
        mgr.load()
        assert mgr.get("naming", "area_name_template") == "Area {n}"

    def test_from_defaults_is_independent_copy(self):
        mgr = ConfigManager.from_defaults()
        mgr.set("naming", "vertex_name_template", "P{n}")
        assert DEFAULT_CONFIG["naming"]["vertex_name_template"] == "V{n}"

    def test_machine_reads_settings_live(self, config_manager):
        """Naming changes apply to the next staged point without rebuilding the machine."""
        from mapmeasure.core.geometry import PixelCoords
        from mapmeasure.core.workflow import InteractionMachine

        machine = InteractionMachine(config=config_manager)
        machine.load_image("plan.png")
        for p in (PixelCoords(0, 0), PixelCoords(100, 0), PixelCoords(50, 50)):
            machine.click(p)
        config_manager.set("naming", "point_name_template", "Stake {n}")
        machine.click(PixelCoords(60, 60))
        assert machine.pending_name == "Stake 1"
