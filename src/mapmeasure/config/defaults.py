"""Default configuration values for MapMeasure.

Configuration is organized into groups keyed by the concern they tune.
"""

DEFAULT_CONFIG = {
    # --- Calibration ---
    "calibration": {
        "default_known_distance": 10.0,
        "unit_label": "m",  # display only, the engine has a single linear scale
    },
    # --- Naming ---
    "naming": {
        "point_name_template": "Point {n}",
        "area_name_template": "Area {n}",
        "vertex_name_template": "V{n}",
    },
    # --- Export ---
    "export": {
        "decimal_places": 2,
    },
    # --- Logging ---
    "logging": {
        "log_level": "INFO",  # DEBUG, INFO, WARNING, ERROR, CRITICAL
        "log_to_file": True,
        "log_retention_days": 30,
        "log_max_size_mb": 50,
        "log_console_output": True,
    },
}


def default_value(group: str, key: str):
    """Return the shipped default for a setting."""
    return DEFAULT_CONFIG[group][key]
