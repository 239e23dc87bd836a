"""Version information for MapMeasure."""

__version__ = "1.2.0"
__version_display__ = f"MapMeasure V{__version__}"
