"""
MapMeasure - measure distances, bearings and areas on calibrated images.

MapMeasure calibrates an arbitrary raster image (a map, floor plan or
satellite photo) against a known real-world distance, then records named
points and polygonal areas on it, reporting their real-world distance,
bearing and area relative to a user-chosen origin and north direction.
"""

from mapmeasure.version import __version__, __version_display__

__all__ = ["__version__", "__version_display__"]
