"""Geometry Builder

Explicitly constructed spatial context used to build query shapes.
"""

from .geo_circle import GeoCircle, angular_distance_degrees, angular_distance_to_geometry
from .spatial_context import SpatialContext, EARTH_MEAN_RADIUS_KM

__all__ = [
    'GeoCircle',
    'angular_distance_degrees',
    'angular_distance_to_geometry',
    'SpatialContext',
    'EARTH_MEAN_RADIUS_KM',
]
