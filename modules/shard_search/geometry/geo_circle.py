"""Geodesic Circle Shape

A circle on the sphere: every location within an angular radius of a centre.
Shapely only knows planar geometry, so circle membership is decided with the
haversine formula instead of a buffered polygon.
"""

import math

from shapely.geometry import Point, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import nearest_points


def angular_distance_degrees(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle distance between two (lon, lat) positions, in degrees."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)
    h = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    return math.degrees(2 * math.asin(min(1.0, math.sqrt(h))))


def angular_distance_to_geometry(origin: Point, geometry: BaseGeometry) -> float:
    """Great-circle distance in degrees from ``origin`` to ``geometry``.

    Zero when the geometry covers the origin. For non-point geometries the
    closest location is found in planar (lon, lat) space, then measured on the
    sphere.
    """
    if geometry.geom_type == "Point":
        return angular_distance_degrees(origin.x, origin.y, geometry.x, geometry.y)
    if geometry.intersects(origin):
        return 0.0
    closest = nearest_points(geometry, origin)[0]
    return angular_distance_degrees(origin.x, origin.y, closest.x, closest.y)


class GeoCircle:
    """Circle of ``radius_degrees`` around ``center`` on the sphere."""

    geom_type = "GeoCircle"

    def __init__(self, center: Point, radius_degrees: float):
        self.center = center
        self.radius_degrees = float(radius_degrees)

    def __repr__(self) -> str:
        return f"GeoCircle(center=({self.center.x}, {self.center.y}), radius_degrees={self.radius_degrees})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, GeoCircle):
            return NotImplemented
        return self.center.equals(other.center) and self.radius_degrees == other.radius_degrees

    def __hash__(self) -> int:
        return hash((self.center.x, self.center.y, self.radius_degrees))

    def intersects(self, geometry: BaseGeometry) -> bool:
        return angular_distance_to_geometry(self.center, geometry) <= self.radius_degrees

    def envelope(self) -> BaseGeometry:
        """Bounding box in degrees, widened to every longitude near poles and the antimeridian."""
        lon, lat = self.center.x, self.center.y
        r = self.radius_degrees
        min_lat, max_lat = max(-90.0, lat - r), min(90.0, lat + r)

        if abs(lat) + r >= 90.0:
            return box(-180.0, min_lat, 180.0, max_lat)

        ratio = math.sin(math.radians(r)) / math.cos(math.radians(lat))
        d_lon = math.degrees(math.asin(min(1.0, ratio)))
        if lon - d_lon < -180.0 or lon + d_lon > 180.0:
            return box(-180.0, min_lat, 180.0, max_lat)
        return box(lon - d_lon, min_lat, lon + d_lon, max_lat)
