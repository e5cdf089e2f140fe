"""Spatial Context

Geometry builder handed explicitly to shard indexes and query executors: builds
points and geodesic circles, converts kilometres to angular degrees and reads
and writes well-known text. Coordinates are (longitude, latitude) in degrees.
"""

import logging
import math
import re
from typing import Tuple, Union

import shapely.wkt
from pydantic import BaseModel, ConfigDict, Field
from shapely.errors import ShapelyError
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from ..exceptions import InvalidArgumentError, QueryParseError
from .geo_circle import GeoCircle, angular_distance_to_geometry

logger = logging.getLogger(__name__)

EARTH_MEAN_RADIUS_KM = 6371.0087714

# BUFFER(POINT(x y), d) is the WKT extension used to write circles
_BUFFER_PATTERN = re.compile(
    r"^\s*BUFFER\s*\(\s*(POINT\s*\([^)]*\))\s*,\s*([^)\s]+)\s*\)\s*$",
    re.IGNORECASE
)

Shape = Union[BaseGeometry, GeoCircle]
PointLike = Union[Point, Tuple[float, float]]


class SpatialContext(BaseModel):
    """Geometry builder configuration owned by the query layer."""
    model_config = ConfigDict(frozen=True)

    earth_radius_km: float = Field(EARTH_MEAN_RADIUS_KM, gt=0, description="Sphere radius used for km/degree conversion")
    validate_coordinates: bool = Field(True, description="Reject longitudes/latitudes outside the world bounds")

    def point(self, x: float, y: float) -> Point:
        """Build a point from longitude ``x`` and latitude ``y``."""
        if self.validate_coordinates and not (-180.0 <= x <= 180.0 and -90.0 <= y <= 90.0):
            raise InvalidArgumentError(
                f"Coordinates out of bounds: ({x}, {y})",
                {"x": x, "y": y}
            )
        return Point(x, y)

    def as_point(self, origin: PointLike) -> Point:
        """Accept a shapely Point or an (x, y) pair."""
        if isinstance(origin, Point):
            return self.point(origin.x, origin.y)
        try:
            x, y = origin
            x, y = float(x), float(y)
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"Origin must be a Point or an (x, y) pair, got {origin!r}")
        return self.point(x, y)

    def circle(self, center: PointLike, radius_degrees: float) -> GeoCircle:
        if not math.isfinite(radius_degrees) or radius_degrees <= 0:
            raise InvalidArgumentError(
                f"Circle radius must be a positive finite number, got {radius_degrees}",
                {"radius_degrees": radius_degrees}
            )
        return GeoCircle(self.as_point(center), radius_degrees)

    def degrees_from_km(self, km: float) -> float:
        """Convert a distance along the surface to an angular radius."""
        return math.degrees(km / self.earth_radius_km)

    def km_from_degrees(self, degrees: float) -> float:
        return math.radians(degrees) * self.earth_radius_km

    def distance_km(self, origin: PointLike, geometry: BaseGeometry) -> float:
        """Great-circle distance in km from ``origin`` to ``geometry``."""
        return self.km_from_degrees(angular_distance_to_geometry(self.as_point(origin), geometry))

    def parse_wkt(self, text: str) -> Shape:
        """Parse well-known text, including the BUFFER circle extension.

        Raises:
            QueryParseError: If the text is not valid WKT
        """
        if not isinstance(text, str) or not text.strip():
            raise QueryParseError("Shape text must be a non-empty string", str(text))

        match = _BUFFER_PATTERN.match(text)
        if match:
            center = self._load(match.group(1), text)
            try:
                radius = float(match.group(2))
            except ValueError:
                raise QueryParseError(f"Invalid circle radius '{match.group(2)}'", text)
            if not math.isfinite(radius) or radius <= 0:
                raise QueryParseError(f"Circle radius must be a positive finite number, got {radius}", text)
            return GeoCircle(center, radius)

        return self._load(text, text)

    def _load(self, wkt_text: str, original: str) -> BaseGeometry:
        try:
            geometry = shapely.wkt.loads(wkt_text)
        except (ShapelyError, ValueError) as e:
            logger.debug(f"Rejected shape text {original!r}: {e}")
            raise QueryParseError(f"Malformed well-known text: {e}", original)
        if geometry.is_empty:
            raise QueryParseError("Shape is empty", original)
        return geometry

    def to_wkt(self, shape: Shape) -> str:
        """Write a shape as WKT; circles use the BUFFER extension."""
        if isinstance(shape, GeoCircle):
            return f"BUFFER (POINT ({shape.center.x!r} {shape.center.y!r}), {shape.radius_degrees!r})"
        return shape.wkt
