"""Spatial Query Descriptors

Validated descriptions of the three query kinds a shard can execute. The shard
cluster builds one descriptor per search and hands the same descriptor to every
shard.
"""

from enum import Enum
from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidArgumentError


class QueryKind(str, Enum):
    """Kind of spatial query."""
    KNN = "knn"
    CIRCLE = "circle"
    SHAPE = "shape"


class KnnQuery(BaseModel):
    """k nearest neighbours of a point."""
    model_config = ConfigDict(frozen=True)

    kind: QueryKind = Field(QueryKind.KNN, frozen=True)
    origin: Tuple[float, float] = Field(..., description="(longitude, latitude) of the query point")
    k: int = Field(..., ge=1, description="Maximum number of results")


class CircleQuery(BaseModel):
    """Everything within ``radius_km`` of a point."""
    model_config = ConfigDict(frozen=True)

    kind: QueryKind = Field(QueryKind.CIRCLE, frozen=True)
    origin: Tuple[float, float] = Field(..., description="(longitude, latitude) of the circle centre")
    radius_km: float = Field(..., gt=0, allow_inf_nan=False, description="Circle radius in kilometres")
    k: int = Field(..., ge=1, description="Maximum number of results")


class ShapeQuery(BaseModel):
    """Everything intersecting a shape given as well-known text."""
    model_config = ConfigDict(frozen=True)

    kind: QueryKind = Field(QueryKind.SHAPE, frozen=True)
    shape_wkt: str = Field(..., description="Query geometry as WKT")
    k: int = Field(..., ge=1, description="Maximum number of results")


SpatialQuery = Union[KnnQuery, CircleQuery, ShapeQuery]


def build_query(model: type, **values) -> SpatialQuery:
    """Construct a query descriptor, reporting bad arguments as InvalidArgumentError."""
    try:
        return model(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise InvalidArgumentError(
            f"Invalid {model.__name__} arguments: {problems}",
            {key: value for key, value in values.items() if key != "shape_wkt"}
        )
