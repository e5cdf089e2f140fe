"""Stored Document Builder

Turns a (shape, payload) record into the stored document a shard index keeps:
the shape's WKT first, then one stored field per payload value.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from src.interfaces import StoredDocument, StoredField
from ..exceptions import InconsistentFieldError, InvalidArgumentError
from ..geometry import GeoCircle, SpatialContext
from ..models import RESERVED_FIELDS, classify_numeric
from ..models.field_kind import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN

logger = logging.getLogger(__name__)

SHAPE_FIELD = "__shape__"

ShapeInput = Union[BaseGeometry, Tuple[float, float], str]


def to_stored_field(name: str, value: Any) -> StoredField:
    """Convert a Python value into a stored field with an explicit width.

    Raises:
        InconsistentFieldError: For None, booleans and unsupported types
    """
    if isinstance(value, str):
        return StoredField(name=name, string_value=value)

    if value is None:
        raise InconsistentFieldError(f"Field '{name}' has no value to store", name)

    if isinstance(value, (bool, np.bool_)):
        raise InconsistentFieldError(f"Boolean field '{name}' is not supported; store it as text or int", name)

    if isinstance(value, (np.integer, np.floating)):
        classify_numeric(value, name)
        return StoredField(name=name, numeric_value=value)

    if isinstance(value, int):
        if INT32_MIN <= value <= INT32_MAX:
            return StoredField(name=name, numeric_value=np.int32(value))
        if INT64_MIN <= value <= INT64_MAX:
            return StoredField(name=name, numeric_value=np.int64(value))
        raise InconsistentFieldError(f"Integer field '{name}' does not fit in 64 bits", name)

    if isinstance(value, float):
        return StoredField(name=name, numeric_value=np.float64(value))

    raise InconsistentFieldError(
        f"Unsupported value type {type(value).__name__} for field '{name}'", name
    )


class DocumentBuilder:
    """Builds stored documents from (shape, payload) records.

    Tuple and list payloads are stored as ``_1``, ``_2``, ...; mappings and
    pydantic models keep their keys; any other single value is stored as ``_1``.
    """

    def __init__(self, context: SpatialContext, store_shape: bool = True):
        self.context = context
        self.store_shape = store_shape

    def to_geometry(self, shape: ShapeInput) -> BaseGeometry:
        """Resolve a record's shape to a shapely geometry."""
        if isinstance(shape, str):
            geometry = self.context.parse_wkt(shape)
        elif isinstance(shape, Point):
            geometry = self.context.point(shape.x, shape.y)
        elif isinstance(shape, (BaseGeometry, GeoCircle)):
            geometry = shape
        else:
            geometry = self.context.as_point(shape)

        if isinstance(geometry, GeoCircle):
            raise InvalidArgumentError("Circles can be queried but not indexed; index a polygon instead")
        if geometry.is_empty:
            raise InvalidArgumentError("Cannot index an empty geometry")
        return geometry

    def build(self, geometry: BaseGeometry, payload: Any = None) -> StoredDocument:
        """Build the stored document for an already resolved geometry."""
        stored_fields: List[StoredField] = []
        if self.store_shape:
            stored_fields.append(StoredField(name=SHAPE_FIELD, string_value=self.context.to_wkt(geometry)))

        seen = {f.name for f in stored_fields}
        for name, value in self._payload_items(payload):
            if name in RESERVED_FIELDS or name == SHAPE_FIELD:
                raise InconsistentFieldError(f"Payload field '{name}' uses a reserved name", name)
            if name in seen:
                raise InconsistentFieldError(f"Payload field '{name}' appears more than once", name)
            seen.add(name)
            stored_fields.append(to_stored_field(name, value))

        return StoredDocument(stored_fields=tuple(stored_fields))

    @staticmethod
    def _payload_items(payload: Any) -> List[Tuple[str, Any]]:
        if payload is None:
            return []
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        if isinstance(payload, Mapping):
            items = []
            for key, value in payload.items():
                if not isinstance(key, str) or not key:
                    raise InconsistentFieldError(f"Payload keys must be non-empty strings, got {key!r}")
                items.append((key, value))
            return items
        if isinstance(payload, (tuple, list)):
            return [(f"_{position}", value) for position, value in enumerate(payload, 1)]
        return [("_1", payload)]


def build_documents(context: SpatialContext,
                    records: List[Tuple[ShapeInput, Any]],
                    builder: Optional[DocumentBuilder] = None) -> List[Tuple[BaseGeometry, StoredDocument]]:
    """Resolve geometries and build documents for a batch of records."""
    builder = builder or DocumentBuilder(context)
    built = []
    for shape, payload in records:
        geometry = builder.to_geometry(shape)
        built.append((geometry, builder.build(geometry, payload)))
    logger.debug(f"Built {len(built)} stored documents")
    return built
