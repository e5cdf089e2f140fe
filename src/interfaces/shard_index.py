"""GeoShard Shard Index Interface

This module defines the abstract contract every shard index must implement, and
the data models the index hands back: raw hits and materialized stored documents.
The shard query executor only ever talks to an index through this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class StoredField(BaseModel):
    """A single field persisted on an indexed document.

    Mirrors what a document index keeps per stored field: a name plus a numeric
    and/or string representation. Numeric values keep their width through numpy
    scalar types (``numpy.int32``, ``numpy.int64``, ``numpy.float32``,
    ``numpy.float64``). A field carrying neither representation is inconsistent
    and is rejected when it is classified, not here.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Stored field name")
    numeric_value: Optional[Any] = Field(None, description="Numeric representation, if any")
    string_value: Optional[str] = Field(None, description="String representation, if any")

    @property
    def value(self) -> Any:
        """The representation a reader sees: numeric first, then string."""
        if self.numeric_value is not None:
            return self.numeric_value
        return self.string_value


class StoredDocument(BaseModel):
    """Materialized set of stored fields for one indexed entity.

    Fields keep the order they were stored in.
    """
    model_config = ConfigDict(frozen=True)

    stored_fields: Tuple[StoredField, ...] = Field(default_factory=tuple, description="Stored fields in insertion order")

    def __len__(self) -> int:
        return len(self.stored_fields)

    def names(self) -> List[str]:
        return [f.name for f in self.stored_fields]

    def get(self, name: str) -> Optional[StoredField]:
        for stored_field in self.stored_fields:
            if stored_field.name == name:
                return stored_field
        return None

    def text_field(self, name: str) -> Optional[str]:
        """Return the string value of a field, or None if absent."""
        stored_field = self.get(name)
        return stored_field.string_value if stored_field else None


class IndexHit(BaseModel):
    """Raw hit returned by a shard index search.

    ``score`` is native to the query kind: geodesic distance in kilometres for
    nearest-neighbour searches, index relevance for region searches.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    score: float = Field(..., description="Native score of the hit")
    internal_id: int = Field(..., ge=-2**31, le=2**31 - 1, description="Index-local document id")
    doc_handle: Any = Field(..., description="Handle accepted by ShardIndex.materialize")


class ShardIndex(ABC):
    """Abstract base class for a single shard's spatial document index.

    Implementations hold the shard's documents and geometries. They are queried
    read-only by the shard query executor; one handle is owned by one shard
    query at a time, so implementations need no internal locking for searches.
    """

    @property
    @abstractmethod
    def shard_index(self) -> int:
        """Identifier of the shard this index belongs to."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the index can still be searched."""

    @property
    @abstractmethod
    def doc_count(self) -> int:
        """Number of documents currently in the index."""

    @abstractmethod
    def nearest(self, origin, k: int) -> List[IndexHit]:
        """Return at most ``k`` hits by ascending geodesic distance from ``origin``.

        Args:
            origin: shapely Point in (longitude, latitude) degrees
            k: Maximum number of hits

        Returns:
            Hits whose score is the distance in kilometres, closest first
        """

    @abstractmethod
    def intersecting(self, shape, k: int) -> List[IndexHit]:
        """Return at most ``k`` hits whose geometry intersects ``shape``.

        Args:
            shape: shapely geometry or geodesic circle built by a SpatialContext
            k: Maximum number of hits

        Returns:
            Hits ordered by descending native relevance
        """

    @abstractmethod
    def materialize(self, doc_handle: Any) -> StoredDocument:
        """Load every stored field of the document behind ``doc_handle``."""

    @abstractmethod
    def close(self) -> None:
        """Release the index. Searching a closed index yields no hits."""
