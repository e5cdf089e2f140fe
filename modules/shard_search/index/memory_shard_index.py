"""In-Memory Shard Index

Single-shard spatial document index backed by a shapely STRtree. Internal ids
are assigned sequentially from zero in insertion order and double as document
handles.
"""

import logging
from typing import Any, List, Optional

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.strtree import STRtree

from src.interfaces import IndexHit, ShardIndex, StoredDocument
from ..exceptions import IndexUnavailableError
from ..geometry import GeoCircle, SpatialContext
from .document_builder import DocumentBuilder, ShapeInput

logger = logging.getLogger(__name__)

# Region searches match or don't; every match carries the same relevance
MATCH_SCORE = 1.0


class InMemoryShardIndex(ShardIndex):
    """Spatial document index for one shard.

    Geometries are (lon, lat) shapely geometries. Nearest-neighbour search ranks
    by great-circle distance; region search uses the STRtree to find candidates
    and then tests the exact predicate.
    """

    def __init__(self, shard_index: int, context: SpatialContext,
                 builder: Optional[DocumentBuilder] = None):
        self._shard_index = shard_index
        self.context = context
        self.builder = builder or DocumentBuilder(context)
        self._geometries: List[BaseGeometry] = []
        self._documents: List[StoredDocument] = []
        self._tree: Optional[STRtree] = None
        self._open = True
        logger.debug(f"InMemoryShardIndex created for shard {shard_index}")

    @property
    def shard_index(self) -> int:
        return self._shard_index

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def doc_count(self) -> int:
        return len(self._documents)

    def add(self, shape: ShapeInput, payload: Any = None) -> int:
        """Index a record and return its internal id."""
        geometry = self.builder.to_geometry(shape)
        return self.add_document(geometry, self.builder.build(geometry, payload))

    def add_document(self, geometry: BaseGeometry, document: StoredDocument) -> int:
        if not self._open:
            raise IndexUnavailableError("Cannot add documents to a closed shard index", self._shard_index)
        self._geometries.append(geometry)
        self._documents.append(document)
        self._tree = None
        return len(self._documents) - 1

    def _ensure_tree(self) -> STRtree:
        if self._tree is None:
            self._tree = STRtree(self._geometries)
        return self._tree

    def nearest(self, origin: Point, k: int) -> List[IndexHit]:
        if not self._open or not self._documents:
            return []
        # sorted() is stable: equal distances stay in insertion order
        distances = sorted(
            ((self.context.distance_km(origin, geometry), internal_id)
             for internal_id, geometry in enumerate(self._geometries)),
            key=lambda pair: pair[0]
        )
        return [
            IndexHit(score=distance, internal_id=internal_id, doc_handle=internal_id)
            for distance, internal_id in distances[:k]
        ]

    def intersecting(self, shape, k: int) -> List[IndexHit]:
        if not self._open or not self._documents:
            return []
        tree = self._ensure_tree()

        if isinstance(shape, GeoCircle):
            candidates = sorted(int(i) for i in tree.query(shape.envelope()))
            matches = [i for i in candidates if shape.intersects(self._geometries[i])]
        else:
            matches = sorted(int(i) for i in tree.query(shape, predicate="intersects"))

        return [
            IndexHit(score=MATCH_SCORE, internal_id=internal_id, doc_handle=internal_id)
            for internal_id in matches[:k]
        ]

    def materialize(self, doc_handle: Any) -> StoredDocument:
        if not self._open:
            raise IndexUnavailableError("Shard index is closed", self._shard_index)
        if not isinstance(doc_handle, int) or not 0 <= doc_handle < len(self._documents):
            raise IndexUnavailableError(f"Unknown document handle {doc_handle!r}", self._shard_index)
        return self._documents[doc_handle]

    def geometry(self, internal_id: int) -> BaseGeometry:
        return self._geometries[internal_id]

    def close(self) -> None:
        if self._open:
            self._open = False
            self._geometries = []
            self._documents = []
            self._tree = None
            logger.debug(f"Closed shard index {self._shard_index}")
