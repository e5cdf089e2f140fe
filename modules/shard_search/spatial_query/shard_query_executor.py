"""Shard Query Executor

Executes k-nearest-neighbour, circle and shape searches against one shard's
index and returns the shard's results as locally sorted ScoredResult records.

Score semantics:
- k-NN: ``1 / (1 + distance_km)``, so the closest document scores highest and an
  exact hit scores 1.0
- circle and shape: the index's native relevance, higher is better
"""

import logging
from typing import Callable, List, Optional, Tuple

from shapely.geometry import Point

from src.exceptions import GeoShardBaseException
from src.interfaces import IndexHit, ShardIndex
from ..exceptions import IndexUnavailableError
from ..geometry import SpatialContext
from ..models import ScoredResult, descending_order, sort_by_score
from .query_models import (
    CircleQuery, KnnQuery, QueryKind, ShapeQuery, SpatialQuery, build_query
)

logger = logging.getLogger(__name__)


def distance_to_score(distance_km: float) -> float:
    """Monotone similarity transform used for k-NN results."""
    return 1.0 / (1.0 + distance_km)


class ShardQueryExecutor:
    """Runs spatial queries against a single open shard index.

    The executor is read-only and sequential. Argument errors are raised before
    the index is touched; a closed or empty index yields an empty list; any
    failure inside the index is reported as IndexUnavailableError.
    """

    def __init__(self, index: ShardIndex, context: SpatialContext):
        self.index = index
        self.context = context

    def knn(self, origin, k: int) -> List[ScoredResult]:
        """Return at most ``k`` documents closest to ``origin``, closest first."""
        query = build_query(KnnQuery, origin=self._origin_pair(origin), k=k)
        return self._run_knn(query)

    def circle_search(self, origin, radius_km: float, k: int) -> List[ScoredResult]:
        """Return at most ``k`` documents within ``radius_km`` of ``origin``."""
        query = build_query(CircleQuery, origin=self._origin_pair(origin), radius_km=radius_km, k=k)
        return self._run_circle(query)

    def shape_search(self, shape_wkt: str, k: int) -> List[ScoredResult]:
        """Return at most ``k`` documents intersecting the WKT shape."""
        query = build_query(ShapeQuery, shape_wkt=shape_wkt, k=k)
        return self._run_shape(query)

    def execute(self, query: SpatialQuery) -> List[ScoredResult]:
        """Dispatch a prepared query descriptor."""
        if query.kind == QueryKind.KNN:
            return self._run_knn(query)
        if query.kind == QueryKind.CIRCLE:
            return self._run_circle(query)
        return self._run_shape(query)

    def _origin_pair(self, origin) -> Tuple[float, float]:
        point = self.context.as_point(origin)
        return (point.x, point.y)

    def _run_knn(self, query: KnnQuery) -> List[ScoredResult]:
        origin = self.context.point(*query.origin)
        hits = self._search(lambda: self.index.nearest(origin, query.k), query.kind)
        return self._wrap(hits, query, score_transform=distance_to_score)

    def _run_circle(self, query: CircleQuery) -> List[ScoredResult]:
        circle = self.context.circle(
            Point(*query.origin), self.context.degrees_from_km(query.radius_km)
        )
        hits = self._search(lambda: self.index.intersecting(circle, query.k), query.kind)
        return self._wrap(hits, query)

    def _run_shape(self, query: ShapeQuery) -> List[ScoredResult]:
        shape = self.context.parse_wkt(query.shape_wkt)
        hits = self._search(lambda: self.index.intersecting(shape, query.k), query.kind)
        return self._wrap(hits, query)

    def _search(self, run: Callable[[], List[IndexHit]], kind: QueryKind) -> List[IndexHit]:
        if not self.index.is_open:
            logger.debug(f"Shard {self.index.shard_index} is closed; returning no results")
            return []
        try:
            return list(run())
        except GeoShardBaseException:
            raise
        except Exception as e:
            raise IndexUnavailableError(
                f"{kind.value} search failed on shard {self.index.shard_index}: {e}",
                self.index.shard_index
            )

    def _wrap(self, hits: List[IndexHit], query: SpatialQuery,
              score_transform: Optional[Callable[[float], float]] = None) -> List[ScoredResult]:
        shard_index = self.index.shard_index
        results = []
        for hit in hits[:query.k]:
            try:
                document = self.index.materialize(hit.doc_handle)
            except GeoShardBaseException:
                raise
            except Exception as e:
                raise IndexUnavailableError(
                    f"Cannot load document {hit.internal_id} from shard {shard_index}: {e}",
                    shard_index
                )
            score = score_transform(hit.score) if score_transform else None
            results.append(ScoredResult.from_hit(hit, document, shard_index, score=score))

        logger.debug(
            f"Shard {shard_index} {query.kind.value} search returned {len(results)} results",
            extra={"shard_index": shard_index, "query_kind": query.kind.value}
        )
        return sort_by_score(results, descending_order)
