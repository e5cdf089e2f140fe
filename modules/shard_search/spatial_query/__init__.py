"""Shard Query Execution

Per-shard execution of k-nearest-neighbour, circle and shape searches.
"""

from .query_models import QueryKind, KnnQuery, CircleQuery, ShapeQuery, SpatialQuery, build_query
from .shard_query_executor import ShardQueryExecutor, distance_to_score

__all__ = [
    'QueryKind',
    'KnnQuery',
    'CircleQuery',
    'ShapeQuery',
    'SpatialQuery',
    'build_query',
    'ShardQueryExecutor',
    'distance_to_score',
]
