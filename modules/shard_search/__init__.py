"""Shard Search Module

Spatial search over independently queryable index shards: per-shard k-nearest-
neighbour, circle and shape queries, shard-qualified scored results, and the
cross-shard merge into one globally ranked answer.
"""

from .exceptions import (
    InvalidArgumentError,
    QueryParseError,
    InconsistentFieldError,
    IndexUnavailableError,
    ShardTimeoutError,
)
from .models import FieldKind, ScoredResult, TabularRow, descending_order, ascending_order
from .geometry import SpatialContext
from .index import DocumentBuilder, InMemoryShardIndex
from .spatial_query import ShardQueryExecutor
from .cluster import ShardCluster, SearchSettings, merge_top_k, results_to_dataframe

__all__ = [
    'InvalidArgumentError',
    'QueryParseError',
    'InconsistentFieldError',
    'IndexUnavailableError',
    'ShardTimeoutError',
    'FieldKind',
    'ScoredResult',
    'TabularRow',
    'descending_order',
    'ascending_order',
    'SpatialContext',
    'DocumentBuilder',
    'InMemoryShardIndex',
    'ShardQueryExecutor',
    'ShardCluster',
    'SearchSettings',
    'merge_top_k',
    'results_to_dataframe',
]

__version__ = "1.0.0"
