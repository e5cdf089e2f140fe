"""Shard Cluster

Parallel execution of one query over many shards, top-k merging and tabular
export of the merged results.
"""

from .cluster_models import FailurePolicy, SearchSettings, ShardOutcome, ClusterSearchResult
from .shard_cluster import ShardCluster, merge_top_k
from .tabular_export import rows_to_dataframe, results_to_dataframe, results_to_geodataframe

__all__ = [
    'FailurePolicy',
    'SearchSettings',
    'ShardOutcome',
    'ClusterSearchResult',
    'ShardCluster',
    'merge_top_k',
    'rows_to_dataframe',
    'results_to_dataframe',
    'results_to_geodataframe',
]
