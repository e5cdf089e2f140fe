"""GeoShard Interfaces

Abstract contracts shared between the search modules and the index
implementations they query.
"""

from .shard_index import ShardIndex, StoredField, StoredDocument, IndexHit

__all__ = ['ShardIndex', 'StoredField', 'StoredDocument', 'IndexHit']
