"""
GeoShard Framework Core Package

This package contains the shared infrastructure for the GeoShard spatial search
layer: configuration, exceptions, logging and the shard index contract that
search modules are written against.
"""

from .interfaces import ShardIndex, StoredField, StoredDocument, IndexHit

__version__ = "1.0.0"
__all__ = ['ShardIndex', 'StoredField', 'StoredDocument', 'IndexHit']
