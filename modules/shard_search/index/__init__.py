"""Shard Index

Document building and the in-memory, STRtree-backed shard index.
"""

from .document_builder import DocumentBuilder, SHAPE_FIELD, build_documents, to_stored_field
from .memory_shard_index import InMemoryShardIndex, MATCH_SCORE

__all__ = [
    'DocumentBuilder',
    'SHAPE_FIELD',
    'build_documents',
    'to_stored_field',
    'InMemoryShardIndex',
    'MATCH_SCORE',
]
