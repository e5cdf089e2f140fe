"""Shard Search Data Models

Scored results, field kinds and tabular rows: the shard-agnostic record every
shard query returns and every merge consumes.
"""

from .field_kind import FieldKind, classify_field, classify_numeric, cell_value
from .tabular_row import (
    RowCell, TabularRow, DOC_ID_FIELD, SCORE_FIELD, SHARD_FIELD, RESERVED_FIELDS
)
from .scored_result import ScoredResult, descending_order, ascending_order, sort_by_score

__all__ = [
    'FieldKind',
    'classify_field',
    'classify_numeric',
    'cell_value',
    'RowCell',
    'TabularRow',
    'DOC_ID_FIELD',
    'SCORE_FIELD',
    'SHARD_FIELD',
    'RESERVED_FIELDS',
    'ScoredResult',
    'descending_order',
    'ascending_order',
    'sort_by_score',
]
