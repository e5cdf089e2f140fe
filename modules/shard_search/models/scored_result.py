"""Scored Result Model

Wraps a raw shard hit and its materialized stored document into an immutable,
shard-qualified record. Provides the score orderings used to merge results from
many shards and the projection to a typed tabular row.
"""

from functools import cmp_to_key
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from src.interfaces import IndexHit, StoredDocument, StoredField
from ..exceptions import InconsistentFieldError
from .field_kind import INT32_MAX, INT32_MIN, FieldKind, cell_value, classify_field
from .tabular_row import (
    DOC_ID_FIELD, RESERVED_FIELDS, SCORE_FIELD, SHARD_FIELD, RowCell, TabularRow
)


class ScoredResult(BaseModel):
    """A stored document matched by a shard query, with its score.

    Attributes:
        score: Relevance narrowed to 32-bit float; higher ranks first
        internal_id: Index-local document id, only unique within its shard
        shard_index: Shard that produced the result
        stored_fields: Snapshot of every stored field, in stored order
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    score: float = Field(..., description="32-bit relevance score")
    internal_id: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Index-local document id")
    shard_index: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Producing shard")
    stored_fields: Tuple[StoredField, ...] = Field(default_factory=tuple, description="Stored field snapshot")

    _kinds: Tuple[FieldKind, ...] = PrivateAttr(default=())

    @field_validator('score')
    @classmethod
    def narrow_score(cls, v: float) -> float:
        """Store the score at float32 precision."""
        return float(np.float32(v))

    def model_post_init(self, __context) -> None:
        seen = set()
        for stored_field in self.stored_fields:
            if stored_field.name in seen:
                raise InconsistentFieldError(
                    f"Stored field '{stored_field.name}' appears more than once",
                    stored_field.name
                )
            seen.add(stored_field.name)
        self._kinds = tuple(classify_field(f) for f in self.stored_fields)

    @classmethod
    def from_hit(cls, hit: IndexHit, document: StoredDocument, shard_index: int,
                 score: Optional[float] = None) -> "ScoredResult":
        """Pair a raw hit with its materialized document.

        Args:
            hit: Raw hit from the shard index
            document: Stored document behind ``hit.doc_handle``
            shard_index: Shard that produced the hit
            score: Score to record instead of the hit's native score

        Raises:
            InconsistentFieldError: If a stored field cannot be classified
        """
        return cls(
            score=hit.score if score is None else score,
            internal_id=hit.internal_id,
            shard_index=shard_index,
            stored_fields=document.stored_fields
        )

    @property
    def fields(self) -> Mapping[str, StoredField]:
        """Read-only ordered mapping of field name to stored field."""
        return MappingProxyType({f.name: f for f in self.stored_fields})

    @property
    def field_kinds(self) -> Dict[str, FieldKind]:
        return {f.name: kind for f, kind in zip(self.stored_fields, self._kinds)}

    @property
    def doc(self) -> StoredDocument:
        return StoredDocument(stored_fields=self.stored_fields)

    def to_row(self) -> TabularRow:
        """Project to a typed row: stored fields in order, then reserved fields.

        Raises:
            InconsistentFieldError: If a stored field uses a reserved column name
        """
        cells = []
        for stored_field, kind in zip(self.stored_fields, self._kinds):
            if stored_field.name in RESERVED_FIELDS:
                raise InconsistentFieldError(
                    f"Stored field '{stored_field.name}' collides with a reserved row field",
                    stored_field.name
                )
            cells.append(RowCell(name=stored_field.name, kind=kind,
                                 value=cell_value(stored_field, kind)))

        cells.append(RowCell(name=DOC_ID_FIELD, kind=FieldKind.INT32, value=self.internal_id))
        cells.append(RowCell(name=SCORE_FIELD, kind=FieldKind.FLOAT64, value=float(self.score)))
        cells.append(RowCell(name=SHARD_FIELD, kind=FieldKind.INT32, value=self.shard_index))
        return TabularRow(cells=tuple(cells))

    def __str__(self) -> str:
        doc = ", ".join(f"{f.name}={f.value}" for f in self.stored_fields)
        return f"[score: {self.score}/docId: {self.internal_id}/doc: {{{doc}}}]"


Scored = Union[ScoredResult, TabularRow]


def descending_order(a: Scored, b: Scored) -> int:
    """Three-way comparator placing higher scores first; equal scores compare 0."""
    if a.score > b.score:
        return -1
    if a.score == b.score:
        return 0
    return 1


def ascending_order(a: Scored, b: Scored) -> int:
    """Three-way comparator placing lower scores first; equal scores compare 0."""
    if a.score < b.score:
        return -1
    if a.score == b.score:
        return 0
    return 1


def sort_by_score(items: Iterable[Scored],
                  order: Callable[[Scored, Scored], int] = descending_order) -> List[Scored]:
    """Sort results or rows with one of the score comparators.

    Python's sort is stable, so items with equal scores keep their input order.
    """
    return sorted(items, key=cmp_to_key(order))
