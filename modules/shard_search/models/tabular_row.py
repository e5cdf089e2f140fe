"""Tabular Row Model

Flat, typed projection of a scored result: one cell per stored field followed by
the reserved ``__docid__``, ``__score__`` and ``__shardIndex__`` cells.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .field_kind import FieldKind

DOC_ID_FIELD = "__docid__"
SCORE_FIELD = "__score__"
SHARD_FIELD = "__shardIndex__"
RESERVED_FIELDS = (DOC_ID_FIELD, SCORE_FIELD, SHARD_FIELD)


class RowCell(BaseModel):
    """A single (name, kind, value) cell of a tabular row."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    kind: FieldKind = Field(..., description="Declared kind of the column")
    value: Any = Field(None, description="Cell value as a plain Python str, int or float")


class TabularRow(BaseModel):
    """Ordered, schema-carrying row produced by ScoredResult.to_row()."""
    model_config = ConfigDict(frozen=True)

    cells: Tuple[RowCell, ...] = Field(..., description="Cells in column order")

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, name: str) -> Any:
        cell = self._find(name)
        if cell is None:
            raise KeyError(name)
        return cell.value

    def _find(self, name: str) -> Optional[RowCell]:
        for cell in self.cells:
            if cell.name == name:
                return cell
        return None

    def get(self, name: str, default: Any = None) -> Any:
        cell = self._find(name)
        return cell.value if cell is not None else default

    def names(self) -> List[str]:
        return [cell.name for cell in self.cells]

    def schema(self) -> List[Tuple[str, FieldKind]]:
        """Column names with their declared kinds, in column order."""
        return [(cell.name, cell.kind) for cell in self.cells]

    def field_index(self, name: str) -> int:
        """Position of a column, as used by row-based comparators."""
        for position, cell in enumerate(self.cells):
            if cell.name == name:
                return position
        raise KeyError(name)

    def as_dict(self) -> Dict[str, Any]:
        return {cell.name: cell.value for cell in self.cells}

    @property
    def score(self) -> float:
        return self[SCORE_FIELD]

    @property
    def internal_id(self) -> int:
        return self[DOC_ID_FIELD]

    @property
    def shard_index(self) -> int:
        return self[SHARD_FIELD]
