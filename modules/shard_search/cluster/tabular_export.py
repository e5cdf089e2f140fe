"""Tabular Export

Turns merged results into pandas / geopandas frames, with one column per row
cell and column dtypes taken from each cell's FieldKind.
"""

import logging
from typing import Dict, Iterable, List, Optional

import geopandas as gpd
import pandas as pd

from src.exceptions import GeoShardValidationError
from ..index import SHAPE_FIELD
from ..models import (
    DOC_ID_FIELD, RESERVED_FIELDS, SCORE_FIELD, SHARD_FIELD, FieldKind, ScoredResult, TabularRow
)

logger = logging.getLogger(__name__)

_RESERVED_KINDS = {
    DOC_ID_FIELD: FieldKind.INT32,
    SCORE_FIELD: FieldKind.FLOAT64,
    SHARD_FIELD: FieldKind.INT32,
}

# kinds a column can be widened to when its rows disagree within one numeric family
_WIDENINGS = {
    frozenset({FieldKind.INT32, FieldKind.INT64}): FieldKind.INT64,
    frozenset({FieldKind.FLOAT32, FieldKind.FLOAT64}): FieldKind.FLOAT64,
}


def _column_kinds(rows: List[TabularRow]) -> Dict[str, Optional[FieldKind]]:
    """Union of row schemas in first-seen order.

    Integer widths widen to INT64 and float widths to FLOAT64; None marks a
    column whose kinds cannot be reconciled.
    """
    kinds: Dict[str, Optional[FieldKind]] = {}
    for row in rows:
        for name, kind in row.schema():
            if name not in kinds:
                kinds[name] = kind
            elif kinds[name] is not None and kinds[name] != kind:
                widened = _WIDENINGS.get(frozenset({kinds[name], kind}))
                if widened is not None:
                    kinds[name] = widened
                    continue
                logger.warning(f"Column '{name}' has mixed kinds; exporting as object")
                kinds[name] = None
    # reserved columns always trail the stored fields
    for name in RESERVED_FIELDS:
        kinds[name] = kinds.pop(name, _RESERVED_KINDS[name])
    return kinds


def rows_to_dataframe(rows: Iterable[TabularRow]) -> pd.DataFrame:
    """Build a DataFrame from tabular rows.

    Columns missing from some rows use pandas nullable dtypes so the gaps stay NA.
    """
    rows = list(rows)
    kinds = _column_kinds(rows)
    # object columns first so large int64 values never pass through float64
    frame = pd.DataFrame(
        {name: pd.Series([row.get(name) for row in rows], dtype=object) for name in kinds},
        columns=list(kinds)
    )

    for name, kind in kinds.items():
        if kind is None:
            frame[name] = frame[name].astype(object)
            continue
        has_gaps = bool(frame[name].isna().any())
        frame[name] = frame[name].astype(kind.pandas_dtype(nullable=has_gaps))
    return frame


def results_to_dataframe(results: Iterable[ScoredResult]) -> pd.DataFrame:
    """Project scored results to rows and build a DataFrame."""
    return rows_to_dataframe(result.to_row() for result in results)


def results_to_geodataframe(results: Iterable[ScoredResult], crs: str = "EPSG:4326") -> gpd.GeoDataFrame:
    """Build a GeoDataFrame whose geometry is parsed from the stored shape WKT.

    Raises:
        GeoShardValidationError: If a result has no stored shape
    """
    frame = results_to_dataframe(results)
    if len(frame) == 0:
        return gpd.GeoDataFrame(frame, geometry=gpd.GeoSeries([], crs=crs), crs=crs)

    if SHAPE_FIELD not in frame.columns or bool(frame[SHAPE_FIELD].isna().any()):
        raise GeoShardValidationError(
            f"Every result needs a stored '{SHAPE_FIELD}' field to build geometries"
        )
    geometry = gpd.GeoSeries.from_wkt(frame[SHAPE_FIELD].astype(object).tolist(), crs=crs)
    return gpd.GeoDataFrame(frame, geometry=geometry.values, crs=crs)
