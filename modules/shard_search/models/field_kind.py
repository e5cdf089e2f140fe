"""Stored Field Classification

Maps a stored field onto the closed set of kinds a tabular row cell can take.
Classification is total: every field either gets exactly one kind or raises
InconsistentFieldError.
"""

from enum import Enum
from typing import Any, Union

import numpy as np

from src.interfaces import StoredField
from ..exceptions import InconsistentFieldError

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


class FieldKind(str, Enum):
    """Declared kind of a stored field or row cell."""
    TEXT = "text"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT64 = "float64"
    FLOAT32 = "float32"

    def pandas_dtype(self, nullable: bool = False) -> str:
        """pandas dtype for a column of this kind; nullable extension dtypes allow gaps."""
        if self is FieldKind.TEXT:
            return "string"
        return self.value.capitalize() if nullable else self.value

    def is_numeric(self) -> bool:
        return self is not FieldKind.TEXT


def classify_numeric(value: Any, field_name: str = "") -> FieldKind:
    """Classify a numeric representation by its width.

    numpy scalars keep their declared width. Plain Python ``int`` is INT32 when
    it fits and INT64 when it fits 64 bits; plain ``float`` is FLOAT64.

    Raises:
        InconsistentFieldError: For booleans, unsigned 64-bit integers, ints
            wider than 64 bits and anything that is not a real number
    """
    if isinstance(value, (bool, np.bool_)):
        raise InconsistentFieldError(
            f"Boolean value is not a supported numeric representation for field '{field_name}'",
            field_name
        )

    if isinstance(value, np.integer):
        if isinstance(value, np.unsignedinteger):
            if value.dtype.itemsize <= 2:
                return FieldKind.INT32
            if value.dtype.itemsize <= 4:
                return FieldKind.INT64
            raise InconsistentFieldError(
                f"Unsigned 64-bit value does not fit a signed column for field '{field_name}'",
                field_name
            )
        return FieldKind.INT32 if value.dtype.itemsize <= 4 else FieldKind.INT64

    if isinstance(value, np.floating):
        return FieldKind.FLOAT32 if value.dtype.itemsize <= 4 else FieldKind.FLOAT64

    if isinstance(value, int):
        if INT32_MIN <= value <= INT32_MAX:
            return FieldKind.INT32
        if INT64_MIN <= value <= INT64_MAX:
            return FieldKind.INT64
        raise InconsistentFieldError(
            f"Integer value does not fit in 64 bits for field '{field_name}'",
            field_name
        )

    if isinstance(value, float):
        return FieldKind.FLOAT64

    raise InconsistentFieldError(
        f"Unsupported numeric type {type(value).__name__} for field '{field_name}'",
        field_name
    )


def classify_field(stored_field: StoredField) -> FieldKind:
    """Classify a stored field.

    A field with a numeric representation is numeric. It is TEXT only when it has
    no numeric representation and a string one.

    Raises:
        InconsistentFieldError: If the field has neither representation
    """
    if stored_field.numeric_value is not None:
        return classify_numeric(stored_field.numeric_value, stored_field.name)
    if stored_field.string_value is not None:
        return FieldKind.TEXT
    raise InconsistentFieldError(
        f"Stored field '{stored_field.name}' has neither a numeric nor a string value",
        stored_field.name
    )


def cell_value(stored_field: StoredField, kind: FieldKind) -> Union[str, int, float]:
    """Project a stored field to the plain Python value of a row cell of ``kind``."""
    if kind is FieldKind.TEXT:
        return stored_field.string_value
    if kind in (FieldKind.INT32, FieldKind.INT64):
        return int(stored_field.numeric_value)
    if kind is FieldKind.FLOAT32:
        # float32 values are exactly representable as Python floats
        return float(np.float32(stored_field.numeric_value))
    return float(stored_field.numeric_value)
