"""Field type tags for record schemas."""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """Type tag of a record field.

    The five numeric kinds are valid output types. ``STRING`` and ``BOOL``
    only describe pass-through input fields.
    """

    FLOAT64 = "float64"
    FLOAT32 = "float32"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    BOOL = "bool"

    @property
    def is_numeric(self) -> bool:
        """Whether a sampled float can be written into a field of this type."""
        return self in _NUMERIC

    @property
    def is_integer(self) -> bool:
        """Whether writes to this type truncate to an integer."""
        return self in (FieldType.INT16, FieldType.INT32, FieldType.INT64)


_NUMERIC = frozenset(
    {FieldType.FLOAT64, FieldType.FLOAT32, FieldType.INT16, FieldType.INT32, FieldType.INT64}
)
