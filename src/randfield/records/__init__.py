"""Record and schema model for randfield.

Re-exports the field type tag, schema types and conversion helper::

    from randfield.records import FieldType, RecordSchema, Record
"""

from randfield.records.schema import (
    FieldDescriptor,
    FieldSlot,
    Record,
    RecordSchema,
    convert_double,
)
from randfield.records.types import FieldType

__all__ = [
    "FieldDescriptor",
    "FieldSlot",
    "FieldType",
    "Record",
    "RecordSchema",
    "convert_double",
]
