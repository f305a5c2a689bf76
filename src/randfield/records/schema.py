"""Minimal record and schema model for the random-field stage.

Provides just enough structure to negotiate an output schema and to copy
and extend records field-for-field. Field names are matched
case-insensitively, as the host pipeline does.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from randfield.exceptions import RecordError, SchemaError
from randfield.records.types import FieldType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

_INTEGER_DTYPES: dict[FieldType, type[np.integer[Any]]] = {
    FieldType.INT16: np.int16,
    FieldType.INT32: np.int32,
    FieldType.INT64: np.int64,
}


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Description of one field in a schema.

    Attributes:
        name: Field name, unique (case-insensitively) within a schema.
        field_type: Type tag of the field's values.
        source: Provenance of the field (which tool created it).
        description: Free-text description shown by the host.
    """

    name: str
    field_type: FieldType
    source: str = ""
    description: str = ""


def convert_double(value: float, field_type: FieldType) -> float | int | None:
    """Convert a sampled float for storage in a field of *field_type*.

    - ``float64``: returned unchanged.
    - ``float32``: rounded to the nearest single-precision value.
    - integer kinds: truncated toward zero and saturated to the type's
      range. NaN has no integer representation and becomes ``None``.

    Raises:
        SchemaError: If *field_type* is not numeric.
    """
    if field_type is FieldType.FLOAT64:
        return float(value)
    if field_type is FieldType.FLOAT32:
        with np.errstate(over="ignore"):
            return float(np.float32(value))

    dtype = _INTEGER_DTYPES.get(field_type)
    if dtype is None:
        raise SchemaError(f"Cannot store a number in a {field_type.value!r} field")
    if math.isnan(value):
        return None
    info = np.iinfo(dtype)
    if value >= info.max:
        return int(info.max)
    if value <= info.min:
        return int(info.min)
    return math.trunc(value)


class RecordSchema:
    """Immutable ordered collection of field descriptors."""

    __slots__ = ("_fields", "_index")

    def __init__(self, fields: Iterable[FieldDescriptor] = ()) -> None:
        self._fields: tuple[FieldDescriptor, ...] = tuple(fields)
        self._index: dict[str, int] = {}
        for i, descriptor in enumerate(self._fields):
            key = descriptor.name.casefold()
            if key in self._index:
                raise SchemaError(f"Duplicate field name: {descriptor.name!r}")
            self._index[key] = i

    @classmethod
    def of(cls, *fields: tuple[str, FieldType]) -> RecordSchema:
        """Build a schema from ``(name, type)`` pairs."""
        return cls(FieldDescriptor(name, field_type) for name, field_type in fields)

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self._fields

    @property
    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self._fields[index]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSchema):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        inner = ", ".join(f"{f.name}:{f.field_type.value}" for f in self._fields)
        return f"RecordSchema({inner})"

    def index_of(self, name: str) -> int:
        """Return the position of field *name*.

        Raises:
            KeyError: If no field has that name.
        """
        try:
            return self._index[name.casefold()]
        except KeyError:
            raise KeyError(f"No field named {name!r}") from None

    def with_field(self, descriptor: FieldDescriptor) -> RecordSchema:
        """Return a new schema with *descriptor* appended.

        Raises:
            SchemaError: If the name is already used by an existing field.
        """
        if descriptor.name in self:
            raise SchemaError(f"Output field {descriptor.name!r} already exists in the input")
        return RecordSchema((*self._fields, descriptor))

    def slot(self, name: str) -> FieldSlot:
        """Resolve a write handle for field *name*.

        Raises:
            SchemaError: If no field has that name.
        """
        try:
            index = self.index_of(name)
        except KeyError as exc:
            raise SchemaError(str(exc)) from exc
        return FieldSlot(index, self._fields[index])


class Record:
    """Mutable value buffer laid out according to a schema.

    Every slot starts (and is reset to) ``None``, meaning unset / null.
    """

    __slots__ = ("_schema", "_values")

    def __init__(self, schema: RecordSchema, values: Sequence[Any] | None = None) -> None:
        self._schema = schema
        self._values: list[Any] = [None] * len(schema)
        if values is not None:
            self.copy_from(values)

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, str):
            key = self._schema.index_of(key)
        return self._values[key]

    def __setitem__(self, key: int | str, value: Any) -> None:
        if isinstance(key, str):
            key = self._schema.index_of(key)
        self._values[key] = value

    def __repr__(self) -> str:
        return f"Record({self.as_dict()!r})"

    def reset(self) -> None:
        """Clear every slot back to ``None``."""
        for i in range(len(self._values)):
            self._values[i] = None

    def copy_from(self, values: Sequence[Any]) -> None:
        """Copy *values* field-for-field into the leading slots.

        Slots beyond ``len(values)`` are left untouched.

        Raises:
            RecordError: If *values* is wider than this record.
        """
        if len(values) > len(self._values):
            raise RecordError(
                f"Cannot copy {len(values)} values into a record of {len(self._values)} fields"
            )
        self._values[: len(values)] = values

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self._schema.names, self._values))


@dataclass(frozen=True, slots=True)
class FieldSlot:
    """Resolved write handle for one field of a schema.

    Attributes:
        index: Position of the field within its schema.
        descriptor: The field's descriptor.
    """

    index: int
    descriptor: FieldDescriptor

    def set_from_double(self, record: Record, value: float) -> None:
        """Convert *value* per the field's type and store it in *record*."""
        record[self.index] = convert_double(value, self.descriptor.field_type)
