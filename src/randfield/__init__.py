"""randfield: append a sampled random-number field to a stream of records.

A single pipeline stage. A declarative configuration is compiled into a
zero-argument sampler (Uniform, Triangular, Normal or LogNormal) and the
stream processor draws exactly one value per incoming record, writing it
into one appended output field. A nonzero seed makes the sequence
reproducible; seed 0 draws from a process-wide shared source.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("randfield")
except PackageNotFoundError:
    __version__ = "0.0.0"

from randfield.config import RandomFieldConfig, describe_config, resolve_config
from randfield.exceptions import (
    ConfigValidationError,
    RandFieldError,
    RecordError,
    SchemaError,
)
from randfield.processor import RandomFieldProcessor, StreamState, replay
from randfield.records import FieldDescriptor, FieldType, Record, RecordSchema
from randfield.sampling import Distribution, build_sampler
from randfield.sink import MemorySink, RecordSink

__all__ = [
    "ConfigValidationError",
    "Distribution",
    "FieldDescriptor",
    "FieldType",
    "MemorySink",
    "RandFieldError",
    "RandomFieldConfig",
    "RandomFieldProcessor",
    "Record",
    "RecordError",
    "RecordSchema",
    "RecordSink",
    "SchemaError",
    "StreamState",
    "__version__",
    "build_sampler",
    "describe_config",
    "replay",
    "resolve_config",
]
