"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RecordSampleEvent:
    """Immutable record of one sampled value written into one record.

    Attributes:
        timestamp_ns: ``perf_counter_ns()`` reading when the record arrived.
        record_index: Zero-based position of the record in the stream.
        field_name: Name of the output field.
        field_type: Type tag of the output field.
        distribution: Active distribution variant.
        source_name: Name of the pseudo-random source drawn from.
        raw_value: The float returned by the sampler.
        stored_value: The value after type conversion (``None`` for NaN in
            an integer field).
        transform_ms: Time to copy, sample, convert and push the record.
        config_hash: 16-char SHA-256 prefix of the active config.
    """

    # Position
    timestamp_ns: int
    record_index: int

    # Output field
    field_name: str
    field_type: str

    # Sample
    distribution: str
    source_name: str
    raw_value: float
    stored_value: float | int | None

    # Timing
    transform_ms: float

    # Config snapshot
    config_hash: str
