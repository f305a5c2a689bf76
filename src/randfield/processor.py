"""Stream processor: the per-record state machine of the random-field stage.

Lifecycle, strictly ordered with no re-entry::

    UNINITIALIZED --on_schema_ready--> INITIALIZED --on_record*--> ... --on_closed--> CLOSED
    UNINITIALIZED --on_schema_ready (failure)--> FAILED --on_closed--> CLOSED

The host (or a test) calls the four entry points directly:
``on_schema_ready``, ``on_record``, ``on_progress`` and ``on_closed``.
Every call completes synchronously before returning. Failures are reported
as ``False`` outcomes and logged; they never abort the process.
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Sized
from enum import Enum
from typing import TYPE_CHECKING, Any

from randfield.config import RandomFieldConfig, describe_config
from randfield.exceptions import RandFieldError
from randfield.logging.logger import StreamLogger
from randfield.logging.types import RecordSampleEvent
from randfield.records.schema import FieldDescriptor, Record
from randfield.sampling.factory import build_sampler

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from randfield.records.schema import FieldSlot, RecordSchema
    from randfield.sampling.types import Sampler
    from randfield.sink import RecordSink
    from randfield.source.shared import SharedSourceProvider

logger = logging.getLogger("randfield")

# Provenance recorded on the appended field.
FIELD_SOURCE = "RandomNumber"

# Errors during initialization that become a False outcome.
_INIT_ERRORS = (RandFieldError,)


def _config_hash(config: RandomFieldConfig) -> str:
    """Compute a short hash of the config for logging.

    Args:
        config: The configuration to hash.

    Returns:
        First 16 hex characters of the SHA-256 digest of the config dump.
    """
    raw = config.model_dump_json().encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:16]


def _source_label(config: RandomFieldConfig) -> str:
    if config.seed == 0:
        return "shared"
    return f"{config.bit_generator}(seed={config.seed})"


class _StreamHandles:
    """Per-stream handles resolved once by a successful schema-ready signal.

    Attributes:
        input_schema: Schema of the incoming records.
        output_schema: Input schema plus the appended field.
        output_slot: Write handle for the appended field.
        sampler: Compiled sampler for this stream.
    """

    __slots__ = ("input_schema", "output_schema", "output_slot", "sampler")

    def __init__(
        self,
        input_schema: RecordSchema,
        output_schema: RecordSchema,
        output_slot: FieldSlot,
        sampler: Sampler,
    ) -> None:
        self.input_schema = input_schema
        self.output_schema = output_schema
        self.output_slot = output_slot
        self.sampler = sampler


class StreamState(str, Enum):
    """States of a :class:`RandomFieldProcessor`."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    FAILED = "failed"
    CLOSED = "closed"


class RandomFieldProcessor:
    """Appends one sampled numeric field to every record of a stream.

    Args:
        config: Stage configuration. Defaults to ``RandomFieldConfig()``,
            i.e. environment variables and field defaults.
        sink: Downstream collaborator. May be assigned later through the
            :attr:`sink` property, but must be set before records arrive for
            them to be forwarded.
        source_provider: Shared-source provider used when ``config.seed`` is
            0. Defaults to the process-wide provider.
    """

    def __init__(
        self,
        config: RandomFieldConfig | None = None,
        sink: RecordSink | None = None,
        source_provider: SharedSourceProvider | None = None,
    ) -> None:
        self._config = config if config is not None else RandomFieldConfig()
        self._sink = sink
        self._source_provider = source_provider
        self._state = StreamState.UNINITIALIZED

        self._handles: _StreamHandles | None = None
        self._records_processed = 0

        self._logger = StreamLogger(self._config)
        self._config_hash = _config_hash(self._config)

    # --- Properties ---

    @property
    def config(self) -> RandomFieldConfig:
        return self._config

    @property
    def sink(self) -> RecordSink | None:
        """The downstream collaborator, or ``None`` if not yet connected."""
        return self._sink

    @sink.setter
    def sink(self, sink: RecordSink | None) -> None:
        self._sink = sink

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def input_schema(self) -> RecordSchema | None:
        return self._handles.input_schema if self._handles is not None else None

    @property
    def output_schema(self) -> RecordSchema | None:
        """The negotiated output schema; ``None`` until initialized."""
        return self._handles.output_schema if self._handles is not None else None

    @property
    def records_processed(self) -> int:
        return self._records_processed

    @property
    def sampling_logger(self) -> StreamLogger:
        """The diagnostic logger for this processor."""
        return self._logger

    @property
    def description(self) -> str:
        """Annotation label, e.g. ``Random=Rand[0, 1]``."""
        return describe_config(self._config)

    # --- Entry points ---

    def on_schema_ready(self, input_schema: RecordSchema | None) -> bool:
        """Negotiate the output schema and build the sampler.

        Builds the output schema (input plus one appended field), compiles
        the sampler and resolves the output slot. The sink adopts the output
        schema last, so it never sees a schema from a failed initialization.

        Args:
            input_schema: Schema of the incoming records.

        Returns:
            True on success. False if the processor was already initialized
            or closed, or if any step failed; a failure moves the processor
            to FAILED and no records will be processed.
        """
        if self._state is not StreamState.UNINITIALIZED:
            logger.warning("Schema-ready signal ignored in state %s", self._state.value)
            return False

        if input_schema is None:
            logger.error("Schema-ready signal carried no input schema")
            self._state = StreamState.FAILED
            return False

        config = self._config
        label = self.description
        descriptor = FieldDescriptor(
            name=config.output_field_name,
            field_type=config.output_type,
            source=FIELD_SOURCE,
            description=f"Random Number {label.removeprefix(f'{config.output_field_name}=')}",
        )

        try:
            output_schema = input_schema.with_field(descriptor)
            sampler = build_sampler(config, self._source_provider)
            output_slot = output_schema.slot(config.output_field_name)
            if self._sink is not None:
                self._sink.init(output_schema)
        except _INIT_ERRORS as exc:
            logger.error("Initialization failed: %s", exc)
            self._state = StreamState.FAILED
            return False

        self._handles = _StreamHandles(input_schema, output_schema, output_slot, sampler)
        self._state = StreamState.INITIALIZED

        logger.info(
            "RandomFieldProcessor initialized: %s, type=%s, source=%s, fields=%d",
            label,
            config.output_type.value,
            _source_label(config),
            len(output_schema),
        )
        return True

    def on_record(self, values: Record | Sequence[Any]) -> bool:
        """Copy one record, append one sample, and push it downstream.

        Args:
            values: The incoming record, as a :class:`Record` or a sequence
                of values laid out per the input schema.

        Returns:
            True if the record was transformed and pushed. False if the
            processor is not initialized or the record does not match the
            input schema; no sample is drawn in either case.
        """
        handles = self._handles
        if self._state is not StreamState.INITIALIZED or handles is None:
            logger.warning("Record ignored in state %s", self._state.value)
            return False

        if isinstance(values, Record):
            values = values.values
        if len(values) != len(handles.input_schema):
            logger.error(
                "Record %d has %d fields, input schema has %d",
                self._records_processed,
                len(values),
                len(handles.input_schema),
            )
            return False

        t_start_ns = time.perf_counter_ns()

        record = Record(handles.output_schema)
        record.copy_from(values)

        raw_value = handles.sampler()
        handles.output_slot.set_from_double(record, raw_value)

        if self._sink is not None:
            self._sink.push(record)

        transform_ms = (time.perf_counter_ns() - t_start_ns) / 1_000_000.0
        self._logger.log_record(
            RecordSampleEvent(
                timestamp_ns=t_start_ns,
                record_index=self._records_processed,
                field_name=handles.output_slot.descriptor.name,
                field_type=handles.output_slot.descriptor.field_type.value,
                distribution=self._config.distribution.value,
                source_name=_source_label(self._config),
                raw_value=raw_value,
                stored_value=record[handles.output_slot.index],
                transform_ms=transform_ms,
                config_hash=self._config_hash,
            )
        )
        self._records_processed += 1
        return True

    def on_progress(self, fraction: float) -> None:
        """Forward an upstream progress notification unchanged."""
        if self._state is StreamState.CLOSED:
            return
        if self._sink is not None:
            self._sink.update_progress(fraction, True)

    def on_closed(self) -> None:
        """Propagate shutdown downstream. Only the first call has any effect."""
        if self._state is StreamState.CLOSED:
            return
        self._state = StreamState.CLOSED
        if self._sink is not None:
            self._sink.close(True)
        logger.info("RandomFieldProcessor closed after %d records", self._records_processed)


def replay(
    processor: RandomFieldProcessor,
    schema: RecordSchema | None,
    rows: Iterable[Sequence[Any]],
    progress: bool = True,
) -> bool:
    """Drive *processor* through a whole stream held in memory.

    Sends schema-ready, then each row in order (with a progress fraction
    after each one when the row count is known), then closed. Record flow
    stops at the first failure; closed is always sent.

    Args:
        processor: A processor in the UNINITIALIZED state.
        schema: The input schema.
        rows: Input rows laid out per *schema*.
        progress: Whether to forward progress fractions.

    Returns:
        True if initialization and every record succeeded.
    """
    total = len(rows) if isinstance(rows, Sized) else None
    ok = processor.on_schema_ready(schema)
    if ok:
        for i, row in enumerate(rows, start=1):
            if not processor.on_record(row):
                ok = False
                break
            if progress and total:
                processor.on_progress(i / total)
    processor.on_closed()
    return ok
