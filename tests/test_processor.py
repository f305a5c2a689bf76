"""Integration tests for RandomFieldProcessor.

Exercises the full lifecycle (schema-ready, records, progress, closed)
against an in-memory sink, with seeded or injected sources so every
sampled value is predictable.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import pytest

from randfield.config import RandomFieldConfig
from randfield.exceptions import SchemaError
from randfield.processor import FIELD_SOURCE, RandomFieldProcessor, StreamState, replay
from randfield.records import FieldType, Record, RecordSchema
from randfield.sampling import build_sampler
from randfield.sink import MemorySink
from randfield.source import RandomSource, SequenceSource, SharedSourceProvider


def _config(**kwargs: object) -> RandomFieldConfig:
    return RandomFieldConfig(_env_file=None, **kwargs)  # type: ignore[arg-type]


def _make_processor(
    sink: MemorySink | None = None,
    provider: SharedSourceProvider | None = None,
    **config_kwargs: Any,
) -> RandomFieldProcessor:
    config_kwargs.setdefault("seed", 42)
    return RandomFieldProcessor(_config(**config_kwargs), sink=sink, source_provider=provider)



class _RejectingSink(MemorySink):
    """Sink whose init fails with an error the stage does not own."""

    def init(self, schema: RecordSchema) -> None:
        super().init(schema)
        raise RuntimeError("sink rejected schema")


def _failing_factory() -> RandomSource:
    raise SchemaError("shared source unavailable")


class TestProcessorInit:
    def test_defaults(self) -> None:
        proc = RandomFieldProcessor()
        assert proc.state is StreamState.UNINITIALIZED
        assert proc.config.output_field_name == "Random"
        assert proc.sink is None
        assert proc.output_schema is None
        assert proc.records_processed == 0

    def test_description(self) -> None:
        proc = _make_processor(distribution="normal", average=5, standard_deviation=2)
        assert proc.description == "Random=Normal[5, 2]"


class TestSchemaReady:
    """Uninitialized -> Initialized transition."""

    def test_output_schema_has_one_more_field(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink, output_type="int32", output_field_name="Dice")
        assert proc.on_schema_ready(input_schema) is True
        assert proc.state is StreamState.INITIALIZED

        out = memory_sink.schema
        assert out is not None
        assert out is proc.output_schema
        assert len(out) == len(input_schema) + 1
        assert list(out)[: len(input_schema)] == list(input_schema)
        appended = out[len(input_schema)]
        assert appended.name == "Dice"
        assert appended.field_type is FieldType.INT32

    def test_appended_field_metadata(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(
            memory_sink, distribution="triangular", minimum=0, maximum=10, average=3
        )
        proc.on_schema_ready(input_schema)
        appended = memory_sink.schema[-1]  # type: ignore[index]
        assert appended.source == FIELD_SOURCE
        assert appended.description == "Random Number Tri[0, 3, 10]"

    def test_sink_init_called_once(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(input_schema)
        assert memory_sink.init_calls == 1

    def test_empty_input_schema(self, memory_sink: MemorySink) -> None:
        proc = _make_processor(memory_sink)
        assert proc.on_schema_ready(RecordSchema()) is True
        assert proc.on_record(()) is True
        assert memory_sink.records[0].as_dict().keys() == {"Random"}

    def test_missing_schema_fails(self, memory_sink: MemorySink) -> None:
        proc = _make_processor(memory_sink)
        assert proc.on_schema_ready(None) is False
        assert proc.state is StreamState.FAILED
        assert memory_sink.init_calls == 0

    def test_name_collision_fails(
        self, input_schema: RecordSchema, memory_sink: MemorySink, caplog: pytest.LogCaptureFixture
    ) -> None:
        proc = _make_processor(memory_sink, output_field_name="score")
        with caplog.at_level(logging.ERROR, logger="randfield"):
            assert proc.on_schema_ready(input_schema) is False
        assert proc.state is StreamState.FAILED
        assert "already exists" in caplog.text

    def test_source_failure_leaves_sink_untouched(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        provider = SharedSourceProvider(_failing_factory)
        proc = _make_processor(memory_sink, provider, seed=0)
        assert proc.on_schema_ready(input_schema) is False
        assert proc.state is StreamState.FAILED
        assert memory_sink.init_calls == 0
        assert memory_sink.schema is None
        assert proc.output_schema is None

    def test_unexpected_sink_error_propagates(self, input_schema: RecordSchema) -> None:
        sink = _RejectingSink()
        proc = _make_processor(sink)
        with pytest.raises(RuntimeError, match="sink rejected schema"):
            proc.on_schema_ready(input_schema)
        assert sink.init_calls == 1
        assert proc.state is StreamState.UNINITIALIZED

    def test_failure_is_terminal(self, input_schema: RecordSchema, memory_sink: MemorySink) -> None:
        proc = _make_processor(memory_sink, output_field_name="Id")
        assert proc.on_schema_ready(input_schema) is False
        assert proc.on_record((1, "a", 0.0)) is False
        assert proc.on_schema_ready(input_schema) is False
        assert memory_sink.records == []

    def test_second_schema_ready_rejected(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        assert proc.on_schema_ready(input_schema) is True
        assert proc.on_schema_ready(input_schema) is False
        assert proc.state is StreamState.INITIALIZED
        assert memory_sink.init_calls == 1

    def test_works_without_sink(self, input_schema: RecordSchema) -> None:
        proc = _make_processor()
        assert proc.on_schema_ready(input_schema) is True
        assert proc.on_record((1, "a", 0.0)) is True


class TestRecordPushed:
    """Per-record transform."""

    def test_copies_input_and_appends_one_draw(
        self,
        input_schema: RecordSchema,
        input_rows: list[tuple[object, ...]],
        memory_sink: MemorySink,
    ) -> None:
        config = _config(seed=42, minimum=-5, maximum=5)
        proc = RandomFieldProcessor(config, sink=memory_sink)
        proc.on_schema_ready(input_schema)
        for row in input_rows:
            assert proc.on_record(row) is True

        reference = build_sampler(config)
        expected = [reference() for _ in input_rows]
        assert len(memory_sink.records) == len(input_rows)
        for record, row, value in zip(memory_sink.records, input_rows, expected):
            assert record.values[:3] == row
            assert record["Random"] == value
        assert proc.records_processed == len(input_rows)

    def test_accepts_record_objects(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(input_schema)
        assert proc.on_record(Record(input_schema, (9, "z", 1.0))) is True
        assert memory_sink.records[0].values[:3] == (9, "z", 1.0)

    def test_fresh_buffer_per_record(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(input_schema)
        proc.on_record((1, "a", 0.0))
        proc.on_record((2, "b", 1.0))
        first, second = memory_sink.records
        assert first is not second
        assert first["Id"] == 1

    def test_exactly_one_draw_per_record(self, input_schema: RecordSchema) -> None:
        source = SequenceSource([0.1, 0.2, 0.3])
        provider = SharedSourceProvider()
        provider.override(source)
        sink = MemorySink()
        proc = _make_processor(sink, provider, seed=0, minimum=0, maximum=10)
        proc.on_schema_ready(input_schema)
        for i in range(3):
            proc.on_record((i, "x", 0.0))
        assert source.draws == 3
        assert sink.column("Random") == pytest.approx([1.0, 2.0, 3.0])

    @pytest.mark.parametrize(
        ("output_type", "expected"),
        [
            ("float64", 7.75),
            ("float32", 7.75),
            ("int16", 7),
            ("int32", 7),
            ("int64", 7),
        ],
    )
    def test_type_conversion(
        self, input_schema: RecordSchema, output_type: str, expected: float
    ) -> None:
        provider = SharedSourceProvider()
        provider.override(SequenceSource([0.775]))
        sink = MemorySink()
        proc = _make_processor(sink, provider, seed=0, minimum=0, maximum=10, output_type=output_type)
        proc.on_schema_ready(input_schema)
        proc.on_record((1, "a", 0.0))
        assert sink.records[0]["Random"] == pytest.approx(expected)

    def test_integer_field_nan_is_null(self, input_schema: RecordSchema) -> None:
        sink = MemorySink()
        proc = _make_processor(
            sink, seed=0, output_type="int16", minimum=-math.inf, maximum=math.inf
        )
        proc.on_schema_ready(input_schema)
        proc.on_record((1, "a", 0.0))
        assert sink.records[0]["Random"] is None

    def test_width_mismatch_fails_without_drawing(self, input_schema: RecordSchema) -> None:
        source = SequenceSource([0.5])
        provider = SharedSourceProvider()
        provider.override(source)
        sink = MemorySink()
        proc = _make_processor(sink, provider, seed=0)
        proc.on_schema_ready(input_schema)
        assert proc.on_record((1, "a")) is False
        assert source.draws == 0
        assert sink.records == []
        # The stream stays usable.
        assert proc.on_record((1, "a", 0.0)) is True

    def test_record_before_schema_ready_fails(self, memory_sink: MemorySink) -> None:
        proc = _make_processor(memory_sink)
        assert proc.on_record((1,)) is False
        assert memory_sink.records == []

    def test_degenerate_triangular_values_flow_through(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(
            memory_sink, distribution="triangular", minimum=10, maximum=10, average=10
        )
        proc.on_schema_ready(input_schema)
        for i in range(5):
            assert proc.on_record((i, "x", 0.0)) is True
        for value in memory_sink.column("Random"):
            assert math.isnan(value) or value == 10.0  # type: ignore[arg-type]


class TestProgressAndClose:
    def test_progress_forwarded_unchanged(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(input_schema)
        proc.on_progress(0.25)
        proc.on_progress(1.0)
        assert memory_sink.progress == [(0.25, True), (1.0, True)]

    def test_close_propagates_once(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(input_schema)
        proc.on_closed()
        proc.on_closed()
        assert memory_sink.close_calls == 1
        assert proc.state is StreamState.CLOSED

    def test_close_before_schema_ready(self, memory_sink: MemorySink) -> None:
        """Shutdown before any schema-ready signal must not crash."""
        proc = _make_processor(memory_sink)
        proc.on_closed()
        assert memory_sink.close_calls == 1
        assert proc.state is StreamState.CLOSED

    def test_close_after_failed_init(self, memory_sink: MemorySink) -> None:
        proc = _make_processor(memory_sink)
        proc.on_schema_ready(None)
        proc.on_closed()
        assert memory_sink.close_calls == 1

    def test_no_transitions_after_close(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        proc.on_closed()
        assert proc.on_schema_ready(input_schema) is False
        assert proc.on_record((1, "a", 0.0)) is False
        proc.on_progress(0.5)
        assert memory_sink.progress == []
        assert memory_sink.init_calls == 0

    def test_close_without_sink(self) -> None:
        proc = _make_processor()
        proc.on_closed()
        assert proc.state is StreamState.CLOSED

    def test_sink_assigned_after_construction(self, input_schema: RecordSchema) -> None:
        proc = _make_processor()
        sink = MemorySink()
        proc.sink = sink
        proc.on_schema_ready(input_schema)
        proc.on_record((1, "a", 0.0))
        proc.on_closed()
        assert len(sink.records) == 1
        assert sink.closed


class TestDiagnostics:
    def test_events_recorded(
        self,
        diagnostic_config: RandomFieldConfig,
        input_schema: RecordSchema,
        input_rows: list[tuple[object, ...]],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        sink = MemorySink()
        proc = RandomFieldProcessor(diagnostic_config, sink=sink)
        with caplog.at_level(logging.INFO, logger="randfield"):
            replay(proc, input_schema, input_rows)
        events = proc.sampling_logger.get_diagnostic_data()
        assert [e.record_index for e in events] == list(range(len(input_rows)))
        assert [e.stored_value for e in events] == sink.column("Random")
        assert {e.source_name for e in events} == {"pcg64(seed=7)"}
        assert len({e.config_hash for e in events}) == 1
        assert "sample_event" in caplog.text


class TestReplay:
    def test_full_stream(
        self,
        input_schema: RecordSchema,
        input_rows: list[tuple[object, ...]],
        memory_sink: MemorySink,
    ) -> None:
        proc = _make_processor(memory_sink)
        assert replay(proc, input_schema, input_rows) is True
        assert len(memory_sink.records) == len(input_rows)
        assert [p for p, _ in memory_sink.progress] == [0.25, 0.5, 0.75, 1.0]
        assert memory_sink.close_calls == 1

    def test_generator_rows_skip_progress(
        self,
        input_schema: RecordSchema,
        input_rows: list[tuple[object, ...]],
        memory_sink: MemorySink,
    ) -> None:
        proc = _make_processor(memory_sink)
        assert replay(proc, input_schema, (row for row in input_rows)) is True
        assert len(memory_sink.records) == len(input_rows)
        assert memory_sink.progress == []

    def test_failed_init_stops_records_but_closes(
        self,
        input_schema: RecordSchema,
        input_rows: list[tuple[object, ...]],
        memory_sink: MemorySink,
    ) -> None:
        proc = _make_processor(memory_sink, output_field_name="Name")
        assert replay(proc, input_schema, input_rows) is False
        assert memory_sink.records == []
        assert memory_sink.close_calls == 1

    def test_bad_row_stops_stream(
        self, input_schema: RecordSchema, memory_sink: MemorySink
    ) -> None:
        proc = _make_processor(memory_sink)
        rows = [(1, "a", 0.0), (2, "b"), (3, "c", 1.0)]
        assert replay(proc, input_schema, rows) is False
        assert len(memory_sink.records) == 1
        assert memory_sink.close_calls == 1

    def test_reproducible_across_runs(
        self, input_schema: RecordSchema, input_rows: list[tuple[object, ...]]
    ) -> None:
        sinks = [MemorySink(), MemorySink()]
        for sink in sinks:
            replay(_make_processor(sink, distribution="lognormal"), input_schema, input_rows)
        assert sinks[0].column("Random") == sinks[1].column("Random")
