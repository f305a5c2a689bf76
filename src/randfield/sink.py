"""Downstream record sinks.

``RecordSink`` is the interface the stream processor pushes into. The host
supplies its own implementation; ``MemorySink`` collects everything in
memory for tests and for driving the processor from plain Python.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from randfield.records.schema import Record, RecordSchema


class RecordSink(ABC):
    """Abstract downstream collaborator."""

    @abstractmethod
    def init(self, schema: RecordSchema) -> None:
        """Adopt *schema* for every record that follows. Called once."""

    @abstractmethod
    def push(self, record: Record) -> None:
        """Receive one completed record. Ownership passes to the sink."""

    @abstractmethod
    def update_progress(self, fraction: float, flag: bool) -> None:
        """Receive a forwarded progress notification."""

    @abstractmethod
    def close(self, flag: bool) -> None:
        """End of stream. Called once."""


class MemorySink(RecordSink):
    """Sink that keeps everything it receives.

    Attributes:
        schema: The schema passed to ``init()``, or ``None``.
        records: Every pushed record, in push order.
        progress: ``(fraction, flag)`` pairs in arrival order.
        init_calls: Number of ``init()`` calls.
        close_calls: Number of ``close()`` calls.
    """

    def __init__(self) -> None:
        self.schema: RecordSchema | None = None
        self.records: list[Record] = []
        self.progress: list[tuple[float, bool]] = []
        self.init_calls = 0
        self.close_calls = 0

    def init(self, schema: RecordSchema) -> None:
        self.schema = schema
        self.init_calls += 1

    def push(self, record: Record) -> None:
        self.records.append(record)

    def update_progress(self, fraction: float, flag: bool) -> None:
        self.progress.append((fraction, flag))

    def close(self, flag: bool) -> None:
        self.close_calls += 1

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def column(self, name: str) -> list[object]:
        """Return the values of field *name* across all pushed records."""
        return [record[name] for record in self.records]
