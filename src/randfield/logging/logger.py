"""Diagnostic logger for per-record sampling events.

Uses the standard ``logging`` module with the ``"randfield"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from randfield.config import RandomFieldConfig
    from randfield.logging.types import RecordSampleEvent

logger = logging.getLogger("randfield")


class StreamLogger:
    """Per-record diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Events are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per record with the record index, raw and
        stored value, and timing.

        ``"full"``: Full JSON dump of all event fields.

    Diagnostic mode stores all events in memory for post-hoc statistical
    analysis via ``get_diagnostic_data()`` and ``get_summary_stats()``.
    """

    def __init__(self, config: RandomFieldConfig) -> None:
        """Initialize the logger from configuration.

        Args:
            config: Configuration providing ``log_level`` and ``diagnostic_mode``.
        """
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._events: list[RecordSampleEvent] = []

    def log_record(self, event: RecordSampleEvent) -> None:
        """Log a single per-record sampling event.

        Args:
            event: Immutable record of the transform of one record.
        """
        if self._diagnostic_mode:
            self._events.append(event)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "record=%d %s=%r (raw=%.6g %s) source=%s total=%.3fms",
                event.record_index,
                event.field_name,
                event.stored_value,
                event.raw_value,
                event.distribution,
                event.source_name,
                event.transform_ms,
            )
        elif self._log_level == "full":
            logger.info("sample_event: %s", json.dumps(asdict(event), default=str))

    def get_diagnostic_data(self) -> list[RecordSampleEvent]:
        """Return all stored events (requires ``diagnostic_mode=True``).

        Returns:
            List of all RecordSampleEvent instances logged so far.
            Empty if diagnostic_mode is False.
        """
        return list(self._events)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored events.

        Mean, min and max are taken over finite raw values only; NaN and
        infinite draws are counted separately.

        Returns:
            Dictionary with aggregate stats, or empty dict if no events.
        """
        if not self._events:
            return {}

        n = len(self._events)
        finite = [e.raw_value for e in self._events if math.isfinite(e.raw_value)]
        nan_count = sum(1 for e in self._events if math.isnan(e.raw_value))
        null_count = sum(1 for e in self._events if e.stored_value is None)
        transform_times = [e.transform_ms for e in self._events]

        return {
            "total_records": n,
            "finite_count": len(finite),
            "nan_count": nan_count,
            "null_count": null_count,
            "mean_value": sum(finite) / len(finite) if finite else math.nan,
            "min_value": min(finite) if finite else math.nan,
            "max_value": max(finite) if finite else math.nan,
            "mean_transform_ms": sum(transform_times) / n,
            "max_transform_ms": max(transform_times),
        }
