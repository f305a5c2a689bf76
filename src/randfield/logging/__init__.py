"""Diagnostic logging subsystem for randfield.

Provides immutable per-record sampling events and a configurable logger
that supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from randfield.logging.logger import StreamLogger
from randfield.logging.types import RecordSampleEvent

__all__ = [
    "RecordSampleEvent",
    "StreamLogger",
]
