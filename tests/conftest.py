"""Shared pytest fixtures for randfield tests.

Provides configuration objects, schemas, scripted sources and an isolated
shared-source provider used across multiple test modules.
"""

from __future__ import annotations

import os

import pytest

from randfield.config import RandomFieldConfig
from randfield.records import FieldType, RecordSchema
from randfield.sink import MemorySink
from randfield.source import NumpyRandomSource, SharedSourceProvider, SynchronizedRandomSource


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove RF_* variables so configs only see test-supplied values."""
    for key in list(os.environ):
        if key.startswith("RF_"):
            monkeypatch.delenv(key)


@pytest.fixture
def default_config() -> RandomFieldConfig:
    """Return a RandomFieldConfig with all default values."""
    return RandomFieldConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def seeded_config() -> RandomFieldConfig:
    """Uniform(0, 1) with a fixed private seed."""
    return RandomFieldConfig(_env_file=None, seed=42)  # type: ignore[call-arg]


@pytest.fixture
def diagnostic_config() -> RandomFieldConfig:
    """Seeded config with diagnostic mode and full logging enabled."""
    return RandomFieldConfig(
        _env_file=None,  # type: ignore[call-arg]
        seed=7,
        log_level="full",
        diagnostic_mode=True,
    )


@pytest.fixture
def shared_provider() -> SharedSourceProvider:
    """A provider isolated from the process-wide default, seeded for repeatability."""
    return SharedSourceProvider(lambda: SynchronizedRandomSource(NumpyRandomSource(seed=1234)))


@pytest.fixture
def input_schema() -> RecordSchema:
    """Three-field schema of mixed types."""
    return RecordSchema.of(
        ("Id", FieldType.INT32),
        ("Name", FieldType.STRING),
        ("Score", FieldType.FLOAT64),
    )


@pytest.fixture
def input_rows() -> list[tuple[object, ...]]:
    """Rows matching ``input_schema``."""
    return [
        (1, "alpha", 0.5),
        (2, "beta", 1.5),
        (3, None, -2.0),
        (4, "delta", 10.0),
    ]


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()
