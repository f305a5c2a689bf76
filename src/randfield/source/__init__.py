"""Pseudo-random source subsystem for randfield.

Re-exports the ABC, the numpy-backed sources, the scripted test source and
the shared-source provider::

    from randfield.source import NumpyRandomSource, SharedSourceProvider
"""

from randfield.source.base import RandomSource
from randfield.source.mock import SequenceSource
from randfield.source.numpy_source import (
    BIT_GENERATORS,
    NumpyRandomSource,
    SynchronizedRandomSource,
)
from randfield.source.shared import SharedSourceProvider, default_provider

__all__ = [
    "BIT_GENERATORS",
    "NumpyRandomSource",
    "RandomSource",
    "SequenceSource",
    "SharedSourceProvider",
    "SynchronizedRandomSource",
    "default_provider",
]
