"""numpy-backed pseudo-random sources.

``NumpyRandomSource`` wraps a ``numpy.random.Generator`` and is private to
one owner. ``SynchronizedRandomSource`` serialises every draw on an inner
source with a lock so it can be shared by concurrent pipeline branches.
"""

from __future__ import annotations

import threading

import numpy as np

from randfield.source.base import RandomSource

# Bit generators accepted for seeded sources. Keys are config values,
# values are numpy.random class names.
BIT_GENERATORS: dict[str, str] = {
    "pcg64": "PCG64",
    "mt19937": "MT19937",
    "philox": "Philox",
    "sfc64": "SFC64",
}

_SEED_MASK = (1 << 64) - 1


class NumpyRandomSource(RandomSource):
    """Seeded ``numpy.random.Generator`` source.

    Normal deviates come from numpy's ziggurat sampler, so a given seed
    reproduces the same mixed sequence of uniform and normal draws.

    Args:
        seed: Integer seed, or ``None`` to seed from OS entropy. Negative
            seeds are mapped to their 64-bit two's-complement value, which
            numpy accepts.
        bit_generator: Key into :data:`BIT_GENERATORS`.

    Raises:
        KeyError: If *bit_generator* is unknown.
    """

    def __init__(self, seed: int | None = None, bit_generator: str = "pcg64") -> None:
        if bit_generator not in BIT_GENERATORS:
            available = ", ".join(sorted(BIT_GENERATORS))
            raise KeyError(f"Unknown bit generator: {bit_generator!r}. Available: {available}")
        if seed is not None:
            seed &= _SEED_MASK
        bitgen_cls = getattr(np.random, BIT_GENERATORS[bit_generator])
        self._bit_generator = bit_generator
        self._seed = seed
        self._rng = np.random.Generator(bitgen_cls(seed))

    @property
    def name(self) -> str:
        return self._bit_generator

    @property
    def seed(self) -> int | None:
        """The normalised seed, or ``None`` when seeded from OS entropy."""
        return self._seed

    def next_double(self) -> float:
        return float(self._rng.random())

    def next_standard_normal(self) -> float:
        return float(self._rng.standard_normal())


class SynchronizedRandomSource(RandomSource):
    """Composition wrapper holding a lock around each draw on *inner*.

    Each call is atomic, so concurrent callers never corrupt the inner
    generator's state and never observe duplicated or skipped values. The
    interleaving between callers is unspecified.

    Args:
        inner: The source to guard.
    """

    def __init__(self, inner: RandomSource) -> None:
        self._inner = inner
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        """Return ``'shared(<inner>)'``."""
        return f"shared({self._inner.name})"

    def next_double(self) -> float:
        with self._lock:
            return self._inner.next_double()

    def next_standard_normal(self) -> float:
        with self._lock:
            return self._inner.next_standard_normal()

    def close(self) -> None:
        with self._lock:
            self._inner.close()
