"""Abstract base class for all pseudo-random sources.

Every source, whether a seeded numpy generator, the process-wide shared
generator, or a scripted test double, implements this interface. The ABC
provides a default ``next_standard_normal()`` built on ``next_double()``
(Box-Muller); subclasses backed by a native normal sampler override it.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

_TWO_PI = 2.0 * math.pi


class RandomSource(ABC):
    """Abstract base for pseudo-random sources.

    Implementations produce one uniform double in [0, 1) per
    ``next_double()`` call. A sequence drawn from a source constructed with
    the same seed must be identical across runs.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'pcg64'``, ``'shared(pcg64)'``)."""

    @abstractmethod
    def next_double(self) -> float:
        """Return one uniform float in [0, 1)."""

    def next_standard_normal(self) -> float:
        """Return one N(0, 1) deviate.

        The default implementation uses the Box-Muller transform on two
        ``next_double()`` draws. ``1 - u1`` lies in (0, 1] so the logarithm
        is always finite.

        Returns:
            A standard normal deviate.
        """
        u1 = self.next_double()
        u2 = self.next_double()
        return math.sqrt(-2.0 * math.log(1.0 - u1)) * math.cos(_TWO_PI * u2)

    def close(self) -> None:
        """Release resources. Sources holding none need not override this."""
