"""Distribution variants and the sampler callable type."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

Sampler = Callable[[], float]
"""Zero-argument function returning one sampled float per call."""


class Distribution(str, Enum):
    """Supported sampling families. Exactly one is active per config."""

    UNIFORM = "uniform"
    TRIANGULAR = "triangular"
    NORMAL = "normal"
    LOGNORMAL = "lognormal"

    @property
    def label(self) -> str:
        """Display name used in annotation labels (e.g. ``'LogNormal'``)."""
        return _LABELS[self]


_LABELS = {
    Distribution.UNIFORM: "Uniform",
    Distribution.TRIANGULAR: "Triangular",
    Distribution.NORMAL: "Normal",
    Distribution.LOGNORMAL: "LogNormal",
}
