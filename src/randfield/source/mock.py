"""Scripted source for tests and reproducible demonstrations.

Replays fixed uniform values (and optionally fixed normal deviates) in a
cycle, making the exact input of each distribution formula controllable.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from randfield.source.base import RandomSource

if TYPE_CHECKING:
    from collections.abc import Iterable


class SequenceSource(RandomSource):
    """Cycle through caller-supplied values.

    Args:
        uniforms: Values returned by ``next_double()``, repeated in order.
        normals: Values returned by ``next_standard_normal()``. When
            omitted, normals are derived from *uniforms* via Box-Muller.

    Raises:
        ValueError: If *uniforms* is empty.
    """

    def __init__(self, uniforms: Iterable[float], normals: Iterable[float] | None = None) -> None:
        uniform_values = list(uniforms)
        if not uniform_values:
            raise ValueError("SequenceSource needs at least one uniform value")
        self._uniforms = itertools.cycle(uniform_values)
        normal_values = list(normals) if normals is not None else []
        self._normals = itertools.cycle(normal_values) if normal_values else None
        self.draws = 0

    @property
    def name(self) -> str:
        """Return ``'sequence'``."""
        return "sequence"

    def next_double(self) -> float:
        self.draws += 1
        return next(self._uniforms)

    def next_standard_normal(self) -> float:
        if self._normals is None:
            return super().next_standard_normal()
        self.draws += 1
        return next(self._normals)
