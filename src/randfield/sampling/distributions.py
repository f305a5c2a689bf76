"""Sampler builders for the four supported distributions.

Parameters are not validated. Arithmetic runs on numpy float64 scalars with
floating-point errors ignored, so degenerate parameters (``maximum <=
minimum``, a mode outside the range, a negative standard deviation) produce
NaN, infinities or out-of-range values instead of raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from randfield.sampling.registry import DistributionRegistry
from randfield.sampling.types import Distribution

if TYPE_CHECKING:
    from randfield.config import RandomFieldConfig
    from randfield.sampling.types import Sampler
    from randfield.source.base import RandomSource


@DistributionRegistry.register(Distribution.UNIFORM)
def build_uniform(config: RandomFieldConfig, source: RandomSource) -> Sampler:
    """``minimum + u * (maximum - minimum)`` with u ~ U[0, 1)."""
    low = np.float64(config.minimum)
    with np.errstate(all="ignore"):
        span = np.float64(config.maximum) - low

    def sample() -> float:
        u = source.next_double()
        with np.errstate(all="ignore"):
            return float(low + u * span)

    return sample


@DistributionRegistry.register(Distribution.TRIANGULAR)
def build_triangular(config: RandomFieldConfig, source: RandomSource) -> Sampler:
    """Inverse-CDF sampling of Triangular(minimum, mode=average, maximum).

    With ``f = (mode - min) / (max - min)``::

        u <  f:  min + sqrt(u * (max - min) * (mode - min))
        u >= f:  max - sqrt((1 - u) * (max - min) * (max - mode))

    When ``max == min`` the split point is NaN, so every draw takes the
    second branch.
    """
    low = np.float64(config.minimum)
    high = np.float64(config.maximum)
    mode = np.float64(config.average)
    with np.errstate(all="ignore"):
        span = high - low
        left = mode - low
        right = high - mode
        split = left / span

    def sample() -> float:
        u = source.next_double()
        with np.errstate(all="ignore"):
            if u < split:
                return float(low + np.sqrt(u * span * left))
            return float(high - np.sqrt((1.0 - u) * span * right))

    return sample


@DistributionRegistry.register(Distribution.NORMAL)
def build_normal(config: RandomFieldConfig, source: RandomSource) -> Sampler:
    """``mean + stddev * z`` with z ~ N(0, 1) from the source."""
    mean = np.float64(config.average)
    std = np.float64(config.standard_deviation)

    def sample() -> float:
        z = source.next_standard_normal()
        with np.errstate(all="ignore"):
            return float(mean + std * z)

    return sample


@DistributionRegistry.register(Distribution.LOGNORMAL)
def build_lognormal(config: RandomFieldConfig, source: RandomSource) -> Sampler:
    """``exp(mu + sigma * z)`` with z ~ N(0, 1) from the source."""
    mu = np.float64(config.average)
    sigma = np.float64(config.standard_deviation)

    def sample() -> float:
        z = source.next_standard_normal()
        with np.errstate(all="ignore"):
            return float(np.exp(mu + sigma * z))

    return sample
