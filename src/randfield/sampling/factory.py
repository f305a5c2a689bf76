"""Compile a configuration into a ready-to-call sampler.

Source selection follows the seed rule: ``seed == 0`` draws from the
process-wide shared source (via a :class:`SharedSourceProvider`), any other
seed gets a fresh private :class:`NumpyRandomSource`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

# Importing the module registers the built-in distributions.
import randfield.sampling.distributions  # noqa: F401
from randfield.sampling.registry import DistributionRegistry
from randfield.source.numpy_source import NumpyRandomSource
from randfield.source.shared import default_provider

if TYPE_CHECKING:
    from randfield.config import RandomFieldConfig
    from randfield.sampling.types import Sampler
    from randfield.source.base import RandomSource
    from randfield.source.shared import SharedSourceProvider


def build_source(
    config: RandomFieldConfig,
    provider: SharedSourceProvider | None = None,
) -> RandomSource:
    """Select the pseudo-random source for *config*.

    Args:
        config: Configuration providing ``seed`` and ``bit_generator``.
        provider: Shared-source provider used when ``seed == 0``. Defaults
            to the process-wide provider.

    Returns:
        The shared source, or a new private source seeded with ``config.seed``.
    """
    if config.seed == 0:
        return (provider or default_provider()).get()
    return NumpyRandomSource(seed=config.seed, bit_generator=config.bit_generator)


def build_sampler(
    config: RandomFieldConfig,
    provider: SharedSourceProvider | None = None,
) -> Sampler:
    """Compile *config* into a zero-argument sampler.

    Never raises for malformed distribution parameters; those surface as
    degenerate values when the sampler is called.

    Args:
        config: The active configuration.
        provider: Shared-source provider used when ``seed == 0``.

    Returns:
        A function producing one float per call.
    """
    source = build_source(config, provider)
    return DistributionRegistry.build(config, source)
