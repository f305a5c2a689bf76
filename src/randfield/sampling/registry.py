"""Registry for distribution sampler builders.

Builders are plain functions ``(config, source) -> Sampler`` registered
under a :class:`~randfield.sampling.types.Distribution` with the
``@DistributionRegistry.register()`` decorator. Dispatch happens once, in
:meth:`DistributionRegistry.build`; the returned closure never re-dispatches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from randfield.sampling.types import Distribution, Sampler
    from randfield.source.base import RandomSource

    SamplerBuilder = Callable[[Any, RandomSource], Sampler]

logger = logging.getLogger("randfield")


def nan_sampler() -> float:
    """Sampler used for an unrecognised distribution: always NaN."""
    return float("nan")


class DistributionRegistry:
    """Registry mapping Distribution variants to sampler builders."""

    _registry: ClassVar[dict[Distribution, SamplerBuilder]] = {}

    @classmethod
    def register(cls, distribution: Distribution) -> Callable[[SamplerBuilder], SamplerBuilder]:
        """Decorator that registers a builder function under *distribution*.

        Args:
            distribution: The variant the builder implements.

        Returns:
            Decorator that registers the function and returns it unchanged.

        Raises:
            ValueError: If *distribution* is already registered.
        """

        def decorator(builder: SamplerBuilder) -> SamplerBuilder:
            if distribution in cls._registry:
                raise ValueError(f"Distribution '{distribution.value}' is already registered")
            cls._registry[distribution] = builder
            return builder

        return decorator

    @classmethod
    def get(cls, distribution: Distribution) -> SamplerBuilder:
        """Return the builder registered under *distribution*.

        Raises:
            KeyError: If *distribution* is not registered.
        """
        if distribution not in cls._registry:
            available = ", ".join(sorted(d.value for d in cls._registry)) or "(none)"
            raise KeyError(f"Unknown distribution {distribution!r}. Available: {available}")
        return cls._registry[distribution]

    @classmethod
    def build(cls, config: Any, source: RandomSource) -> Sampler:
        """Compile *config* into a sampler drawing from *source*.

        An unrecognised ``config.distribution`` yields :func:`nan_sampler`
        rather than an error.

        Args:
            config: A RandomFieldConfig (or compatible object) with a
                ``distribution`` attribute and the distribution parameters.
            source: The pseudo-random source the sampler will draw from.

        Returns:
            A zero-argument function producing one float per call.
        """
        try:
            builder = cls.get(config.distribution)
        except KeyError:
            logger.warning("No sampler for distribution %r, output will be NaN", config.distribution)
            return nan_sampler
        return builder(config, source)

    @classmethod
    def list_registered(cls) -> list[str]:
        """Return sorted list of registered distribution names."""
        return sorted(d.value for d in cls._registry)
