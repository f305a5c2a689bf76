"""Distribution sampling subsystem for randfield.

Re-exports the distribution enum, the registry and the sampler factory::

    from randfield.sampling import Distribution, build_sampler
"""

from randfield.sampling.factory import build_sampler, build_source
from randfield.sampling.registry import DistributionRegistry, nan_sampler
from randfield.sampling.types import Distribution, Sampler

__all__ = [
    "Distribution",
    "DistributionRegistry",
    "Sampler",
    "build_sampler",
    "build_source",
    "nan_sampler",
]
