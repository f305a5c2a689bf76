"""Process-wide shared source and its injectable provider.

The shared source backs every sampler configured with ``seed = 0``. It is
owned by the process, never by a stream processor: it is built lazily on
the first :meth:`SharedSourceProvider.get` call, seeded from OS entropy, and
reused until :meth:`SharedSourceProvider.reset`. Tests substitute a
controlled source with :meth:`SharedSourceProvider.override` or by passing
their own provider to the sampler factory.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from randfield.source.numpy_source import NumpyRandomSource, SynchronizedRandomSource

if TYPE_CHECKING:
    from collections.abc import Callable

    from randfield.source.base import RandomSource

logger = logging.getLogger("randfield")


def _default_factory() -> RandomSource:
    return SynchronizedRandomSource(NumpyRandomSource(seed=None))


class SharedSourceProvider:
    """Lazily constructs and hands out one shared source.

    Construction is guarded by a lock, so concurrent first calls still
    produce a single source.

    Args:
        factory: Builds the shared source on first use. Defaults to an
            OS-seeded PCG64 generator behind a lock.
    """

    def __init__(self, factory: Callable[[], RandomSource] | None = None) -> None:
        self._factory = factory or _default_factory
        self._source: RandomSource | None = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        """Whether the shared source has been built yet."""
        return self._source is not None

    def get(self) -> RandomSource:
        """Return the shared source, building it on first use."""
        source = self._source
        if source is not None:
            return source
        with self._lock:
            if self._source is None:
                self._source = self._factory()
                logger.debug("Shared random source created: %s", self._source.name)
            return self._source

    def override(self, source: RandomSource) -> None:
        """Install *source* as the shared source, replacing any existing one."""
        with self._lock:
            self._source = source

    def reset(self) -> None:
        """Close and drop the current source; the next ``get()`` builds a new one."""
        with self._lock:
            source, self._source = self._source, None
        if source is not None:
            source.close()


_default_provider = SharedSourceProvider()


def default_provider() -> SharedSourceProvider:
    """Return the process-wide provider used when none is injected."""
    return _default_provider
