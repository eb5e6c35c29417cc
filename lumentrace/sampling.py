"""
Random number streams.

Every render band owns a private ``numpy.random.Generator``. Code that is
called without an explicit generator falls back to one generator per
thread, so concurrent callers never share random state.
"""

from __future__ import annotations
import threading
from typing import List, Optional

import numpy as np

_local = threading.local()


def default_rng() -> np.random.Generator:
    """Return the calling thread's generator, creating it on first use."""
    rng = getattr(_local, 'rng', None)
    if rng is None:
        rng = np.random.default_rng()
        _local.rng = rng
    return rng


def seed_thread(seed: Optional[int]) -> np.random.Generator:
    """Replace the calling thread's generator with a freshly seeded one."""
    _local.rng = np.random.default_rng(seed)
    return _local.rng


def spawn_generators(seed: Optional[int], count: int) -> List[np.random.Generator]:
    """Create ``count`` independent generators from a single seed.

    The same seed and count always give the same streams. ``seed=None``
    draws entropy from the operating system.
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]
