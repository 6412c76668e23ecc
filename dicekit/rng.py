"""Random sources for the roller.

The roller only needs ``randint(low, high)`` with both bounds inclusive, which
``random.Random`` and ``random.SystemRandom`` already provide. Anything with
that method can be injected, e.g. a fixed sequence in tests.
"""

from __future__ import annotations

import functools
import random
from typing import Protocol

from dicekit.config import Settings, settings


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def make_random_source(config: Settings | None = None) -> RandomSource:
    """Build a new random source from configuration.

    "crypto" uses the operating system's entropy pool. "math" uses the
    Mersenne Twister, seeded from ``random_seed`` when one is set.
    """
    if config is None:
        config = settings
    if config.random_source == "math":
        return random.Random(config.random_seed)
    return random.SystemRandom()


@functools.cache
def default_random_source() -> RandomSource:
    """Return the process-wide random source, built once on first use.

    A configured seed makes the whole session reproducible while draws keep
    advancing between rolls. Call ``default_random_source.cache_clear()``
    after changing the random settings.
    """
    return make_random_source()
