"""FastAPI dependencies for Dicekit."""

from __future__ import annotations

from dicekit.rng import RandomSource, default_random_source


def get_random_source() -> RandomSource:
    """Return the process-wide random source.

    Tests override this dependency to feed the roller a fixed sequence.
    """
    return default_random_source()
