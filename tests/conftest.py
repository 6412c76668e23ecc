"""Shared test fixtures for the dicekit test suite.

sequence
    Factory for a deterministic random source. ``sequence(3, 5)`` returns an
    object whose ``randint`` hands back 3 then 5, checking each value against
    the requested bounds. Running out of values fails the test.

async_client
    AsyncClient wired to the FastAPI app, drawing from the configured source.

scripted_client
    Like async_client, but with get_random_source overridden by a SequenceRandom so HTTP
    tests can script the dice.

fresh_default_source  (autouse)
    Clears the cached process-wide random source so settings overrides take
    effect and no draws leak between tests.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dicekit.dependencies import get_random_source
from dicekit.main import app
from dicekit.rng import default_random_source


class SequenceRandom:
    """Random source that replays a fixed list of draws."""

    def __init__(self, values):
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            raise AssertionError(f"SequenceRandom exhausted (asked for randint({a}, {b}))")
        value = self._values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside randint({a}, {b})")
        return value

    def push(self, *values: int) -> None:
        self._values.extend(values)

    @property
    def remaining(self) -> int:
        return len(self._values)


@pytest.fixture(autouse=True)
def fresh_default_source():
    """Rebuild the process-wide random source around every test."""
    default_random_source.cache_clear()
    yield
    default_random_source.cache_clear()


@pytest.fixture
def sequence():
    def _make(*values: int) -> SequenceRandom:
        return SequenceRandom(values)

    return _make


@pytest_asyncio.fixture
async def async_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def scripted_client(sequence):
    """AsyncClient whose rolls draw from a scripted sequence.

    Yields ``(client, script)``; call ``script(*values)`` before a request to
    load the draws that request will consume.
    """
    source = sequence()

    def script(*values: int) -> None:
        source.push(*values)

    app.dependency_overrides[get_random_source] = lambda: source

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client, script

    app.dependency_overrides.pop(get_random_source, None)
