"""Monte-Carlo statistics over repeated rolls of one expression.

The median is the element at index ``iterations // 2`` of the sorted totals.
For an even iteration count that is the upper of the two middle values, not
their average; percentiles use the same index pick.
"""

from __future__ import annotations

import math
from collections import Counter

from dicekit.config import settings
from dicekit.models import Expression, Statistics
from dicekit.rng import RandomSource, default_random_source
from dicekit.roller import roll

PERCENTILES: tuple[int, ...] = (5, 10, 25, 50, 75, 90, 95)


def calculate(
    expression: Expression,
    iterations: int | None = None,
    random_source: RandomSource | None = None,
    *,
    notation: str = "",
) -> Statistics:
    """Roll an expression repeatedly and summarise the totals.

    Args:
        expression: Parsed expression to simulate.
        iterations: Number of rolls. Defaults to the configured count.
        random_source: Source shared by every roll. Defaults to the configured one.
        notation: Source text, carried through for display only.

    Raises:
        ValueError: If iterations is less than 1.
    """
    if iterations is None:
        iterations = settings.statistics_default_iterations
    if iterations < 1:
        raise ValueError(f"Iterations must be at least 1, got {iterations}")

    source = random_source or default_random_source()
    totals = sorted(roll(expression, source).total for _ in range(iterations))

    mean = sum(totals) / iterations
    variance = sum((t - mean) ** 2 for t in totals) / iterations

    counts = Counter(totals)
    top = max(counts.values())

    return Statistics(
        notation=notation,
        iterations=iterations,
        min=totals[0],
        max=totals[-1],
        mean=mean,
        median=totals[iterations // 2],
        mode=sorted(value for value, n in counts.items() if n == top),
        standard_deviation=math.sqrt(variance),
        probabilities={value: n / iterations for value, n in sorted(counts.items())},
        percentiles={p: totals[min(iterations - 1, iterations * p // 100)] for p in PERCENTILES},
    )
