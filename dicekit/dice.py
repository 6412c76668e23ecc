"""Server-side dice rolling entry point.

Ties the parser and the roller together for callers that start from a
notation string. Examples: 2d6, 1d20+5, 2d20kh1, 4d6dl1, 3d6!, 5d10>7.
"""

from __future__ import annotations

from dicekit.errors import DiceError, NotationError
from dicekit.models import Expression, RollResult
from dicekit.parser import parse
from dicekit.rng import RandomSource, default_random_source
from dicekit.roller import roll

__all__ = ["DiceError", "NotationError", "parse", "roll", "roll_notation", "roll_total"]


def roll_notation(
    notation: str,
    random_source: RandomSource | None = None,
    *,
    label: str | None = None,
) -> RollResult:
    """Parse and roll notation in one step.

    Args:
        notation: Dice notation string, e.g. "2d6+3".
        random_source: Source to draw from. Defaults to the configured one.
        label: Optional label carried into the result.

    Returns:
        The full RollResult.

    Raises:
        DiceError: If the notation is invalid or the roll cannot complete.
    """
    expression: Expression = parse(notation)
    source = random_source or default_random_source()
    return roll(expression, source, notation=notation, label=label)


def roll_total(notation: str, random_source: RandomSource | None = None) -> int:
    """Roll notation and return only the total."""
    return roll_notation(notation, random_source).total
