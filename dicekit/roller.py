"""Dice rolling engine.

Evaluates a parsed Expression against an injected random source. The
expression is trusted to come from ``dicekit.parser.parse``; no validation
happens here.

Per term, dice are rolled, rerolled once, exploded, filtered by keep/drop and
then either summed or counted as successes. Every die is reported in the
order it was generated, including dropped and bonus dice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from dicekit.config import settings
from dicekit.errors import ExplosionLimitExceeded
from dicekit.models import DiceTerm, DieRoll, Direction, Expression, RollResult
from dicekit.rng import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class _Die:
    size: int
    result: int
    modified: int | None = None
    dropped: bool = False
    exploded: bool = False
    rerolled: bool = False

    @property
    def value(self) -> int:
        return self.modified if self.modified is not None else self.result

    def token(self) -> str:
        text = str(self.result)
        if self.rerolled:
            text += f"(r{self.modified})"
        if self.exploded:
            text += "!"
        if self.dropped:
            text += "d"
        return text

    def freeze(self) -> DieRoll:
        return DieRoll(
            size=self.size,
            result=self.result,
            modified=self.modified,
            dropped=self.dropped,
            exploded=self.exploded,
            rerolled=self.rerolled,
        )


def roll(
    expression: Expression,
    random_source: RandomSource,
    *,
    notation: str = "",
    label: str | None = None,
) -> RollResult:
    """Roll every term of an expression and total the outcome.

    Args:
        expression: Parsed expression.
        random_source: Object with ``randint(low, high)``, bounds inclusive.
        notation: Source text, carried through for display only.
        label: Optional caller-supplied label, e.g. "Attack roll".

    Returns:
        RollResult with the total, every die in generation order and a
        breakdown such as ``"4d6:[6,3,1d,5] + 2"``.

    Raises:
        ExplosionLimitExceeded: If an exploding chain exceeds the configured cap.
    """
    total = expression.modifier
    rolls: list[DieRoll] = []
    breakdown = ""

    for term in expression.dice:
        dice = _roll_dice(term, random_source)
        _apply_keep_drop(term, dice)

        kept = [d for d in dice if not d.dropped]
        if term.success is not None:
            subtotal = sum(1 for d in kept if d.value >= term.success)
        else:
            subtotal = sum(d.value for d in kept)
        total += -subtotal if term.is_negative else subtotal

        if breakdown:
            breakdown += " - " if term.is_negative else " + "
        elif term.is_negative:
            breakdown += "-"
        breakdown += f"{term.label}:[{','.join(d.token() for d in dice)}]"
        if term.success is not None:
            breakdown += f" successes: {subtotal}"

        rolls.extend(d.freeze() for d in dice)

    if not breakdown:
        breakdown = str(expression.modifier)
    elif expression.modifier > 0:
        breakdown += f" + {expression.modifier}"
    elif expression.modifier < 0:
        breakdown += f" - {abs(expression.modifier)}"

    return RollResult(
        notation=notation,
        label=label,
        total=total,
        rolls=tuple(rolls),
        timestamp=datetime.now(timezone.utc),
        breakdown=breakdown,
    )


def _draw(term: DiceTerm, random_source: RandomSource) -> int:
    if term.fudge:
        # 1, 2, 3 -> -1, 0, +1
        return random_source.randint(1, 3) - 2
    return random_source.randint(1, term.size)


def _roll_dice(term: DiceTerm, random_source: RandomSource) -> list[_Die]:
    dice: list[_Die] = []
    for _ in range(term.magnitude):
        die = _Die(size=term.size, result=_draw(term, random_source))
        if term.reroll and die.result in term.reroll:
            die.rerolled = True
            die.modified = _draw(term, random_source)
        dice.append(die)

        if term.explode and die.result == term.max_face:
            dice.extend(_explode(term, random_source))
    return dice


def _explode(term: DiceTerm, random_source: RandomSource) -> list[_Die]:
    limit = settings.max_explosion_chain
    chain: list[_Die] = []
    while True:
        if len(chain) >= limit:
            logger.warning("Exploding chain on %s hit the %d-die cap", term.label, limit)
            raise ExplosionLimitExceeded(
                f"Exploding dice on {term.label} exceeded {limit} bonus dice"
            )
        value = _draw(term, random_source)
        chain.append(_Die(size=term.size, result=value, exploded=True))
        if value != term.max_face:
            return chain


def _apply_keep_drop(term: DiceTerm, dice: list[_Die]) -> None:
    """Flag dropped dice in place without reordering them."""
    if term.keep is None and term.drop is None:
        return

    # Stable sort, so ties keep generation order.
    ranked = sorted(dice, key=lambda d: d.value, reverse=True)

    if term.keep is not None:
        k = term.keep.count
        kept = ranked[:k] if term.keep.direction is Direction.highest else ranked[-k:]
        kept_ids = {id(d) for d in kept}
        for die in dice:
            if id(die) not in kept_ids:
                die.dropped = True
    else:
        k = term.drop.count
        dropped = ranked[:k] if term.drop.direction is Direction.highest else ranked[-k:]
        for die in dropped:
            die.dropped = True
