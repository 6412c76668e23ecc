"""Dice notation parser.

Supports the grammar::

    Term       := [count] 'd' (size | '%' | 'F') [('kh'|'kl'|'dh'|'dl') N] ['r' N] ['!'] ['>' N]
    Expression := Term (('+' | '-') (Term | Integer))*

Examples: 2d6, d20, 3d10+2, 2d6-1d4+3, 4d6kh3, 2d20kl1, 4d6r1, 3d6!, 5d10>7, 4dF, 1d%.

Bare integers are summed into a single modifier; their position in the
notation is not preserved.
"""

from __future__ import annotations

import re

from dicekit.config import settings
from dicekit.errors import (
    CombinationTooLarge,
    DieSizeTooLarge,
    EmptyNotation,
    InvalidDiceCount,
    InvalidDieSize,
    InvalidKeepDropCount,
    InvalidRerollValue,
    InvalidSuccessThreshold,
    KeepDropExceedsDiceCount,
    NoDiceFound,
    TooManyDice,
    UnrecognizedToken,
)
from dicekit.models import FUDGE_SIZE, PERCENTILE_SIZE, DiceTerm, Direction, Expression, KeepDrop

_HAS_DIE_RE = re.compile(r"\d*d(\d+|%|F)", re.IGNORECASE | re.ASCII)

_TERM_RE = re.compile(
    r"(?P<count>\d+)?d(?P<size>\d+|%|F)"
    r"(?:(?P<filter>kh|kl|dh|dl)(?P<filter_count>\d+))?"
    r"(?:r(?P<reroll>\d+))?"
    r"(?P<explode>!)?"
    r"(?:>(?P<success>\d+))?",
    re.IGNORECASE | re.ASCII,
)

_INTEGER_RE = re.compile(r"\d+", re.ASCII)

_SPLIT_RE = re.compile(r"([+-])")

_USAGE = "Invalid dice notation. Use formats like: 1d20, 2d6+3, 4d6kh3, 2d20kl1, 3d6!, 5d10>7"


def parse(notation: str) -> Expression:
    """Parse dice notation into an Expression.

    Args:
        notation: Dice notation string, e.g. "4d6kh3+2".

    Returns:
        Expression holding the dice terms in notation order and the summed
        integer modifier.

    Raises:
        NotationError: If the notation is malformed or any value is out of
            range. The concrete subclass names the violation.
    """
    if not notation or not notation.strip():
        raise EmptyNotation("Dice notation cannot be empty")

    if not _HAS_DIE_RE.search(notation):
        raise NoDiceFound(f"{_USAGE} (got {notation!r})")

    compact = re.sub(r"\s+", "", notation)
    parts = [p for p in _SPLIT_RE.split(compact) if p]

    dice: list[DiceTerm] = []
    modifier = 0
    sign = 1

    for part in parts:
        if part == "+":
            sign = 1
            continue
        if part == "-":
            sign = -1
            continue

        m = _TERM_RE.fullmatch(part)
        if m:
            dice.append(_build_term(m, sign))
        elif _INTEGER_RE.fullmatch(part):
            modifier += sign * int(part)
        else:
            raise UnrecognizedToken(
                f"Invalid notation part: {part!r}. Expected dice notation or number."
            )

    if not dice:
        raise NoDiceFound(f"{_USAGE} (got {notation!r})")

    return Expression(dice=tuple(dice), modifier=modifier)


def _build_term(m: re.Match[str], sign: int) -> DiceTerm:
    count = int(m.group("count") or 1)
    raw_size = m.group("size").lower()
    fudge = raw_size == "f"
    if raw_size == "%":
        size = PERCENTILE_SIZE
    elif fudge:
        size = FUDGE_SIZE
    else:
        size = int(raw_size)

    if count <= 0:
        raise InvalidDiceCount(f"Invalid dice count: {count}. Must be positive.")
    if count > settings.max_dice:
        raise TooManyDice(f"Too many dice: {count} (max {settings.max_dice})")
    if size <= 0:
        raise InvalidDieSize(f"Invalid die size: {size}. Must be positive.")
    if size > settings.max_die_size:
        raise DieSizeTooLarge(f"Die size too large: {size} (max {settings.max_die_size})")
    if count * size > settings.max_dice_combination:
        raise CombinationTooLarge(
            f"Dice combination too large: {count}d{size} "
            f"({count * size} exceeds {settings.max_dice_combination})"
        )

    keep = drop = None
    if m.group("filter"):
        kind = m.group("filter")[0].lower()
        verb = "keep" if kind == "k" else "drop"
        filter_count = int(m.group("filter_count"))
        if filter_count <= 0:
            raise InvalidKeepDropCount(f"Invalid {verb} count: {filter_count}. Must be positive.")
        if filter_count >= count:
            raise KeepDropExceedsDiceCount(
                f"Cannot {verb} {filter_count} dice from only {count} dice"
            )
        filt = KeepDrop(direction=Direction(m.group("filter")[1].lower()), count=filter_count)
        if kind == "k":
            keep = filt
        else:
            drop = filt

    lo, hi = (-1, 1) if fudge else (1, size)

    reroll = None
    if m.group("reroll"):
        value = int(m.group("reroll"))
        if not lo <= value <= hi:
            raise InvalidRerollValue(
                f"Invalid reroll value: {value}. Must be between {lo} and {hi}."
            )
        reroll = frozenset({value})

    success = None
    if m.group("success"):
        success = int(m.group("success"))
        if not lo <= success <= hi:
            raise InvalidSuccessThreshold(
                f"Invalid success threshold: {success}. Must be between {lo} and {hi}."
            )

    return DiceTerm(
        count=sign * count,
        size=size,
        fudge=fudge,
        keep=keep,
        drop=drop,
        reroll=reroll,
        explode=bool(m.group("explode")),
        success=success,
    )
