"""Natural 1 / natural 20 detection on a finished roll."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from dicekit.models import RollResult


class Critical(BaseModel):
    type: Literal["success", "fail"]
    natural_roll: int


def detect_critical(result: RollResult) -> Critical | None:
    """Return the critical outcome of a roll, if any.

    Only applies when exactly one d20 survives keep/drop, so 1d20 and
    2d20kh1 qualify but a plain 2d20 does not. The first roll decides: a
    natural 20 that was rerolled still reads as a natural 20.
    """
    d20s = [r for r in result.rolls if r.size == 20 and not r.dropped]
    if len(d20s) != 1:
        return None
    natural = d20s[0].result
    if natural == 20:
        return Critical(type="success", natural_roll=20)
    if natural == 1:
        return Critical(type="fail", natural_roll=1)
    return None
