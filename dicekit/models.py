"""Value types shared by the parser, roller and statistics simulator.

All models are frozen: an ``Expression`` is immutable once parsed and a
``RollResult`` is immutable once returned.
"""

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

PERCENTILE_SIZE = 100
FUDGE_SIZE = 3


class Direction(str, enum.Enum):
    highest = "h"
    lowest = "l"


class KeepDrop(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: Direction
    count: int


class DiceTerm(BaseModel):
    """One dice clause, e.g. ``4d6kh3`` or ``-1d4``.

    A negative ``count`` subtracts the term's contribution from the total.
    Fudge dice are three-faced (``size == FUDGE_SIZE``) and yield -1, 0 or +1.
    """

    model_config = ConfigDict(frozen=True)

    count: int
    size: int
    fudge: bool = False
    keep: KeepDrop | None = None
    drop: KeepDrop | None = None
    reroll: frozenset[int] | None = None
    explode: bool = False
    success: int | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> DiceTerm:
        if self.count == 0:
            raise ValueError("count must be non-zero")
        if self.size <= 0:
            raise ValueError("size must be positive")
        if self.fudge and self.size != FUDGE_SIZE:
            raise ValueError(f"fudge dice must have size {FUDGE_SIZE}")
        if self.keep is not None and self.drop is not None:
            raise ValueError("keep and drop are mutually exclusive")
        filt = self.keep or self.drop
        if filt is not None and not 0 < filt.count < self.magnitude:
            raise ValueError("keep/drop count must be between 1 and the number of dice - 1")
        return self

    @property
    def magnitude(self) -> int:
        return abs(self.count)

    @property
    def is_negative(self) -> bool:
        return self.count < 0

    @property
    def min_face(self) -> int:
        return -1 if self.fudge else 1

    @property
    def max_face(self) -> int:
        return 1 if self.fudge else self.size

    @property
    def label(self) -> str:
        """Unsigned ``NdS`` label used in breakdowns, ``NdF`` for fudge dice."""
        return f"{self.magnitude}d{'F' if self.fudge else self.size}"


class Expression(BaseModel):
    """Parsed notation: dice terms in notation order plus a summed modifier."""

    model_config = ConfigDict(frozen=True)

    dice: tuple[DiceTerm, ...] = ()
    modifier: int = 0


class DieRoll(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: int
    result: int
    modified: int | None = None
    dropped: bool = False
    exploded: bool = False
    rerolled: bool = False

    @property
    def value(self) -> int:
        """Effective value: the reroll if one happened, else the first roll."""
        return self.modified if self.modified is not None else self.result


class RollResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    notation: str
    label: str | None = None
    total: int
    rolls: tuple[DieRoll, ...] = ()
    timestamp: datetime
    breakdown: str


class Statistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    notation: str = ""
    iterations: int
    min: int
    max: int
    mean: float
    median: int
    mode: list[int] = Field(default_factory=list)
    standard_deviation: float = 0.0
    probabilities: dict[int, float] = Field(default_factory=dict)
    percentiles: dict[int, int] = Field(default_factory=dict)
