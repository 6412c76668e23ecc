"""Exception hierarchy for notation parsing and rolling.

Every parser failure is a ``NotationError``; the only failure the roller can
raise on its own is ``ExplosionLimitExceeded``. Both derive from
``DiceError`` (a ``ValueError``) so callers can catch the whole family at
one boundary.
"""

from __future__ import annotations


class DiceError(ValueError):
    """Raised when dice notation cannot be parsed or rolled."""


class NotationError(DiceError):
    """Raised when a notation string is malformed or out of range."""


class EmptyNotation(NotationError):
    pass


class NoDiceFound(NotationError):
    pass


class UnrecognizedToken(NotationError):
    pass


class InvalidDiceCount(NotationError):
    pass


class TooManyDice(NotationError):
    pass


class InvalidDieSize(NotationError):
    pass


class DieSizeTooLarge(NotationError):
    pass


class CombinationTooLarge(NotationError):
    pass


class InvalidKeepDropCount(NotationError):
    pass


class KeepDropExceedsDiceCount(NotationError):
    pass


class InvalidRerollValue(NotationError):
    pass


class InvalidSuccessThreshold(NotationError):
    pass


class RollError(DiceError):
    """Raised when a valid expression cannot be rolled to completion."""


class ExplosionLimitExceeded(RollError):
    pass
