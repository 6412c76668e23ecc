"""Explain dice notation without rolling it."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from dicekit.errors import NotationError
from dicekit.models import DiceTerm, Direction, Expression
from dicekit.parser import parse


class TermDescription(BaseModel):
    sign: Literal["+", "-"]
    count: int
    size: int
    fudge: bool = False
    modifiers: list[str] = Field(default_factory=list)

    @property
    def text(self) -> str:
        head = f"{'-' if self.sign == '-' else ''}{self.count}d{'F' if self.fudge else self.size}"
        return " ".join([head, *(f"({m})" for m in self.modifiers)])


class Description(BaseModel):
    dice: list[TermDescription]
    modifier: int

    @property
    def text(self) -> str:
        lines = ["Breakdown:"]
        lines.extend(f"• {term.text}" for term in self.dice)
        if self.modifier:
            lines.append(f"• Modifier: {self.modifier:+d}")
        return "\n".join(lines)


class Validation(BaseModel):
    notation: str
    valid: bool
    expression: Expression | None = None
    description: Description | None = None
    error: str | None = None
    text: str


def _direction_word(direction: Direction) -> str:
    return "highest" if direction is Direction.highest else "lowest"


def _term_modifiers(term: DiceTerm) -> list[str]:
    modifiers = []
    if term.keep is not None:
        modifiers.append(f"keep {_direction_word(term.keep.direction)} {term.keep.count}")
    if term.drop is not None:
        modifiers.append(f"drop {_direction_word(term.drop.direction)} {term.drop.count}")
    if term.reroll:
        modifiers.append(f"reroll {', '.join(str(v) for v in sorted(term.reroll))}")
    if term.explode:
        modifiers.append("exploding dice")
    if term.success is not None:
        modifiers.append(f"success on {term.success}+")
    return modifiers


def describe(expression: Expression) -> Description:
    """Describe each term of a parsed expression in plain words."""
    return Description(
        dice=[
            TermDescription(
                sign="-" if term.is_negative else "+",
                count=term.magnitude,
                size=term.size,
                fudge=term.fudge,
                modifiers=_term_modifiers(term),
            )
            for term in expression.dice
        ],
        modifier=expression.modifier,
    )


def explain(notation: str) -> Validation:
    """Validate notation and explain it.

    Notation errors are reported in the result rather than raised.
    """
    try:
        expression = parse(notation)
    except NotationError as exc:
        return Validation(
            notation=notation,
            valid=False,
            error=str(exc),
            text=f"Invalid dice notation: {notation}\n\nError: {exc}",
        )

    description = describe(expression)
    return Validation(
        notation=notation,
        valid=True,
        expression=expression,
        description=description,
        text=f"Valid dice notation: {notation}\n\n{description.text}",
    )
