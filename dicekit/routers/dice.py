"""Roll, validate and simulate routes."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from dicekit.config import settings
from dicekit.critical import Critical, detect_critical
from dicekit.dependencies import get_random_source
from dicekit.describe import Validation, explain
from dicekit.errors import DiceError, RollError
from dicekit.models import DieRoll, Statistics
from dicekit.parser import parse
from dicekit.rng import RandomSource
from dicekit.roller import roll
from dicekit.statistics import calculate

logger = logging.getLogger(__name__)

router = APIRouter()


class RollRequest(BaseModel):
    notation: str = Field(description='Dice notation, e.g. "1d20+5" or "2d20kh1"')
    label: str | None = Field(default=None, description='e.g. "Damage roll"')
    verbose: bool = False


class RollResponse(BaseModel):
    notation: str
    label: str | None
    total: int
    rolls: list[DieRoll]
    timestamp: datetime
    breakdown: str
    critical: Critical | None
    modifier: int | None
    text: str


class ValidateRequest(BaseModel):
    notation: str


class StatisticsRequest(BaseModel):
    notation: str
    iterations: int | None = Field(default=None, ge=1)


def _summary(request: RollRequest, total: int, critical: Critical | None, breakdown: str) -> str:
    text = f"You rolled {request.notation}"
    if request.label:
        text += f" for {request.label}"
    text += f":\nTotal: {total}"
    if critical is not None:
        if critical.type == "success":
            text += "\nNatural 20 - Critical Success!"
        else:
            text += "\nNatural 1 - Critical Fail!"
    if request.verbose:
        text += f"\nBreakdown: {breakdown}"
    return text


@router.post("/roll", response_model=RollResponse)
def roll_dice(
    request: RollRequest,
    random_source: RandomSource = Depends(get_random_source),
) -> RollResponse:
    """Roll notation and report the total, every die and any critical."""
    try:
        expression = parse(request.notation)
        result = roll(expression, random_source, notation=request.notation, label=request.label)
    except RollError as exc:
        logger.warning("Roll of %r aborted: %s", request.notation, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DiceError as exc:
        logger.info("Rejected dice notation %r: %s", request.notation, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    critical = detect_critical(result)
    return RollResponse(
        notation=result.notation,
        label=result.label,
        total=result.total,
        rolls=list(result.rolls),
        timestamp=result.timestamp,
        breakdown=result.breakdown,
        critical=critical,
        modifier=expression.modifier or None,
        text=_summary(request, result.total, critical, result.breakdown),
    )


@router.post("/validate", response_model=Validation)
def validate_notation(request: ValidateRequest) -> Validation:
    """Check notation and explain it term by term without rolling."""
    return explain(request.notation)


@router.post("/statistics", response_model=Statistics)
def simulate(
    request: StatisticsRequest,
    random_source: RandomSource = Depends(get_random_source),
) -> Statistics:
    """Roll notation many times and summarise the totals.

    Declared sync so FastAPI runs it in the threadpool.
    """
    iterations = request.iterations or settings.statistics_default_iterations
    if iterations > settings.statistics_max_iterations:
        raise HTTPException(
            status_code=422,
            detail=f"Too many iterations: {iterations} (max {settings.statistics_max_iterations})",
        )

    try:
        expression = parse(request.notation)
    except DiceError as exc:
        logger.info("Statistics for %r failed: %s", request.notation, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    dice_rolled = iterations * sum(term.magnitude for term in expression.dice)
    if dice_rolled > settings.statistics_max_dice_rolled:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Simulation too large: {dice_rolled} dice "
                f"(max {settings.statistics_max_dice_rolled})"
            ),
        )

    try:
        return calculate(expression, iterations, random_source, notation=request.notation)
    except DiceError as exc:
        logger.info("Statistics for %r failed: %s", request.notation, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
