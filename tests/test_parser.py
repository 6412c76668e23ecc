"""Unit tests for the dice notation parser."""

import pytest

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
    NotationError,
    TooManyDice,
    UnrecognizedToken,
)
from dicekit.models import DiceTerm, Direction, Expression, KeepDrop
from dicekit.parser import parse


class TestParse:
    def test_simple_notation(self) -> None:
        assert parse("3d6+2") == Expression(dice=(DiceTerm(count=3, size=6),), modifier=2)

    def test_implicit_one_die(self) -> None:
        assert parse("d20") == Expression(dice=(DiceTerm(count=1, size=20),))

    def test_multiple_dice_types(self) -> None:
        assert parse("1d20+2d6-1") == Expression(
            dice=(DiceTerm(count=1, size=20), DiceTerm(count=2, size=6)),
            modifier=-1,
        )

    def test_case_insensitive(self) -> None:
        assert parse("2D6KH1") == parse("2d6kh1")

    def test_whitespace_is_ignored(self) -> None:
        assert parse(" 2d6 + 1d4 - 3 ") == parse("2d6+1d4-3")

    def test_percentile(self) -> None:
        assert parse("1d%") == Expression(dice=(DiceTerm(count=1, size=100),))

    def test_fudge(self) -> None:
        term = parse("4dF").dice[0]
        assert term.fudge is True
        assert term.count == 4
        assert (term.min_face, term.max_face) == (-1, 1)

    def test_keep_highest(self) -> None:
        assert parse("4d6kh3") == Expression(
            dice=(DiceTerm(count=4, size=6, keep=KeepDrop(direction=Direction.highest, count=3)),),
        )

    def test_keep_lowest(self) -> None:
        term = parse("2d20kl1").dice[0]
        assert term.keep == KeepDrop(direction=Direction.lowest, count=1)
        assert term.drop is None

    def test_drop_lowest(self) -> None:
        assert parse("4d6dl1") == Expression(
            dice=(DiceTerm(count=4, size=6, drop=KeepDrop(direction=Direction.lowest, count=1)),),
        )

    def test_drop_highest(self) -> None:
        term = parse("5d8dh2").dice[0]
        assert term.drop == KeepDrop(direction=Direction.highest, count=2)

    def test_reroll(self) -> None:
        assert parse("4d6r1").dice[0].reroll == frozenset({1})

    def test_exploding(self) -> None:
        assert parse("3d6!") == Expression(dice=(DiceTerm(count=3, size=6, explode=True),))

    def test_success_counting(self) -> None:
        assert parse("5d10>8") == Expression(dice=(DiceTerm(count=5, size=10, success=8),))

    def test_all_options_together(self) -> None:
        term = parse("6d10kh4r1!>7").dice[0]
        assert term.keep == KeepDrop(direction=Direction.highest, count=4)
        assert term.reroll == frozenset({1})
        assert term.explode is True
        assert term.success == 7

    def test_negative_dice_count(self) -> None:
        term = parse("-1d6").dice[0]
        assert term.count == -1
        assert term.size == 6
        assert term.is_negative

    def test_mixed_positive_and_negative_dice(self) -> None:
        result = parse("2d6-1d4+3")
        assert [t.count for t in result.dice] == [2, -1]
        assert result.modifier == 3

    def test_modifiers_are_summed(self) -> None:
        assert parse("2+1d6-5+10").modifier == 7

    def test_last_operator_wins(self) -> None:
        assert parse("1d6+-2").modifier == -2


class TestParseErrors:
    @pytest.mark.parametrize("notation", ["", "   ", "\t\n"])
    def test_empty(self, notation: str) -> None:
        with pytest.raises(EmptyNotation, match="cannot be empty"):
            parse(notation)

    @pytest.mark.parametrize("notation", ["d", "1d", "bad-notation", "roll some dice"])
    def test_no_dice_pattern(self, notation: str) -> None:
        with pytest.raises(NoDiceFound):
            parse(notation)

    def test_bare_integer_has_no_dice(self) -> None:
        with pytest.raises(NoDiceFound, match="Invalid dice notation. Use formats like:"):
            parse("5")

    def test_die_pattern_inside_unrecognized_token(self) -> None:
        with pytest.raises(UnrecognizedToken, match="abc1d6"):
            parse("abc1d6")

    def test_junk_after_valid_term(self) -> None:
        with pytest.raises(UnrecognizedToken, match="x"):
            parse("1d6+x")

    def test_zero_dice(self) -> None:
        with pytest.raises(InvalidDiceCount):
            parse("0d6")

    def test_zero_sides(self) -> None:
        with pytest.raises(InvalidDieSize):
            parse("1d0")

    def test_too_many_dice(self) -> None:
        with pytest.raises(TooManyDice, match="Too many dice"):
            parse("999999d6")

    def test_die_size_too_large(self) -> None:
        with pytest.raises(DieSizeTooLarge, match="Die size too large"):
            parse("1d999999")

    def test_combination_too_large(self) -> None:
        with pytest.raises(CombinationTooLarge, match="1000d101"):
            parse("1000d101")

    def test_combination_at_limit_is_accepted(self) -> None:
        assert parse("1000d100").dice[0].count == 1000

    def test_limits_follow_settings(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_dice", 10)
        with pytest.raises(TooManyDice, match="max 10"):
            parse("11d6")

    def test_keep_zero(self) -> None:
        with pytest.raises(InvalidKeepDropCount):
            parse("4d6kh0")

    def test_drop_all_dice(self) -> None:
        with pytest.raises(KeepDropExceedsDiceCount, match="Cannot drop 1 dice from only 1 dice"):
            parse("1d6dl1")

    def test_keep_more_than_rolled(self) -> None:
        with pytest.raises(KeepDropExceedsDiceCount, match="Cannot keep 3 dice from only 2 dice"):
            parse("2d6kh3")

    def test_reroll_out_of_range(self) -> None:
        with pytest.raises(InvalidRerollValue, match="between 1 and 6"):
            parse("2d6r7")

    def test_reroll_zero(self) -> None:
        with pytest.raises(InvalidRerollValue):
            parse("2d6r0")

    def test_success_out_of_range(self) -> None:
        with pytest.raises(InvalidSuccessThreshold, match="between 1 and 10"):
            parse("5d10>11")

    def test_fudge_faces_bound_auxiliary_values(self) -> None:
        assert parse("4dF>1").dice[0].success == 1
        with pytest.raises(InvalidSuccessThreshold, match="between -1 and 1"):
            parse("4dF>2")

    def test_first_violation_wins(self) -> None:
        # Count is checked before size.
        with pytest.raises(TooManyDice):
            parse("5000d99999")

    def test_errors_share_a_base(self) -> None:
        with pytest.raises(NotationError):
            parse("2d6kh3")
        with pytest.raises(ValueError):
            parse("")
