"""
Tests for the dice expression parser and engine.
"""

import pytest

from weaponsim.core import dice_parser
from weaponsim.core.dice_parser import (
    DiceEngine,
    DiceSum,
    DiceTerm,
    FlatValue,
    get_default_engine,
    parse_expression,
    set_default_engine,
)
from weaponsim.core.error_handling import InvalidDiceExpression
from weaponsim.core.random_source import RandomSource, SeededByteProvider


@pytest.mark.parametrize("count", [1, 2, 3, 10])
@pytest.mark.parametrize("sides", [1, 4, 6, 8, 20, 100])
def test_max_roll_is_count_times_sides(count, sides, low_engine):
    assert low_engine.evaluate(f"{count}d{sides}", max_roll=True) == count * sides


@pytest.mark.parametrize(
    "expr, expected",
    [
        (5, 5),
        ("5", 5),
        (" 7 ", 7),
        ("-1", -1),
        (2.5, 2.5),
        ("2.5", 2.5),
    ],
)
def test_numbers_pass_through(expr, expected, low_engine):
    assert low_engine.evaluate(expr) == expected
    assert low_engine.evaluate(expr, max_roll=True) == expected


def test_count_defaults_to_one(low_engine):
    assert low_engine.evaluate("d6", max_roll=True) == 6
    assert low_engine.evaluate("D8", max_roll=True) == 8


def test_unforced_draws_stay_in_range():
    engine = DiceEngine(RandomSource(SeededByteProvider(99)))
    for _ in range(500):
        assert 1 <= engine.evaluate("1d6") <= 6
        assert 3 <= engine.evaluate("3d4") <= 12


def test_draws_follow_the_byte_stream(make_engine):
    engine = make_engine(0, 1, 2, 3)
    # Bytes 0..3 on a d6 roll 1, 2, 3, 4.
    assert engine.evaluate("4d6") == 10


def test_same_bytes_give_same_results(make_engine):
    first = make_engine(3, 141, 59, 26, 53, 58, 97)
    second = make_engine(3, 141, 59, 26, 53, 58, 97)
    rolls = ["2d6", "1d20", "4d8", "d100"]
    assert [first.evaluate(r) for r in rolls] == [second.evaluate(r) for r in rolls]


@pytest.mark.parametrize(
    "expr",
    [
        "abc",
        "",
        "0d6",
        "2d0",
        "2d",
        "d",
        "1d6+2",
        "2d6d6",
        "2d300",
        "-1d6",
        "nan",
        "inf",
        True,
        None,
        float("nan"),
        object(),
        ["1d6", "oops"],
        {"fire": "1d6", "bad": "x"},
    ],
)
def test_malformed_expressions_are_rejected(expr, low_engine):
    with pytest.raises(InvalidDiceExpression):
        low_engine.evaluate(expr)


def test_containers_are_summed(low_engine):
    # Every die rolls a 1 with the low engine.
    assert low_engine.evaluate(["1d6", 2, {"fire": "2d4", "flat": "3"}]) == 8
    assert low_engine.evaluate(("1d8", ("1d8", 1))) == 3
    assert low_engine.evaluate([]) == 0


def test_containers_ignore_the_max_flag(low_engine):
    assert low_engine.evaluate(["1d6", 2], max_roll=True) == 3
    assert low_engine.evaluate({"a": "2d6"}, max_roll=True) == 2


def test_parse_expression_normalizes_shapes():
    assert parse_expression("2d6") == DiceTerm(count=2, sides=6)
    assert parse_expression("d20") == DiceTerm(count=1, sides=20)
    assert parse_expression("4") == FlatValue(value=4)
    assert parse_expression(["1d4", 1]) == DiceSum(
        terms=[DiceTerm(count=1, sides=4), FlatValue(value=1)]
    )
    term = DiceTerm(count=3, sides=8)
    assert parse_expression(term) is term
    assert str(term) == "3d8"


@pytest.mark.parametrize(
    "method, sides",
    [("d6", 6), ("d8", 8), ("d10", 10), ("d12", 12), ("d20", 20), ("d100", 100)],
)
def test_die_helpers(method, sides, low_engine):
    roll = getattr(low_engine, method)
    assert roll(max_roll=True) == sides
    assert roll(0, True) == sides
    assert roll(3, True) == 3 * sides
    assert roll(2) == 2


def test_get_max_roll(low_engine):
    assert low_engine.get_max_roll("2d10") == 20


def test_default_engine_is_created_once():
    set_default_engine(None)
    try:
        engine = get_default_engine()
        assert isinstance(engine, DiceEngine)
        assert get_default_engine() is engine
        assert 1 <= engine.d20() <= 20
    finally:
        set_default_engine(None)
    assert dice_parser._default_engine is None
