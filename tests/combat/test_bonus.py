"""
Tests for bonus descriptors.
"""

import pytest
from pydantic import ValidationError

from weaponsim.combat.bonus import Bonus, BonusRoll
from weaponsim.core.dice_parser import DiceSum, DiceTerm, FlatValue
from weaponsim.core.error_handling import InvalidBonusDescriptor, InvalidDiceExpression


def test_both_descriptor_shapes_build_the_same_bonus():
    from_mapping = Bonus.from_descriptor({"type": "Fire", "bonus": "2d6"})
    from_pair = Bonus.from_descriptor("Fire", "2d6")
    assert from_mapping == from_pair
    assert from_mapping.type == "Fire"
    assert from_mapping.expression == "2d6"


def test_name_is_used_when_type_is_missing():
    bonus = Bonus.from_descriptor({"name": "Acid", "bonus": "1d4"})
    assert bonus.type == "Acid"


def test_type_wins_over_name():
    bonus = Bonus.from_descriptor({"type": "Cold", "name": "Frost", "bonus": 2})
    assert bonus.type == "Cold"


def test_evaluate_returns_type_and_value(low_engine):
    roll = Bonus.from_descriptor("Fire", "2d6").evaluate(engine=low_engine)
    assert roll == BonusRoll(type="Fire", value=2)


def test_evaluate_in_range_with_default_engine():
    bonus = Bonus.from_descriptor({"type": "Fire", "bonus": "2d6"})
    for _ in range(100):
        roll = bonus.evaluate()
        assert roll.type == "Fire"
        assert 2 <= roll.value <= 12


def test_evaluate_max_roll(low_engine):
    roll = Bonus.from_descriptor("Sonic", "3d6").evaluate(True, low_engine)
    assert roll.value == 18


def test_flat_and_nested_bonuses(low_engine):
    assert Bonus.from_descriptor("Holy", 3).evaluate(engine=low_engine).value == 3
    nested = Bonus.from_descriptor({"type": "Acid", "bonus": ["1d4", 1]})
    assert nested.evaluate(engine=low_engine).value == 2


@pytest.mark.parametrize(
    "descriptor, bonus",
    [
        ({}, None),
        ({"type": "Fire"}, None),
        ({"bonus": "1d6"}, None),
        ({"type": "", "bonus": "1d6"}, None),
        ({"type": "Fire", "bonus": ""}, None),
        ({"type": "Fire", "bonus": 0}, None),
        ({"type": "Fire", "bonus": []}, None),
        (["Fire", "1d6"], None),
        (("Fire", "1d6"), None),
        ("Fire", None),
        ("", "1d6"),
        ("   ", "1d6"),
        (None, "1d6"),
        (42, "1d6"),
        ({"type": "Fire", "bonus": "1d6"}, "1d8"),
    ],
)
def test_invalid_descriptors_are_rejected(descriptor, bonus):
    with pytest.raises(InvalidBonusDescriptor):
        Bonus.from_descriptor(descriptor, bonus)


def test_malformed_expression_fails_at_construction():
    with pytest.raises(InvalidDiceExpression):
        Bonus.from_descriptor("Fire", "abc")


def test_bonus_is_immutable():
    bonus = Bonus.from_descriptor("Fire", "1d6")
    with pytest.raises(ValidationError):
        bonus.type = "Cold"


def test_existing_bonus_is_returned_unchanged():
    bonus = Bonus.from_descriptor("Fire", "1d6")
    assert Bonus.from_descriptor(bonus) is bonus


def test_str_shows_type_and_dice():
    assert str(Bonus.from_descriptor("Fire", "2d6")) == "Fire: 2d6"


def test_expression_is_parsed_once_at_construction():
    bonus = Bonus.from_descriptor("Fire", ["1d6", 2])
    assert isinstance(bonus.node, DiceSum)
    assert bonus.node.terms == [DiceTerm(count=1, sides=6), FlatValue(value=2)]
    assert bonus.expression == ["1d6", 2]


def test_positional_descriptor_needs_from_descriptor():
    with pytest.raises(TypeError):
        Bonus({})
    with pytest.raises(InvalidBonusDescriptor):
        Bonus.from_descriptor({})
