"""
Dice parser module for the weapon simulator.

Normalizes dice expressions (flat numbers, ``NdM`` strings and additive
containers of those) into a small tree of models, and evaluates that tree
against a RandomSource.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from weaponsim.core.constants import ATTACK_DIE_SIDES, MAX_DIE_SIDES
from weaponsim.core.error_handling import InvalidDiceExpression, fail
from weaponsim.core.random_source import RandomSource

DICE_PATTERN = re.compile(r"^(\d*)\s*[dD]\s*(\d+)$")


class FlatValue(BaseModel):
    """A fixed damage contribution."""

    model_config = ConfigDict(frozen=True)

    value: int | float = Field(description="The fixed value")

    def __str__(self) -> str:
        return str(self.value)


class DiceTerm(BaseModel):
    """A roll of `count` dice with `sides` faces each."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=1, description="Number of dice to roll")
    sides: int = Field(ge=1, le=MAX_DIE_SIDES, description="Faces on each die")

    def __str__(self) -> str:
        return f"{self.count}d{self.sides}"


class DiceSum(BaseModel):
    """The sum of a container of sub-expressions."""

    model_config = ConfigDict(frozen=True)

    terms: list["DiceNode"] = Field(
        default_factory=list,
        description="Normalized sub-expressions, in declaration order",
    )

    def __str__(self) -> str:
        return "(" + " + ".join(str(term) for term in self.terms) + ")"


DiceNode = Union[FlatValue, DiceTerm, DiceSum]

DiceSum.model_rebuild()


# ---- Parsing ----
def _parse_number(text: str) -> int | float | None:
    """
    Parses a numeric string.

    Args:
        text (str): The stripped string to parse.

    Returns:
        int | float | None: The number, or None if the string is not numeric.

    """
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_dice_string(expr: str) -> DiceNode:
    """
    Parses a string holding either a number or a single ``NdM`` term.

    Args:
        expr (str): The string to parse.

    Returns:
        DiceNode: The normalized expression.

    Raises:
        InvalidDiceExpression: If the string is neither.

    """
    text = expr.strip()
    number = _parse_number(text)
    if number is not None:
        return FlatValue(value=number)

    match = DICE_PATTERN.match(text)
    if not match:
        raise fail(
            InvalidDiceExpression,
            f"Invalid dice string format: '{expr}'",
            {"expression": expr},
        )

    count_str, sides_str = match.groups()
    count = int(count_str) if count_str else 1
    sides = int(sides_str)

    if count <= 0:
        raise fail(
            InvalidDiceExpression,
            f"Number of dice must be positive, got {count}",
            {"expression": expr, "count": count, "sides": sides},
        )
    if sides <= 0:
        raise fail(
            InvalidDiceExpression,
            f"Number of sides must be positive, got {sides}",
            {"expression": expr, "count": count, "sides": sides},
        )
    if sides > MAX_DIE_SIDES:
        raise fail(
            InvalidDiceExpression,
            f"Too many sides on dice: {sides} (limit: {MAX_DIE_SIDES})",
            {"expression": expr, "count": count, "sides": sides},
        )
    return DiceTerm(count=count, sides=sides)


def parse_expression(expr: Any) -> DiceNode:
    """
    Normalizes a dice expression into a tree of models.

    Accepted shapes are numbers, numeric strings, ``NdM`` strings (the count
    defaults to 1), and lists, tuples or mappings whose values are themselves
    dice expressions. Already normalized nodes are returned unchanged.

    Args:
        expr (Any): The expression to normalize.

    Returns:
        DiceNode: The normalized expression.

    Raises:
        InvalidDiceExpression: If the expression, or any nested value, is
            malformed.

    """
    if isinstance(expr, (FlatValue, DiceTerm, DiceSum)):
        return expr
    if isinstance(expr, bool):
        raise fail(
            InvalidDiceExpression,
            f"Booleans are not dice expressions: {expr}",
            {"expression": expr},
        )
    if isinstance(expr, (int, float)):
        if not math.isfinite(expr):
            raise fail(
                InvalidDiceExpression,
                f"Dice values must be finite, got {expr}",
                {"expression": expr},
            )
        return FlatValue(value=expr)
    if isinstance(expr, str):
        return _parse_dice_string(expr)
    if isinstance(expr, Mapping):
        return DiceSum(terms=[parse_expression(value) for value in expr.values()])
    if isinstance(expr, (list, tuple)):
        return DiceSum(terms=[parse_expression(item) for item in expr])
    raise fail(
        InvalidDiceExpression,
        f"Unsupported dice expression type: {type(expr).__name__}",
        {"expression": expr, "type": type(expr).__name__},
    )


# ---- Evaluation ----
class DiceEngine:
    """Evaluates dice expressions against a random source."""

    def __init__(self, random_source: RandomSource | None = None) -> None:
        """
        Args:
            random_source (RandomSource | None): The source of random draws.
                A private system-backed source is created when omitted.

        """
        self.random_source = random_source or RandomSource()

    def evaluate(self, expr: Any, max_roll: bool = False) -> int | float:
        """
        Evaluates a dice expression.

        Containers are always summed in non-max mode, even when `max_roll`
        is requested: only a top-level number or ``NdM`` string honours it.

        Args:
            expr (Any): The dice expression.
            max_roll (bool): Assume every die shows its highest face.

        Returns:
            int | float: The result of the evaluation.

        """
        return self._evaluate_node(parse_expression(expr), max_roll)

    def _evaluate_node(self, node: DiceNode, max_roll: bool) -> int | float:
        if isinstance(node, FlatValue):
            return node.value
        if isinstance(node, DiceTerm):
            if max_roll:
                return node.count * node.sides
            return sum(self.random_source.read(node.sides) for _ in range(node.count))
        return sum(self._evaluate_node(term, False) for term in node.terms)

    def get_max_roll(self, expr: Any) -> int | float:
        """Returns the best-case result of a dice expression."""
        return self.evaluate(expr, max_roll=True)

    def roll(self, sides: int, count: int | None = None, max_roll: bool = False) -> int:
        """
        Rolls a number of identical dice.

        Args:
            sides (int): Faces on each die.
            count (int | None): Number of dice, one when omitted or zero.
            max_roll (bool): Assume every die shows its highest face.

        Returns:
            int: The sum of the rolls.

        """
        return self.evaluate(f"{count or ''}d{sides}", max_roll)

    def d6(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(6, count, max_roll)

    def d8(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(8, count, max_roll)

    def d10(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(10, count, max_roll)

    def d12(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(12, count, max_roll)

    def d20(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(ATTACK_DIE_SIDES, count, max_roll)

    def d100(self, count: int | None = None, max_roll: bool = False) -> int:
        return self.roll(100, count, max_roll)


# ---- Process-wide default ----
_default_engine: DiceEngine | None = None


def get_default_engine() -> DiceEngine:
    """
    Returns the process-wide engine, creating it on first use.

    Concurrent simulations should each own a DiceEngine instead.

    Returns:
        DiceEngine: The shared engine.

    """
    global _default_engine
    if _default_engine is None:
        _default_engine = DiceEngine()
    return _default_engine


def set_default_engine(engine: DiceEngine | None) -> None:
    """Replaces the process-wide engine; None drops it so the next use recreates it."""
    global _default_engine
    _default_engine = engine
