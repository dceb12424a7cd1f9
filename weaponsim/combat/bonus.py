"""
Bonus module for the weapon simulator.

A bonus (or enchantment) is a named, additive damage contribution with its own
dice expression. Descriptors come either as a mapping or as a positional
``(type, bonus)`` pair and are normalized here.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from weaponsim.core.dice_parser import (
    DiceEngine,
    DiceNode,
    get_default_engine,
    parse_expression,
)
from weaponsim.core.error_handling import (
    InvalidBonusDescriptor,
    fail,
    require_non_empty_string,
)


class BonusRoll(BaseModel):
    """The evaluated value of a bonus."""

    type: str = Field(description="The damage type of the bonus")
    value: int | float = Field(description="The rolled amount")


class Bonus(BaseModel):
    """
    A named damage contribution.

    The expression is parsed once when the bonus is built, so a malformed dice
    string fails at configuration time rather than mid-simulation.

    Build bonuses from descriptors with `Bonus.from_descriptor`; the model
    constructor only takes the `type` and `expression` keywords, and passing
    it a positional descriptor raises pydantic's TypeError.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="The damage type (e.g. 'Fire', 'Sonic')")
    expression: Any = Field(description="The dice expression (e.g. '1d6')")

    _node: DiceNode = PrivateAttr()

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        require_non_empty_string(self.type, "Bonus type", InvalidBonusDescriptor)
        if _is_empty(self.expression):
            raise fail(
                InvalidBonusDescriptor,
                f"Bonus '{self.type}' has no value",
                {"type": self.type, "expression": self.expression},
            )
        self._node = parse_expression(self.expression)

    @property
    def node(self) -> DiceNode:
        """The parsed dice expression."""
        return self._node

    @classmethod
    def from_descriptor(cls, descriptor: Any, bonus: Any = None) -> "Bonus":
        """
        Builds a bonus from either descriptor shape.

        Args:
            descriptor (Any): Either the damage type, or a mapping holding
                `type` (falling back to `name`) and `bonus`.
            bonus (Any): The dice expression, only with a type descriptor.

        Returns:
            Bonus: The normalized bonus.

        Raises:
            InvalidBonusDescriptor: If the type or the value is missing, if
                both shapes are mixed, or if the descriptor is a sequence.

        """
        if isinstance(descriptor, Bonus):
            return descriptor
        if isinstance(descriptor, Mapping):
            if bonus is not None:
                raise fail(
                    InvalidBonusDescriptor,
                    "A bonus value cannot be passed alongside a descriptor mapping",
                    {"descriptor": descriptor, "bonus": bonus},
                )
            bonus_type = descriptor.get("type") or descriptor.get("name")
            bonus = descriptor.get("bonus")
        elif isinstance(descriptor, str):
            bonus_type = descriptor
        else:
            raise fail(
                InvalidBonusDescriptor,
                f"Bonus descriptor is invalid: {descriptor!r}",
                {"descriptor": descriptor, "type": type(descriptor).__name__},
            )

        bonus_type = require_non_empty_string(
            bonus_type,
            "Bonus type",
            InvalidBonusDescriptor,
            {"descriptor": descriptor},
        )
        return cls(type=bonus_type, expression=bonus)

    def evaluate(
        self,
        max_roll: bool = False,
        engine: DiceEngine | None = None,
    ) -> BonusRoll:
        """
        Rolls the bonus.

        Args:
            max_roll (bool): Assume every die shows its highest face.
            engine (DiceEngine | None): The engine to roll with, the
                process-wide one when omitted.

        Returns:
            BonusRoll: The damage type and the rolled value.

        """
        engine = engine or get_default_engine()
        return BonusRoll(
            type=self.type,
            value=engine.evaluate(self._node, max_roll),
        )

    def __str__(self) -> str:
        return f"{self.type}: {self._node}"


def _is_empty(expression: Any) -> bool:
    """True for absent values, blank strings, zero and empty containers."""
    if expression is None:
        return True
    if isinstance(expression, str):
        return not expression.strip()
    if isinstance(expression, bool):
        return False
    return not expression
