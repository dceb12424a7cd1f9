"""
Weapon module for the weapon simulator.

A weapon owns a base damage expression, additive bonuses and enchantments,
and a critical range with its multiplier. It resolves one simulated attack
into a map of damage per type.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from weaponsim.combat.bonus import Bonus
from weaponsim.core.constants import (
    DEFAULT_BASE_DAMAGE,
    DEFAULT_CRIT_MULTIPLIER,
    DEFAULT_MIN_CRIT,
    DEFAULT_WEAPON_NAME,
    MIN_CRIT_LOWER_BOUND,
    MIN_CRIT_UPPER_BOUND,
    PHYSICAL_DAMAGE,
)
from weaponsim.core.dice_parser import (
    DiceEngine,
    DiceNode,
    get_default_engine,
    parse_expression,
)
from weaponsim.core.error_handling import (
    InvalidBonusDescriptor,
    InvalidCritRange,
    fail,
    require_int_in_range,
)

AttackResult = dict[str, int | float]


class Weapon(BaseModel):
    """
    Represents all aspects of a weapon relevant to damage simulation.

    Bonuses and enchantments behave identically; they are kept apart so a
    weapon description reads the way it was authored.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(
        default=DEFAULT_WEAPON_NAME,
        description="The name of the weapon.",
    )
    min_crit: int = Field(
        default=DEFAULT_MIN_CRIT,
        ge=MIN_CRIT_LOWER_BOUND,
        le=MIN_CRIT_UPPER_BOUND,
        description="Lowest d20 roll that counts as a critical hit.",
    )
    crit_multiplier: int = Field(
        default=DEFAULT_CRIT_MULTIPLIER,
        ge=1,
        description="Damage multiplier applied on a critical hit.",
    )
    base_damage: Any = Field(
        default=DEFAULT_BASE_DAMAGE,
        description="Dice expression of the physical damage.",
    )
    enchantments: list[Bonus] = Field(
        default_factory=list,
        description="Enchantments, evaluated before the bonuses.",
    )
    bonuses: list[Bonus] = Field(
        default_factory=list,
        description="Additional damage added to every attack.",
    )
    crit_count: int = Field(
        default=0,
        ge=0,
        description="Number of genuine critical hits rolled so far.",
    )
    engine: DiceEngine | None = Field(
        default=None,
        exclude=True,
        repr=False,
        description="Dice engine used by the attacks, the process-wide one when unset.",
    )

    _damage_source: Any = PrivateAttr(default=None)
    _damage_node: DiceNode | None = PrivateAttr(default=None)

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.name:
            self.name = DEFAULT_WEAPON_NAME
        self._parse_damage()

    def _parse_damage(self) -> DiceNode:
        self._damage_node = parse_expression(self.base_damage)
        self._damage_source = self.base_damage
        return self._damage_node

    @property
    def damage_node(self) -> DiceNode:
        """The parsed base damage, parsed again only if `base_damage` was replaced."""
        if self._damage_node is None or self._damage_source is not self.base_damage:
            return self._parse_damage()
        return self._damage_node

    # ===========================================================================
    # CONSTRUCTION
    # ===========================================================================

    @classmethod
    def from_descriptor(
        cls,
        descriptor: Mapping[str, Any] | None = None,
        engine: DiceEngine | None = None,
    ) -> "Weapon":
        """
        Builds a weapon from a plain descriptor.

        Both the camelCase keys (`critRange`, `critMultiplier`, `damage`,
        `enchant`, `bonus`) and the field names are understood.

        Args:
            descriptor (Mapping[str, Any] | None): The weapon descriptor.
            engine (DiceEngine | None): The engine used by the attacks.

        Returns:
            Weapon: The configured weapon.

        """
        descriptor = descriptor or {}
        if not isinstance(descriptor, Mapping):
            raise TypeError(
                f"Weapon descriptor must be a mapping, got {type(descriptor).__name__}"
            )

        def pick(*keys: str) -> Any:
            for key in keys:
                if descriptor.get(key) is not None:
                    return descriptor[key]
            return None

        crit_range = pick("critRange", "crit_range", "min_crit")
        crit_multiplier = pick("critMultiplier", "crit_multiplier")

        weapon = cls(
            name=pick("name") or DEFAULT_WEAPON_NAME,
            base_damage=pick("damage", "base_damage") or DEFAULT_BASE_DAMAGE,
            enchantments=_build_bonuses(pick("enchant", "enchantments"), "enchant"),
            bonuses=_build_bonuses(pick("bonus", "bonuses"), "bonus"),
            engine=engine,
        )
        if crit_range is not None or crit_multiplier is not None:
            weapon.crit(
                crit_range if crit_range is not None else weapon.min_crit,
                crit_multiplier,
            )
        return weapon

    # ===========================================================================
    # CONFIGURATION
    # ===========================================================================

    def crit(self, crit_range: Any, multiplier: int | None = None) -> "Weapon":
        """
        Sets the critical range and, optionally, the multiplier.

        All of the following set a range of 18-20: ``18``, ``'18'``,
        ``'18-20'``, ``[18]``, ``{'min': '18'}``, ``{'minimum': 18}``.

        Args:
            crit_range (Any): One of the representations of a critical range.
            multiplier (int | None): The new multiplier, kept when omitted.

        Returns:
            Weapon: This weapon.

        Raises:
            InvalidCritRange: If no minimum in [2, 20] can be extracted, or the
                multiplier is not an integer >= 1.

        """
        min_crit = parse_crit_range(crit_range)
        if multiplier is not None:
            multiplier = require_int_in_range(
                multiplier,
                "Crit multiplier",
                InvalidCritRange,
                1,
                context={"weapon": self.name},
            )
            self.crit_multiplier = multiplier
        self.min_crit = min_crit
        return self

    def enchant(self, descriptor: Any, bonus: Any = None) -> "Weapon":
        """
        Adds an enchantment to the weapon.

        Args:
            descriptor (Any): Either the damage type (Sonic, Acid, Fire, ...) or
                a mapping with `type` and `bonus`.
            bonus (Any): The dice expression, only with a type descriptor.

        Returns:
            Weapon: This weapon.

        """
        self.enchantments.append(Bonus.from_descriptor(descriptor, bonus))
        return self

    def bonus(self, descriptor: Any, bonus: Any = None) -> "Weapon":
        """
        Adds a bonus to the weapon.

        Args:
            descriptor (Any): Either the damage type or a mapping with `type`
                and `bonus`.
            bonus (Any): The dice expression, only with a type descriptor.

        Returns:
            Weapon: This weapon.

        """
        self.bonuses.append(Bonus.from_descriptor(descriptor, bonus))
        return self

    # ===========================================================================
    # SIMULATION
    # ===========================================================================

    def get_engine(self) -> DiceEngine:
        """Returns the engine used by the attacks."""
        return self.engine or get_default_engine()

    def is_critical(self, attack_roll: int) -> bool:
        """Checks whether a d20 roll falls in the critical range."""
        return attack_roll >= self.min_crit

    def attack(self, max_roll: bool = False, crit: bool = False) -> AttackResult:
        """
        Simulates one attack.

        A forced roll (`max_roll` or `crit`) always lands a natural 20 and is
        never counted in `crit_count`.

        Args:
            max_roll (bool): Assume every die shows its highest face.
            crit (bool): Force a critical hit.

        Returns:
            AttackResult: The damage dealt, by damage type.

        """
        engine = self.get_engine()
        forced = max_roll or crit

        attack_roll = engine.d20(1, forced)
        multiplier = self.crit_multiplier if self.is_critical(attack_roll) else 1

        result: AttackResult = {
            PHYSICAL_DAMAGE: engine.evaluate(self.damage_node, max_roll) * multiplier
        }
        for extra in [*self.enchantments, *self.bonuses]:
            roll = extra.evaluate(max_roll, engine)
            result[roll.type] = result.get(roll.type, 0) + roll.value * multiplier

        # Counted last, so a failed evaluation leaves the counter untouched.
        if multiplier > 1 and not forced:
            self.crit_count += 1
        return result

    def get_max_damage(self) -> AttackResult:
        """Returns the best-case damage of one attack."""
        return self.attack(max_roll=True)

    def __str__(self) -> str:
        extras = ", ".join(str(extra) for extra in [*self.enchantments, *self.bonuses])
        sheet = (
            f"{self.name} ({self.damage_node}, "
            f"crit {self.min_crit}-20 x{self.crit_multiplier})"
        )
        return f"{sheet} [{extras}]" if extras else sheet


def parse_crit_range(crit_range: Any) -> int:
    """
    Extracts the lowest critical roll from a critical range.

    Args:
        crit_range (Any): A number, a numeric or hyphenated string, a
            non-empty sequence, or a mapping with `min`/`minimum`.

    Returns:
        int: The minimum critical roll, in [2, 20].

    Raises:
        InvalidCritRange: If no usable minimum can be extracted.

    """
    context = {"crit_range": crit_range}
    if isinstance(crit_range, bool) or crit_range is None:
        raise fail(InvalidCritRange, f"Invalid crit range: {crit_range!r}", context)
    if isinstance(crit_range, (int, float)):
        return require_int_in_range(
            crit_range,
            "Crit range minimum",
            InvalidCritRange,
            MIN_CRIT_LOWER_BOUND,
            MIN_CRIT_UPPER_BOUND,
            context,
        )
    if isinstance(crit_range, str):
        text = crit_range.strip()
        # Only the lower bound of a range such as '18-20' is used.
        lower, _, _ = text.partition("-")
        try:
            value = int(lower.strip())
        except ValueError:
            raise fail(
                InvalidCritRange, f"Invalid crit range: {crit_range!r}", context
            ) from None
        return parse_crit_range(value)
    if isinstance(crit_range, Mapping):
        value = crit_range.get("min")
        if value is None:
            value = crit_range.get("minimum")
        return parse_crit_range(value)
    if isinstance(crit_range, Sequence) and crit_range:
        return parse_crit_range(crit_range[0])
    raise fail(InvalidCritRange, f"Invalid crit range: {crit_range!r}", context)


def _build_bonuses(descriptors: Any, field_name: str) -> list[Bonus]:
    """
    Builds the bonuses listed in a weapon descriptor.

    Args:
        descriptors (Any): A list of bonus descriptors, or None.
        field_name (str): Name of the descriptor field, for error messages.

    Returns:
        list[Bonus]: The normalized bonuses.

    """
    if descriptors is None:
        return []
    if not isinstance(descriptors, (list, tuple)):
        raise fail(
            InvalidBonusDescriptor,
            f"Weapon field '{field_name}' must be a list of bonus descriptors",
            {"field": field_name, "value": descriptors},
        )
    return [Bonus.from_descriptor(descriptor) for descriptor in descriptors]
