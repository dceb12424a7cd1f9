"""
Statistics module for the weapon simulator.

Runs repeated attacks against registered weapons, keeps every result, and
reduces the histories into average damage per type, best-case damage and
critical-hit rates.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from weaponsim.core.constants import DEFAULT_ITERATIONS, TOTAL_DAMAGE
from weaponsim.core.logging import get_logger
from weaponsim.items.weapon import AttackResult, Weapon

logger = get_logger(__name__)


# ---- Reducers ----
def reduce_results(results: Iterable[AttackResult]) -> dict[str, int | float]:
    """
    Sums a sequence of attack results type by type.

    Args:
        results (Iterable[AttackResult]): The attack results.

    Returns:
        dict[str, int | float]: The total damage dealt for each damage type.

    """
    reduced: dict[str, int | float] = {}
    for result in results:
        for damage_type, amount in result.items():
            reduced[damage_type] = reduced.get(damage_type, 0) + amount
    return reduced


def calc_averages(reduced: Mapping[str, int | float], iterations: int) -> dict[str, float]:
    """
    Divides summed damage by the number of iterations.

    Args:
        reduced (Mapping[str, int | float]): Summed damage per type.
        iterations (int): The number of attacks the sums cover.

    Returns:
        dict[str, float]: The average damage per type, plus the total of
        those averages under "Total Damage".

    Raises:
        ValueError: If iterations is not positive.

    """
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")
    averages = {
        damage_type: amount / iterations for damage_type, amount in reduced.items()
    }
    averages[TOTAL_DAMAGE] = sum(averages.values())
    return averages


class WeaponReport(BaseModel):
    """Statistics of one weapon over a simulation."""

    model_config = ConfigDict(populate_by_name=True)

    max_damage: dict[str, float] = Field(
        alias="max",
        description="Best-case damage of a single attack",
    )
    crit_average: dict[str, float] = Field(
        alias="critAvg",
        description="Average damage of a forced critical hit",
    )
    average: dict[str, float] = Field(
        alias="avg",
        description="Average damage of an attack",
    )
    crit_rate_percent: float = Field(
        alias="critRatePercent",
        description="Share of genuine critical hits, in percent",
    )


# ---- Aggregator ----
class Stats:
    """
    Weapon statistics evaluator.

    Attributes:
        weapons (dict[str, Weapon]): Registered weapons, by name.
        attacks (dict[str, list[AttackResult]]): Unforced attack history.
        crit_attacks (dict[str, list[AttackResult]]): Forced critical history.
        iterations (int): Total iterations run so far.
    """

    def __init__(self, weapons: Any = None) -> None:
        self.weapons: dict[str, Weapon] = {}
        self.attacks: dict[str, list[AttackResult]] = {}
        self.crit_attacks: dict[str, list[AttackResult]] = {}
        self.iterations = 0
        if weapons is not None:
            self.register(weapons)

    def register(self, weapons: Any) -> "Stats":
        """
        Registers a weapon or weapons for analysis.

        Args:
            weapons (Any): A Weapon, a sequence of weapons, or a mapping whose
                values are weapons. Every weapon is registered under its own
                name; registering the same weapon again keeps its history.

        Returns:
            Stats: This aggregator.

        Raises:
            TypeError: If anything other than a weapon is supplied.

        """
        if isinstance(weapons, Weapon):
            self._register_one(weapons.name, weapons)
        elif isinstance(weapons, Mapping):
            for weapon in weapons.values():
                self._check_weapon(weapon)
                self._register_one(weapon.name, weapon)
        elif isinstance(weapons, (list, tuple)):
            for weapon in weapons:
                self._check_weapon(weapon)
                self._register_one(weapon.name, weapon)
        else:
            raise TypeError(
                f"Expected a Weapon or a collection of weapons, got {type(weapons).__name__}"
            )
        return self

    @staticmethod
    def _check_weapon(weapon: Any) -> None:
        if not isinstance(weapon, Weapon):
            raise TypeError(f"Expected a Weapon, got {type(weapon).__name__}")

    def _register_one(self, name: str, weapon: Weapon) -> None:
        registered = self.weapons.get(name)
        if registered is weapon:
            return
        if registered is not None:
            log_warning(
                f"Replacing weapon '{name}', its attack history is discarded",
                {"weapon": name, "context": "stats_registration"},
            )
        self.weapons[name] = weapon
        self.attacks[name] = []
        self.crit_attacks[name] = []

    def run(self, iterations: int = DEFAULT_ITERATIONS) -> "Stats":
        """
        Runs the simulation.

        Every weapon performs `iterations` unforced attacks and as many forced
        critical attacks.

        Args:
            iterations (int): Number of iterations.

        Returns:
            Stats: This aggregator.

        """
        if not isinstance(iterations, int) or isinstance(iterations, bool) or iterations < 0:
            raise ValueError(f"iterations must be a non-negative integer, got {iterations!r}")

        # A run is all or nothing: histories, crit counts and the iteration
        # counter only move once every weapon has finished.
        crit_counts = {name: weapon.crit_count for name, weapon in self.weapons.items()}
        new_results: dict[str, tuple[list[AttackResult], list[AttackResult]]] = {}
        try:
            for name, weapon in self.weapons.items():
                attacks: list[AttackResult] = []
                crit_attacks: list[AttackResult] = []
                for _ in range(iterations):
                    attacks.append(weapon.attack())
                    crit_attacks.append(weapon.attack(False, True))
                new_results[name] = (attacks, crit_attacks)
                logger.debug("Simulated %d attacks with %s", iterations, name)
        except Exception:
            for name, weapon in self.weapons.items():
                weapon.crit_count = crit_counts[name]
            raise

        for name, (attacks, crit_attacks) in new_results.items():
            self.attacks[name].extend(attacks)
            self.crit_attacks[name].extend(crit_attacks)
        self.iterations += iterations
        return self

    def weapon_report(self, name: str) -> WeaponReport:
        """
        Reduces the history of one weapon.

        Args:
            name (str): The registered name of the weapon.

        Returns:
            WeaponReport: The statistics of the weapon.

        """
        if self.iterations <= 0:
            raise ValueError("No iterations have been run")
        weapon = self.weapons[name]
        return WeaponReport(
            max_damage=calc_averages(weapon.get_max_damage(), 1),
            crit_average=calc_averages(
                reduce_results(self.crit_attacks[name]), self.iterations
            ),
            average=calc_averages(reduce_results(self.attacks[name]), self.iterations),
            crit_rate_percent=weapon.crit_count / self.iterations * 100,
        )

    def report(self) -> dict[str, WeaponReport]:
        """
        Reduces the history of every weapon.

        Returns:
            dict[str, WeaponReport]: The statistics, by weapon name.

        Raises:
            ValueError: If no iterations have been run.

        """
        return {name: self.weapon_report(name) for name in self.weapons}

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Returns the report as plain data, keyed `max`, `critAvg`, `avg`, `critRatePercent`."""
        return {
            name: report.model_dump(by_alias=True)
            for name, report in self.report().items()
        }
