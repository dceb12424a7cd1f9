"""
Weapon damage simulator.

Simulates dice-based attacks with critical hits and additive bonus damage,
and aggregates many simulated attacks into damage statistics.
"""

from weaponsim.combat import Bonus, BonusRoll, Stats, WeaponReport
from weaponsim.core import DiceEngine, RandomSource
from weaponsim.items import Weapon

__all__ = [
    "Bonus",
    "BonusRoll",
    "DiceEngine",
    "RandomSource",
    "Stats",
    "Weapon",
    "WeaponReport",
]
