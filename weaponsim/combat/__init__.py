"""
Combat module for the weapon simulator.

This module handles bonus damage and the statistics gathered over repeated
simulated attacks.
"""

from .bonus import Bonus, BonusRoll
from .stats import Stats, WeaponReport, calc_averages, reduce_results

__all__ = [
    "Bonus",
    "BonusRoll",
    "Stats",
    "WeaponReport",
    "calc_averages",
    "reduce_results",
]
