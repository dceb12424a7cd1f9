"""
Items module for the weapon simulator.
"""

from .weapon import AttackResult, Weapon, parse_crit_range

__all__ = [
    "AttackResult",
    "Weapon",
    "parse_crit_range",
]
