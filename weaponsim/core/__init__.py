"""
Core system module for the weapon simulator.

This module contains the fundamental components of the simulator: constants,
errors, the random source and the dice parser.
"""

from .constants import (
    PHYSICAL_DAMAGE,
    TOTAL_DAMAGE,
)
from .dice_parser import (
    DiceEngine,
    DiceSum,
    DiceTerm,
    FlatValue,
    get_default_engine,
    parse_expression,
    set_default_engine,
)
from .error_handling import (
    InvalidBonusDescriptor,
    InvalidCritRange,
    InvalidDiceExpression,
    RandomUnavailable,
    WeaponSimError,
)
from .random_source import (
    ByteProvider,
    RandomSource,
    SeededByteProvider,
    SystemByteProvider,
)

__all__ = [
    # Import from constants.py
    "PHYSICAL_DAMAGE",
    "TOTAL_DAMAGE",
    # Import from dice_parser.py
    "DiceEngine",
    "DiceSum",
    "DiceTerm",
    "FlatValue",
    "get_default_engine",
    "parse_expression",
    "set_default_engine",
    # Import from error_handling.py
    "InvalidBonusDescriptor",
    "InvalidCritRange",
    "InvalidDiceExpression",
    "RandomUnavailable",
    "WeaponSimError",
    # Import from random_source.py
    "ByteProvider",
    "RandomSource",
    "SeededByteProvider",
    "SystemByteProvider",
]
