"""
Shared fixtures for the weapon simulator tests.
"""

import pytest

from weaponsim.core.dice_parser import DiceEngine
from weaponsim.core.random_source import RandomSource


class ScriptedByteProvider:
    """Byte provider that cycles through a fixed list of bytes."""

    def __init__(self, values: list[int]) -> None:
        self.values = list(values)
        self.fills = 0
        self._index = 0

    def fill(self, buffer: bytearray) -> None:
        for i in range(len(buffer)):
            buffer[i] = self.values[self._index % len(self.values)]
            self._index += 1
        self.fills += 1


@pytest.fixture
def make_engine():
    """
    Builds a DiceEngine whose draws follow the given bytes.

    A byte `b` read with bound `m` yields `b % m + 1`, so byte 0 always rolls
    a 1 and byte 19 always rolls a natural 20 on the attack die.
    """

    def _make(*values: int, buffer_length: int = 256) -> DiceEngine:
        provider = ScriptedByteProvider(list(values))
        return DiceEngine(RandomSource(provider, buffer_length=buffer_length))

    return _make


@pytest.fixture
def low_engine(make_engine):
    """Every die rolls a 1, so attacks never crit."""
    return make_engine(0)


@pytest.fixture
def crit_engine(make_engine):
    """Every d20 rolls a natural 20."""
    return make_engine(19)


@pytest.fixture
def scripted_provider():
    """Factory of providers cycling through the given bytes."""

    def _make(*values: int) -> ScriptedByteProvider:
        return ScriptedByteProvider(list(values))

    return _make
