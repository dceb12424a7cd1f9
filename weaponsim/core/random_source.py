"""
Random source module for the weapon simulator.

Buffers cryptographically strong random bytes and serves bounded draws from
them, one byte per draw. The byte supply is pluggable so simulations can be
made reproducible or isolated from one another.
"""

import os
import random
from typing import Protocol

from weaponsim.core.constants import BUFFER_LENGTH
from weaponsim.core.error_handling import RandomUnavailable
from weaponsim.core.logging import get_logger

logger = get_logger(__name__)


class ByteProvider(Protocol):
    """Anything able to fill a buffer with random bytes."""

    def fill(self, buffer: bytearray) -> None: ...


class SystemByteProvider:
    """Byte provider backed by the operating system CSPRNG."""

    def fill(self, buffer: bytearray) -> None:
        try:
            buffer[:] = os.urandom(len(buffer))
        except (OSError, NotImplementedError) as e:
            raise RandomUnavailable(f"System random source unavailable: {e}") from e


class SeededByteProvider:
    """
    Deterministic byte provider for reproducible simulations.

    Not cryptographically strong. It is only used when a seed is explicitly
    requested.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def fill(self, buffer: bytearray) -> None:
        buffer[:] = self._random.randbytes(len(buffer))


class RandomSource:
    """
    Buffered reader of random bytes.

    Attributes:
        provider (ByteProvider): Supplier of the random bytes.
        buffer_length (int): Number of bytes fetched per refill.
    """

    def __init__(
        self,
        provider: ByteProvider | None = None,
        buffer_length: int = BUFFER_LENGTH,
    ) -> None:
        if buffer_length <= 0:
            raise ValueError(f"buffer_length must be positive, got {buffer_length}")
        self.provider: ByteProvider = provider or SystemByteProvider()
        self.buffer_length = buffer_length
        self._buffer = bytearray(buffer_length)
        self._cursor = 0
        self.reset()

    @property
    def cursor(self) -> int:
        """Index of the next byte to be served."""
        return self._cursor

    def reset(self) -> None:
        """Refills the buffer and rewinds the cursor."""
        self.provider.fill(self._buffer)
        if len(self._buffer) != self.buffer_length:
            raise RandomUnavailable(
                f"Byte provider returned {len(self._buffer)} bytes, "
                f"expected {self.buffer_length}"
            )
        self._cursor = 0
        logger.debug("Refilled random buffer with %d bytes", self.buffer_length)

    def read(self, bound: int | None = None) -> int:
        """
        Reads one random value.

        Args:
            bound (int | None): Inclusive maximum value.

        Returns:
            int: A value in [1, bound] when bound is a positive integer,
            otherwise the raw byte in [0, 255].

        """
        if self._cursor >= self.buffer_length:
            self.reset()
        value = self._buffer[self._cursor]
        self._cursor += 1
        if isinstance(bound, int) and not isinstance(bound, bool) and bound > 0:
            return value % bound + 1
        return value
