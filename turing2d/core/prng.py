"""
Seeded pseudo-random stream.

Linear congruential generator over a 32-bit unsigned state:

    state <- (state * 1664525 + 1013904223) mod 2^32
    value  = state / 2^32

The constants and the order in which values are drawn define the
procedural content of a program, so two streams built from the same
seed must always produce the same sequence.
"""

from __future__ import annotations

MULTIPLIER = 1664525
INCREMENT = 1013904223
MODULUS = 2 ** 32


class PseudoRandomStream:
    """
    Deterministic generator of values in [0, 1).

    Example:
        stream = PseudoRandomStream(42)
        a = stream.next()
        b = PseudoRandomStream(42).next()
        assert a == b
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int = 0):
        self._seed = int(seed) % MODULUS
        self._state = self._seed

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> int:
        """Current internal 32-bit state."""
        return self._state

    def next(self) -> float:
        """Advance the stream and return the next value in [0, 1)."""
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        return self._state / MODULUS

    def next_int(self, bound: int) -> int:
        """Draw one value and scale it to an integer in [0, bound)."""
        return int(self.next() * bound)

    def copy(self) -> "PseudoRandomStream":
        """Independent stream positioned at the same point of the sequence."""
        other = PseudoRandomStream(self._seed)
        other._state = self._state
        return other

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next()

    def __repr__(self) -> str:
        return f"PseudoRandomStream(seed={self._seed}, state={self._state})"
