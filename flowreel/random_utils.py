"""
Seeded random stream for procedural generation. Same seed → same sequence on every host.
Mulberry32 over unsigned 32-bit arithmetic; every intermediate is masked so results never
depend on the platform word size.
"""
from typing import Callable

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0


def normalize_seed(seed: int) -> int:
    """Fold any integer (negative or oversized) into the uint32 range."""
    return int(seed) & _MASK32


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits of the product)."""
    return (a * b) & _MASK32


class SeededRandom:
    """
    Stateful, infinite stream of floats in [0, 1).
    Not thread-safe: one consumer per instance.
    """

    __slots__ = ("seed", "_state")

    def __init__(self, seed: int):
        self.seed = normalize_seed(seed)
        self._state = self.seed

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        t &= _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    __call__ = next

    def take(self, count: int) -> list[float]:
        """Draw the next `count` values (convenience for tests and previews)."""
        return [self.next() for _ in range(count)]


def create_seeded_random(seed: int) -> Callable[[], float]:
    """Return a zero-argument callable producing the seeded stream."""
    return SeededRandom(seed)
