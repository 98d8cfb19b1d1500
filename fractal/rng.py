from __future__ import annotations

import math

MASK32 = 0xFFFFFFFF
DEFAULT_SEED = 1


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def to_uint32_seed(seed: float | int) -> int:
    """Normalize an arbitrary seed to a non-zero 32-bit state.

    Non-finite seeds (and seeds that wrap to 0) become ``DEFAULT_SEED``.
    Floats are floored, negative values wrap modulo 2**32.
    """

    try:
        value = float(seed)
    except (TypeError, ValueError):
        return DEFAULT_SEED
    if not math.isfinite(value):
        return DEFAULT_SEED
    if isinstance(seed, int):
        normalized = seed & MASK32
    else:
        normalized = math.floor(value) & MASK32
    return normalized or DEFAULT_SEED


class PseudoRandomSource:
    """mulberry32 generator producing floats in [0, 1).

    Integer-only arithmetic, so a given seed yields the same sequence on every
    platform.
    """

    def __init__(self, seed: float | int = DEFAULT_SEED):
        self._state = DEFAULT_SEED
        self.seed(seed)

    def seed(self, seed: float | int) -> int:
        self._state = to_uint32_seed(seed)
        return self._state

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return (t ^ (t >> 14)) & MASK32

    def next(self) -> float:
        return self.next_uint32() / 4294967296.0

    def __call__(self) -> float:
        return self.next()
