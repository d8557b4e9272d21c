"""Deterministic pseudo-random number generator used for stroke jitter.

A 64-bit linear congruential generator. Each element gets its own
freshly seeded instance, so output only depends on the element seed
and never on global state.

Example:
    >>> rng = LcgRng(7)
    >>> a = [rng.next_float() for _ in range(3)]
    >>> rng = LcgRng(7)
    >>> a == [rng.next_float() for _ in range(3)]
    True
"""

from __future__ import annotations

_MASK64 = 0xFFFFFFFFFFFFFFFF
_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000

# Golden ratio constant used to spread small seeds across the state
_SEED_MIX = 0x9E3779B97F4A7C15
# Replacement for an all-zero state
_ZERO_STATE = 0xDEADBEEFCAFEBABE

# Knuth's MMIX multiplier
_MULTIPLIER = 6364136223846793005
_INCREMENT = 1

# 53 bits of mantissa
_FLOAT_SHIFT = 11
_FLOAT_SCALE = float(1 << 53)


def wrap_seed(seed: int) -> int:
    """Wrap an integer seed to the signed 32-bit range."""
    seed &= _MASK32
    return seed - (1 << 32) if seed & _SIGN32 else seed


def offset_seed(seed: int, offset: int) -> int:
    """Add an offset to a seed using signed 32-bit wrapping arithmetic.

    Used to derive decorrelated seeds for secondary stroke passes
    (seed + 1, seed + 2, ...).
    """
    return wrap_seed(seed + offset)


class LcgRng:
    """Seeded linear congruential generator.

    Two generators created with the same seed produce
    identical sequences.
    """

    __slots__ = ('state',)

    state: int

    def __init__(self, seed: int) -> None:
        """Create a generator.

        Args:
            seed: Element seed. Treated as a signed 32-bit integer
                and sign extended to 64 bits before mixing.
        """
        state = (wrap_seed(seed) & _MASK64) ^ _SEED_MIX
        if state == 0:
            state = _ZERO_STATE
        self.state = state

    def next_u64(self) -> int:
        """Advance the generator and return the raw 64-bit state."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) & _MASK64
        return self.state

    def next_float(self) -> float:
        """Return a uniform float in [0, 1)."""
        return (self.next_u64() >> _FLOAT_SHIFT) / _FLOAT_SCALE

    def range(self, min_value: float, max_value: float) -> float:
        """Return a uniform float in [min_value, max_value).

        If `max_value` < `min_value` the result lies in
        (max_value, min_value].
        """
        return min_value + (max_value - min_value) * self.next_float()

    def __repr__(self) -> str:
        """String representation."""
        return f'LcgRng(state=0x{self.state:016x})'
