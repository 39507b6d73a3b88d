"""
Deterministic hashing and noise primitives.

Everything here is a pure function of its arguments and uses integer
arithmetic for the random part, so the same seed produces the same values
on every machine.
"""

import math
from typing import Any, Sequence, Union

import numpy as np


Seed = Union[int, float]

_MASK32 = 0xFFFFFFFF
_TWO_32 = 4294967296.0

# Hash channels keep independent shapes from sharing perturbations
CHANNELS = {
    "green": 1,
    "fairway": 2,
    "water": 3,
    "tee": 4,
    "bunker": 5,
    "obstacles": 6,
    "color": 7,
}


def seed_to_int(seed: Seed) -> int:
    """
    Map a numeric seed to a 32-bit integer.

    Integral values map to themselves (mod 2^32). Fractional seeds such as
    the [0, 1) values produced by a uniform random source are scaled by 2^32,
    which is exact in binary floating point.
    """

    if isinstance(seed, bool):
        raise TypeError("Seed must be numeric, not bool")

    if isinstance(seed, (int, np.integer)):
        return int(seed) & _MASK32

    value = float(seed)
    if not math.isfinite(value):
        raise ValueError(f"Seed must be finite, got {seed!r}")

    if value.is_integer():
        return int(value) & _MASK32

    return math.floor(value * _TWO_32) & _MASK32


def _mix32(x: int) -> int:
    """32-bit avalanche mix (lowbias32)."""

    x &= _MASK32
    x ^= x >> 16
    x = (x * 0x7FEB352D) & _MASK32
    x ^= x >> 15
    x = (x * 0x846CA68B) & _MASK32
    x ^= x >> 16
    return x


def hash_u32(seed: Seed, channel: int, index: int) -> int:
    """Hash (seed, channel, index) to an unsigned 32-bit integer."""

    h = _mix32(seed_to_int(seed) ^ ((channel * 0x9E3779B9) & _MASK32))
    return _mix32(h + ((index * 0x85EBCA6B) & _MASK32) + 0x27D4EB2D)


def hash_unit(seed: Seed, channel: int, index: int) -> float:
    """Uniform value in [0, 1) for (seed, channel, index)."""
    return hash_u32(seed, channel, index) / _TWO_32


def hash_signed(seed: Seed, channel: int, index: int) -> float:
    """Uniform value in [-1, 1) for (seed, channel, index)."""
    return hash_unit(seed, channel, index) * 2.0 - 1.0


class SeededStream:
    """
    Sequential random source backed by the shape hash.

    Draw ``n`` is ``hash_unit(seed, channel, n)``, so two streams with the
    same seed and channel yield identical sequences. Implements the subset of
    the ``random.Random`` interface the obstacle engine uses.
    """

    def __init__(self, seed: Seed, channel: int = CHANNELS["obstacles"]):
        self.seed = seed
        self.channel = channel
        self._counter = 0

    def random(self) -> float:
        value = hash_unit(self.seed, self.channel, self._counter)
        self._counter += 1
        return value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        """Integer in [a, b], both inclusive."""
        return min(b, a + int(self.random() * (b - a + 1)))

    def choice(self, seq: Sequence[Any]) -> Any:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[min(len(seq) - 1, int(self.random() * len(seq)))]


def value_noise_2d(x: np.ndarray, z: np.ndarray, seed: int) -> np.ndarray:
    """
    Smooth 2D value noise in [-1, 1].

    Lattice values come from an integer hash of the cell coordinates and are
    blended with smoothstep-weighted bilinear interpolation.
    """

    x = np.asarray(x, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    seed = seed_to_int(seed)

    # Grid coordinates
    x0 = np.floor(x).astype(np.int64)
    z0 = np.floor(z).astype(np.int64)
    x1 = x0 + 1
    z1 = z0 + 1

    # Fractional parts
    fx = x - x0
    fz = z - z0

    # Smooth interpolation
    u = fx * fx * (3 - 2 * fx)
    v = fz * fz * (3 - 2 * fz)

    def hash2d(ix, iz):
        h = (ix * 374761393 + iz * 668265263 + seed * 1664525) % 2147483647
        return (h / 2147483647.0) * 2.0 - 1.0

    c00 = hash2d(x0, z0)
    c10 = hash2d(x1, z0)
    c01 = hash2d(x0, z1)
    c11 = hash2d(x1, z1)

    top = c00 + u * (c10 - c00)
    bottom = c01 + u * (c11 - c01)

    return top + v * (bottom - top)
