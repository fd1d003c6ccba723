# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Seeded Random Source - xoshiro128** with SplitMix32 Seeding

Reproducible uniform and standard-normal draws for particle simulations.
Every integrator owns its own generator, so simultaneous simulations with
different seeds never interfere.

Algorithm
---------
State: four 32-bit words (s0, s1, s2, s3).

Seeding (SplitMix32), repeated for i = 0..3:
    seed ← seed + 0x9E3779B9
    t    ← seed ^ (seed >> 16)
    t    ← t · 0x21F0AAAD
    t    ← t ^ (t >> 15)
    t    ← t · 0x735A2D97
    s_i  ← t ^ (t >> 15)

Output and transition (xoshiro128**):
    out  ← rotl(s1 · 5, 7) · 9
    t    ← s1 << 9
    s2 ^= s0; s3 ^= s1; s1 ^= s2; s0 ^= s3
    s2 ^= t;  s3 ← rotl(s3, 11)

All arithmetic is modulo 2³².

Normals come from the Box-Muller transform over exactly two uniforms:
    z = sqrt(-2·log(u1)) · cos(2π·u2)

Reproducibility
---------------
The draw sequence for a given seed is frozen at GENERATOR_VERSION. Any change
to seeding, output function or the normal transform must bump it.
"""

import math
from numbers import Integral
from typing import List

import numpy as np

GENERATOR_VERSION = 1

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x9E3779B9
_TWO_POW_32 = 4294967296.0
_TWO_PI = 2.0 * math.pi

# u1 is clamped before the logarithm; draws are multiples of 2**-32 so only
# an exact zero is affected
_LOG_FLOOR = 1e-30


def _rotl(x: int, k: int) -> int:
    return ((x << k) | (x >> (32 - k))) & _MASK32


def splitmix32(seed: int, n_words: int = 4) -> List[int]:
    """
    Expand an integer seed into ``n_words`` well-mixed 32-bit words.

    Nearby seeds produce unrelated words, so generators seeded with 1, 2, 3...
    do not start out correlated.

    Parameters
    ----------
    seed : int
        Any integer; reduced modulo 2**32 (negative seeds wrap)
    n_words : int
        Number of words to produce

    Returns
    -------
    List[int]
        Words in [0, 2**32)
    """
    state = seed & _MASK32
    words = []
    for _ in range(n_words):
        state = (state + _GOLDEN_GAMMA) & _MASK32
        t = state ^ (state >> 16)
        t = (t * 0x21F0AAAD) & _MASK32
        t ^= t >> 15
        t = (t * 0x735A2D97) & _MASK32
        t ^= t >> 15
        words.append(t)
    return words


class Xoshiro128StarStar:
    """
    Fast non-cryptographic generator with a 128-bit state.

    Parameters
    ----------
    seed : int
        Integer seed. Any value is accepted; it is reduced modulo 2**32.

    Raises
    ------
    TypeError
        If seed is not an integer

    Examples
    --------
    >>> rng = Xoshiro128StarStar(42)
    >>> rng.next_uint32()
    660444221
    >>> u = rng.uniform()          # in [0, 1)
    >>> z = rng.standard_normal()  # consumes two uniforms
    >>> buf = np.empty(6)
    >>> rng.fill_normal(buf)       # six successive normals, in order
    """

    def __init__(self, seed: int):
        if not isinstance(seed, Integral) or isinstance(seed, bool):
            raise TypeError(f"seed must be an integer, got {type(seed).__name__}")

        self.seed = int(seed)
        s = splitmix32(self.seed, 4)
        # an all-zero state is a fixed point of the transition
        if not any(s):
            s[0] = _GOLDEN_GAMMA
        self._s0, self._s1, self._s2, self._s3 = s

    @property
    def state(self) -> tuple:
        """Current four-word state (read-only copy)."""
        return (self._s0, self._s1, self._s2, self._s3)

    def next_uint32(self) -> int:
        """Advance the state and return the next raw 32-bit output."""
        s0, s1, s2, s3 = self._s0, self._s1, self._s2, self._s3

        result = (_rotl((s1 * 5) & _MASK32, 7) * 9) & _MASK32
        t = (s1 << 9) & _MASK32

        s2 ^= s0
        s3 ^= s1
        s1 ^= s2
        s0 ^= s3
        s2 ^= t
        s3 = _rotl(s3, 11)

        self._s0, self._s1, self._s2, self._s3 = s0, s1, s2, s3
        return result

    def uniform(self) -> float:
        """Uniform draw in [0, 1) with 32 bits of resolution."""
        return self.next_uint32() / _TWO_POW_32

    def standard_normal(self) -> float:
        """
        Standard normal draw via Box-Muller.

        Consumes exactly two uniform draws. The first uniform is clamped away
        from zero so the result is always finite.
        """
        u1 = self.uniform()
        u2 = self.uniform()
        return math.sqrt(-2.0 * math.log(max(u1, _LOG_FLOOR))) * math.cos(_TWO_PI * u2)

    def fill_normal(self, buffer: np.ndarray) -> np.ndarray:
        """
        Fill ``buffer`` in place with successive standard-normal draws.

        Element k (in C order) is the k-th draw, so filling one buffer of
        length n is identical to n calls of ``standard_normal``.

        Parameters
        ----------
        buffer : np.ndarray
            Writable float array of any shape

        Returns
        -------
        np.ndarray
            The same buffer
        """
        if not buffer.flags.c_contiguous:
            raise ValueError("fill_normal requires a C-contiguous buffer")

        flat = buffer.reshape(-1)
        draw = self.standard_normal
        for k in range(flat.shape[0]):
            flat[k] = draw()
        return buffer

    def __repr__(self) -> str:
        return f"Xoshiro128StarStar(seed={self.seed})"
