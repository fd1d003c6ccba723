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
Confinement Potentials

Closed-form external potentials V(x) pulling each particle toward a region,
independently of the other particles.

| Class                  | V(x)                    | ∇V(x)                      |
|------------------------|-------------------------|----------------------------|
| HarmonicPotential      | ½k|x|²                  | k·x                        |
| QuadraticConfinement   | ½α₁|x| + α₂|x|²         | (α₁/(2|x|))·x + 2α₂·x      |
| DoubleWellPotential    | ¼(|x|² - 1)²            | (|x|² - 1)·x               |
| AnisotropicConfinement | Σ_k a_k x_k²            | 2a ⊙ x                     |

QuadraticConfinement's gradient has a 1/|x| singularity at the origin; |x|
is floor-clamped to DISTANCE_FLOOR before dividing.
"""

from typing import Optional, Sequence

import numpy as np

from .base import DISTANCE_FLOOR, ConfinementPotential, squared_norm


class HarmonicPotential(ConfinementPotential):
    """
    Isotropic harmonic trap V(x) = ½k|x|².

    Parameters
    ----------
    k : float, default=1.0
        Stiffness
    """

    def __init__(self, k: float = 1.0):
        self.k = float(k)

    def evaluate(self, x):
        x = np.asarray(x, dtype=np.float64)
        return 0.5 * self.k * squared_norm(x)

    def gradient(self, x, out: Optional[np.ndarray] = None):
        x = np.asarray(x, dtype=np.float64)
        return np.multiply(self.k, x, out=out)

    def __repr__(self) -> str:
        return f"HarmonicPotential(k={self.k})"


class QuadraticConfinement(ConfinementPotential):
    """
    Linear-plus-quadratic radial confinement V(x) = ½α₁|x| + α₂|x|².

    With α₁ < 0 the potential has a ring-shaped minimum at
    |x| = -α₁/(4α₂).

    Parameters
    ----------
    alpha1 : float, default=-1.0
        Coefficient of the linear term
    alpha2 : float, default=2.0
        Coefficient of the quadratic term
    """

    def __init__(self, alpha1: float = -1.0, alpha2: float = 2.0):
        self.alpha1 = float(alpha1)
        self.alpha2 = float(alpha2)

    def evaluate(self, x):
        x = np.asarray(x, dtype=np.float64)
        r_sq = squared_norm(x)
        return 0.5 * self.alpha1 * np.sqrt(r_sq) + self.alpha2 * r_sq

    def gradient(self, x, out: Optional[np.ndarray] = None):
        x = np.asarray(x, dtype=np.float64)
        r = np.maximum(np.sqrt(squared_norm(x)), DISTANCE_FLOOR)
        c1 = 0.5 * self.alpha1 / r
        c2 = 2.0 * self.alpha2

        out = np.multiply(c1[..., np.newaxis], x, out=out)
        out += c2 * x
        return out

    def __repr__(self) -> str:
        return f"QuadraticConfinement(alpha1={self.alpha1}, alpha2={self.alpha2})"


class DoubleWellPotential(ConfinementPotential):
    """
    Radial double well V(x) = ¼(|x|² - 1)².

    Minimum on the unit sphere, local maximum at the origin.
    """

    def evaluate(self, x):
        x = np.asarray(x, dtype=np.float64)
        return 0.25 * (squared_norm(x) - 1.0) ** 2

    def gradient(self, x, out: Optional[np.ndarray] = None):
        x = np.asarray(x, dtype=np.float64)
        c = squared_norm(x) - 1.0
        return np.multiply(c[..., np.newaxis], x, out=out)

    def __repr__(self) -> str:
        return "DoubleWellPotential()"


class AnisotropicConfinement(ConfinementPotential):
    """
    Axis-aligned quadratic well V(x) = Σ_k a_k x_k² (no cross terms).

    Parameters
    ----------
    a : Sequence[float]
        Per-axis coefficients; their count fixes the dimension

    Raises
    ------
    ValueError
        If ``a`` is empty
    """

    def __init__(self, a: Sequence[float]):
        a = np.array(a, dtype=np.float64).reshape(-1)
        if a.size == 0:
            raise ValueError("AnisotropicConfinement needs at least one coefficient")
        self.a = a
        self.dim = a.shape[0]

    def evaluate(self, x):
        x = np.asarray(x, dtype=np.float64)
        return np.sum(self.a * x * x, axis=-1)

    def gradient(self, x, out: Optional[np.ndarray] = None):
        x = np.asarray(x, dtype=np.float64)
        return np.multiply(2.0 * self.a, x, out=out)

    def __repr__(self) -> str:
        return f"AnisotropicConfinement(a={self.a.tolist()})"
