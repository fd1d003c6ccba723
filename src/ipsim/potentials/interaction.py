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
Interaction Potentials

Pairwise force laws Φ for interacting particle systems.

Radial (isotropic), Φ(r) with r = |x_i - x_j|:
- GaussianInteraction:    A·exp(-r²/(2s²))
- PiecewiseInteraction:   β₁·𝟙̃[0.5,1](r) + β₂·𝟙̃[1,2](r), smoothed
- InverseInteraction:     γ/(r + 1)
- MorsePotential:         D·(1 - exp(-a(r - r₀)))²
- LennardJonesPotential:  truncated and shifted 12-6 form

Vector (anisotropic), Φ(z) with z = x_i - x_j:
- AnisotropicGaussianInteraction: A·exp(-½ Σ_k z_k²/s_k²)

Smoothed Indicators
-------------------
A hard window 𝟙[lo,hi](r) has a delta-function derivative at both edges,
which an explicit SDE scheme cannot integrate. PiecewiseInteraction replaces
it by the soft window

    𝟙̃[lo,hi](r) = ½(tanh((r - lo)/ε) - tanh((r - hi)/ε))

    d𝟙̃/dr      = (1/(2ε))(sech²((r - lo)/ε) - sech²((r - hi)/ε))

so the force field is smooth everywhere with transition width ε.

Lennard-Jones Truncation
------------------------
    Φ(r) = 4ε((σ/ρ)¹² - (σ/ρ)⁶) - Φ_cut,   ρ = max(r, r_safe),  r < r_cut
    Φ(r) = 0,                                                     r ≥ r_cut

The shift Φ_cut makes Φ continuous at r_cut. Below r_safe = 0.7σ the
distance is clamped, so the repulsion saturates instead of diverging when
two particles nearly coincide; in that region the value is constant while
the returned force stays at its r_safe magnitude.
"""

from typing import Optional, Sequence

import numpy as np

from .base import RadialInteraction, VectorInteraction, write_or_return

SMOOTHING_WIDTH = 0.05
"""Default transition width ε of the smoothed piecewise interaction."""


class GaussianInteraction(RadialInteraction):
    """
    Gaussian bump Φ(r) = A·exp(-r²/(2s²)).

    Parameters
    ----------
    amplitude : float, default=1.0
        A; positive values repel, negative values attract
    width : float, default=1.0
        Length scale s (> 0)
    """

    def __init__(self, amplitude: float = 1.0, width: float = 1.0):
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self.amplitude = float(amplitude)
        self.width = float(width)

    def evaluate(self, r):
        r = np.asarray(r, dtype=np.float64)
        return self.amplitude * np.exp(-r * r / (2.0 * self.width * self.width))

    def gradient(self, r):
        r = np.asarray(r, dtype=np.float64)
        s2 = self.width * self.width
        return -self.amplitude * r / s2 * np.exp(-r * r / (2.0 * s2))

    def __repr__(self) -> str:
        return f"GaussianInteraction(amplitude={self.amplitude}, width={self.width})"


class PiecewiseInteraction(RadialInteraction):
    """
    Smoothed piecewise-constant interaction.

    Φ(r) = β₁ on roughly [0.5, 1], β₂ on roughly [1, 2], zero elsewhere, with
    tanh transitions of width ε at every edge.

    Parameters
    ----------
    beta1 : float, default=-3.0
        Level on the inner window (negative attracts)
    beta2 : float, default=2.0
        Level on the outer window
    eps : float, default=SMOOTHING_WIDTH
        Transition width ε (> 0)
    """

    inner_window = (0.5, 1.0)
    outer_window = (1.0, 2.0)

    def __init__(self, beta1: float = -3.0, beta2: float = 2.0, eps: float = SMOOTHING_WIDTH):
        if eps <= 0:
            raise ValueError(f"Smoothing width eps must be positive, got {eps}")
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.eps = float(eps)

    def smooth_indicator(self, r, lo: float, hi: float):
        """Soft window 𝟙̃[lo,hi](r)."""
        r = np.asarray(r, dtype=np.float64)
        return 0.5 * (np.tanh((r - lo) / self.eps) - np.tanh((r - hi) / self.eps))

    def smooth_indicator_gradient(self, r, lo: float, hi: float):
        """d𝟙̃[lo,hi]/dr."""
        r = np.asarray(r, dtype=np.float64)
        # cosh overflows to inf far from the edges; 1/inf is the correct 0
        with np.errstate(over="ignore"):
            sech2_lo = 1.0 / np.cosh((r - lo) / self.eps) ** 2
            sech2_hi = 1.0 / np.cosh((r - hi) / self.eps) ** 2
        return 0.5 / self.eps * (sech2_lo - sech2_hi)

    def evaluate(self, r):
        return (
            self.beta1 * self.smooth_indicator(r, *self.inner_window)
            + self.beta2 * self.smooth_indicator(r, *self.outer_window)
        )

    def gradient(self, r):
        return (
            self.beta1 * self.smooth_indicator_gradient(r, *self.inner_window)
            + self.beta2 * self.smooth_indicator_gradient(r, *self.outer_window)
        )

    def __repr__(self) -> str:
        return (
            f"PiecewiseInteraction(beta1={self.beta1}, beta2={self.beta2}, "
            f"eps={self.eps})"
        )


class InverseInteraction(RadialInteraction):
    """
    Φ(r) = γ/(r + 1), bounded at contact.

    Parameters
    ----------
    gamma : float, default=0.5
        Strength; positive values repel
    """

    def __init__(self, gamma: float = 0.5):
        self.gamma = float(gamma)

    def evaluate(self, r):
        r = np.asarray(r, dtype=np.float64)
        return self.gamma / (r + 1.0)

    def gradient(self, r):
        r = np.asarray(r, dtype=np.float64)
        return -self.gamma / ((r + 1.0) * (r + 1.0))

    def __repr__(self) -> str:
        return f"InverseInteraction(gamma={self.gamma})"


class MorsePotential(RadialInteraction):
    """
    Morse potential Φ(r) = D·(1 - exp(-a(r - r₀)))².

    Parameters
    ----------
    depth : float, default=0.5
        Well depth D
    stiffness : float, default=2.0
        Width parameter a
    r0 : float, default=0.8
        Equilibrium distance
    """

    def __init__(self, depth: float = 0.5, stiffness: float = 2.0, r0: float = 0.8):
        self.depth = float(depth)
        self.stiffness = float(stiffness)
        self.r0 = float(r0)

    def evaluate(self, r):
        r = np.asarray(r, dtype=np.float64)
        e = np.exp(-self.stiffness * (r - self.r0))
        return self.depth * (1.0 - e) ** 2

    def gradient(self, r):
        r = np.asarray(r, dtype=np.float64)
        e = np.exp(-self.stiffness * (r - self.r0))
        return 2.0 * self.depth * self.stiffness * (1.0 - e) * e

    def __repr__(self) -> str:
        return (
            f"MorsePotential(depth={self.depth}, stiffness={self.stiffness}, "
            f"r0={self.r0})"
        )


class LennardJonesPotential(RadialInteraction):
    """
    Truncated and shifted Lennard-Jones potential.

    Parameters
    ----------
    epsilon : float, default=0.5
        Well depth ε
    sigma : float, default=0.5
        Length scale σ (> 0)
    r_cut : float, default=2.5
        Cutoff radius; Φ and dΦ/dr are exactly 0 for r ≥ r_cut
    r_safe_factor : float, default=0.7
        Distances below r_safe_factor·σ are clamped to it

    Examples
    --------
    >>> lj = LennardJonesPotential()
    >>> float(lj.evaluate(2.5)), float(lj.gradient(3.0))
    (0.0, 0.0)
    """

    def __init__(
        self,
        epsilon: float = 0.5,
        sigma: float = 0.5,
        r_cut: float = 2.5,
        r_safe_factor: float = 0.7,
    ):
        if sigma <= 0:
            raise ValueError(f"sigma must be positive, got {sigma}")
        if r_cut <= 0:
            raise ValueError(f"r_cut must be positive, got {r_cut}")
        if r_safe_factor <= 0:
            raise ValueError(f"r_safe_factor must be positive, got {r_safe_factor}")

        self.epsilon = float(epsilon)
        self.sigma = float(sigma)
        self.r_cut = float(r_cut)
        self.r_safe = float(r_safe_factor) * self.sigma

        sr6_cut = (self.sigma / self.r_cut) ** 6
        self.shift = 4.0 * self.epsilon * (sr6_cut ** 2 - sr6_cut)

    def _sr6(self, r):
        rc = np.maximum(r, self.r_safe)
        return rc, (self.sigma / rc) ** 6

    def evaluate(self, r):
        r = np.asarray(r, dtype=np.float64)
        _, sr6 = self._sr6(r)
        value = 4.0 * self.epsilon * (sr6 * sr6 - sr6) - self.shift
        return np.where(r >= self.r_cut, 0.0, value)

    def gradient(self, r):
        r = np.asarray(r, dtype=np.float64)
        rc, sr6 = self._sr6(r)
        value = (4.0 * self.epsilon / rc) * (-12.0 * sr6 * sr6 + 6.0 * sr6)
        return np.where(r >= self.r_cut, 0.0, value)

    def __repr__(self) -> str:
        return (
            f"LennardJonesPotential(epsilon={self.epsilon}, sigma={self.sigma}, "
            f"r_cut={self.r_cut}, r_safe={self.r_safe})"
        )


class AnisotropicGaussianInteraction(VectorInteraction):
    """
    Direction-dependent Gaussian Φ(z) = A·exp(-½ Σ_k z_k²/s_k²).

    Parameters
    ----------
    amplitude : float, default=2.0
        A
    scales : Sequence[float], default=(0.5, 1.5)
        Per-axis length scales s_k (> 0); their count fixes the dimension
    """

    def __init__(self, amplitude: float = 2.0, scales: Sequence[float] = (0.5, 1.5)):
        scales = np.array(scales, dtype=np.float64).reshape(-1)
        if scales.size == 0 or np.any(scales <= 0):
            raise ValueError(f"scales must be non-empty and positive, got {scales.tolist()}")
        self.amplitude = float(amplitude)
        self.scales = scales
        self._scales_sq = scales * scales
        self.dim = scales.shape[0]

    def evaluate(self, z):
        z = np.asarray(z, dtype=np.float64)
        exponent = np.sum(z * z / self._scales_sq, axis=-1)
        return self.amplitude * np.exp(-0.5 * exponent)

    def gradient(self, z, out: Optional[np.ndarray] = None):
        z = np.asarray(z, dtype=np.float64)
        phi = self.evaluate(z)
        return write_or_return(-phi[..., np.newaxis] * z / self._scales_sq, out)

    def __repr__(self) -> str:
        return (
            f"AnisotropicGaussianInteraction(amplitude={self.amplitude}, "
            f"scales={self.scales.tolist()})"
        )
