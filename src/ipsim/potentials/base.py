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
Potential Base Classes - Abstract Interface for Force Laws

Defines the two families of force laws driving an interacting particle system:

    dX_i = (-∇V(X_i) - (1/N) Σ_j ∇Φ(X_i - X_j)) dt + σ dW_i

- ConfinementPotential V(x): acts on each particle independently
- InteractionPotential Φ: acts on pairs, in one of two shapes
    - RadialInteraction: Φ(r) with r = |x_i - x_j|, isotropic
    - VectorInteraction: Φ(z) with z = x_i - x_j, anisotropic

The shape is an explicit discriminant (InteractionKind) fixed per class, so
an integrator chooses its force kernel once, at construction.

Array Conventions
-----------------
All methods are vectorized. Vector arguments carry the spatial dimension on
the LAST axis; any leading axes are batch axes:
- x.shape == (d,)      -> one particle
- x.shape == (N, d)    -> all particles at once
- z.shape == (N, N, d) -> all pairwise displacements
Radial methods act elementwise on an array of distances.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import numpy as np

DISTANCE_FLOOR = 1e-10
"""Lower clamp applied to norms and distances before they are used as divisors."""


class InteractionKind(Enum):
    """
    Shape of an interaction potential.

    Attributes
    ----------
    RADIAL : str
        Φ depends on the scalar distance only. The integrator projects
        dΦ/dr onto the unit displacement direction.
    VECTOR : str
        Φ depends on the full displacement vector. The integrator calls the
        vector gradient on the displacement directly.
    """
    RADIAL = "radial"
    VECTOR = "vector"


def _check_dimension(name: str, required: Optional[int], dim: int):
    if required is not None and required != dim:
        raise ValueError(
            f"{name} is defined for dimension {required}, "
            f"but the system has dimension {dim}"
        )


class ConfinementPotential(ABC):
    """
    Abstract confinement potential V: ℝ^d → ℝ.

    Subclasses implement ``evaluate`` and ``gradient``. ``gradient`` must be
    the exact derivative of ``evaluate`` (checked by finite differences in the
    test suite).

    Attributes
    ----------
    dim : Optional[int]
        Required spatial dimension, or None if the law works in any d
    """

    dim: Optional[int] = None

    @abstractmethod
    def evaluate(self, x: np.ndarray) -> np.ndarray:
        """
        Potential value V(x).

        Parameters
        ----------
        x : np.ndarray
            Positions, shape (..., d)

        Returns
        -------
        np.ndarray
            Values, shape (...); a 0-d result for a single position
        """

    @abstractmethod
    def gradient(self, x: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Gradient ∇V(x).

        Parameters
        ----------
        x : np.ndarray
            Positions, shape (..., d)
        out : Optional[np.ndarray]
            Preallocated output of the same shape as x. When given, the
            result is written there and ``out`` is returned.

        Returns
        -------
        np.ndarray
            Gradient, shape (..., d)
        """

    def check_dimension(self, dim: int):
        """Raise ValueError if this potential cannot act in dimension ``dim``."""
        _check_dimension(type(self).__name__, self.dim, dim)

    def __call__(self, x: np.ndarray) -> np.ndarray:
        return self.evaluate(x)


class InteractionPotential(ABC):
    """
    Abstract pairwise interaction potential Φ.

    Concrete laws derive from RadialInteraction or VectorInteraction, which
    fix ``kind``.
    """

    kind: InteractionKind
    dim: Optional[int] = None

    def check_dimension(self, dim: int):
        """Raise ValueError if this potential cannot act in dimension ``dim``."""
        _check_dimension(type(self).__name__, self.dim, dim)

    @property
    def is_radial(self) -> bool:
        return self.kind is InteractionKind.RADIAL

    def __call__(self, arg: np.ndarray) -> np.ndarray:
        return self.evaluate(arg)


class RadialInteraction(InteractionPotential):
    """
    Isotropic interaction Φ(r), r ≥ 0.

    ``gradient`` returns the scalar derivative dΦ/dr. The vector force on
    particle i from particle j is dΦ/dr · (x_i - x_j)/r.
    """

    kind = InteractionKind.RADIAL

    @abstractmethod
    def evaluate(self, r: np.ndarray) -> np.ndarray:
        """Φ(r), elementwise over an array of distances."""

    @abstractmethod
    def gradient(self, r: np.ndarray) -> np.ndarray:
        """dΦ/dr, elementwise over an array of distances."""


class VectorInteraction(InteractionPotential):
    """
    Anisotropic interaction Φ(z) over displacement vectors z = x_i - x_j.
    """

    kind = InteractionKind.VECTOR

    @abstractmethod
    def evaluate(self, z: np.ndarray) -> np.ndarray:
        """Φ(z) for displacements of shape (..., d)."""

    @abstractmethod
    def gradient(self, z: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """∇_z Φ(z), shape (..., d); written into ``out`` when given."""


def squared_norm(x: np.ndarray) -> np.ndarray:
    """Σ_k x_k² over the last axis."""
    return np.sum(x * x, axis=-1)


def write_or_return(value: np.ndarray, out: Optional[np.ndarray]) -> np.ndarray:
    """Copy ``value`` into ``out`` when a buffer was supplied."""
    if out is None:
        return value
    out[...] = value
    return out
