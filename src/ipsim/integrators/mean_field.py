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
Mean-Field Force Kernels

Computes the averaged interaction gradient for every particle at once:

    G_i = (1/N) Σ_{j≠i} ∇Φ(x_i - x_j)

Radial Φ:  ∇Φ(x_i - x_j) = Φ'(r_ij) · (x_i - x_j)/r_ij,  r_ij = max(|x_i - x_j|, floor)
Vector Φ:  ∇Φ(x_i - x_j) evaluated on the displacement directly

Both kernels read positions only and write only into the supplied buffers,
so every G_i is computed from the same snapshot of positions. The j = i term
is forced to zero.

Scratch buffers are optional keyword arguments. The integrator passes
preallocated ones for the displacements, distances, pair coefficients and
the output, which it reuses across steps. Evaluating Φ or ∇Φ itself may
still allocate temporaries of the same shape.
"""

from typing import Callable, Optional

import numpy as np

from ..potentials.base import (
    DISTANCE_FLOOR,
    ConfinementPotential,
    InteractionKind,
    InteractionPotential,
)

MeanFieldKernel = Callable[..., np.ndarray]


def pairwise_displacements(x: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """z[i, j] = x[i] - x[j], shape (N, N, d)."""
    return np.subtract(x[:, np.newaxis, :], x[np.newaxis, :, :], out=out)


def pairwise_distances(
    displacements: np.ndarray,
    out: Optional[np.ndarray] = None,
    floor: float = DISTANCE_FLOOR,
) -> np.ndarray:
    """r[i, j] = max(|z[i, j]|, floor), shape (N, N)."""
    out = np.einsum("ijk,ijk->ij", displacements, displacements, out=out)
    np.sqrt(out, out=out)
    np.maximum(out, floor, out=out)
    return out


def radial_mean_field(
    x: np.ndarray,
    interaction: InteractionPotential,
    out: Optional[np.ndarray] = None,
    *,
    displacements: Optional[np.ndarray] = None,
    distances: Optional[np.ndarray] = None,
    coefficients: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Mean-field gradient for a radial interaction.

    Parameters
    ----------
    x : np.ndarray
        Positions, shape (N, d)
    interaction : RadialInteraction
        Φ(r) with ``gradient`` returning dΦ/dr
    out : Optional[np.ndarray]
        Output buffer, shape (N, d)
    displacements, distances, coefficients : Optional[np.ndarray]
        Scratch buffers of shape (N, N, d), (N, N), (N, N)

    Returns
    -------
    np.ndarray
        G, shape (N, d)
    """
    n_particles = x.shape[0]
    displacements = pairwise_displacements(x, out=displacements)
    distances = pairwise_distances(displacements, out=distances)

    # Φ'(r)/r, projected onto the displacement below
    coefficients = np.divide(interaction.gradient(distances), distances, out=coefficients)
    np.fill_diagonal(coefficients, 0.0)

    out = np.einsum("ij,ijk->ik", coefficients, displacements, out=out)
    out /= n_particles
    return out


def vector_mean_field(
    x: np.ndarray,
    interaction: InteractionPotential,
    out: Optional[np.ndarray] = None,
    *,
    displacements: Optional[np.ndarray] = None,
    pair_gradients: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Mean-field gradient for a vector (anisotropic) interaction.

    Parameters
    ----------
    x : np.ndarray
        Positions, shape (N, d)
    interaction : VectorInteraction
        Φ(z) with ``gradient(z, out)``
    out : Optional[np.ndarray]
        Output buffer, shape (N, d)
    displacements, pair_gradients : Optional[np.ndarray]
        Scratch buffers, both of shape (N, N, d)

    Returns
    -------
    np.ndarray
        G, shape (N, d)
    """
    n_particles = x.shape[0]
    displacements = pairwise_displacements(x, out=displacements)

    pair_gradients = interaction.gradient(displacements, out=pair_gradients)
    diagonal = np.arange(n_particles)
    pair_gradients[diagonal, diagonal] = 0.0

    out = np.sum(pair_gradients, axis=1, out=out)
    out /= n_particles
    return out


def select_kernel(interaction: InteractionPotential) -> MeanFieldKernel:
    """
    Pick the mean-field kernel matching ``interaction.kind``.

    Raises
    ------
    TypeError
        If ``interaction`` is not an InteractionPotential
    """
    if not isinstance(interaction, InteractionPotential):
        raise TypeError(
            f"interaction must be an InteractionPotential, got {type(interaction).__name__}"
        )
    if interaction.kind is InteractionKind.RADIAL:
        return radial_mean_field
    if interaction.kind is InteractionKind.VECTOR:
        return vector_mean_field
    raise ValueError(f"Unknown interaction kind: {interaction.kind}")


def mean_field_gradient(x: np.ndarray, interaction: InteractionPotential) -> np.ndarray:
    """
    Mean-field gradient G for positions ``x`` of shape (N, d).

    Allocating wrapper around the kernels, for diagnostics that run outside
    the integrator's hot path.
    """
    x = np.asarray(x, dtype=np.float64)
    return select_kernel(interaction)(x, interaction)


def total_gradient(
    x: np.ndarray,
    confinement: ConfinementPotential,
    interaction: InteractionPotential,
) -> np.ndarray:
    """Full drift gradient ∇V(x_i) + G_i for every particle, shape (N, d)."""
    x = np.asarray(x, dtype=np.float64)
    return confinement.gradient(x) + mean_field_gradient(x, interaction)
