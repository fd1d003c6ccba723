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
Energy Ledger for Interacting Particle Systems

For the mean-field gradient flow the free energy

    E(X) = (1/N) Σ_i V(x_i) + (1/N²) Σ_{i<j} Φ(x_i - x_j)

decreases at the dissipation rate

    J(X) = (1/N) Σ_i |∇V(x_i) + (1/N) Σ_{j≠i} ∇Φ(x_i - x_j)|²

Comparing the observed energy change ΔE with -½·J·Δt for TRIAL potentials
gives a residual that is small only when the trial potentials match the ones
generating the data. EnergyBalance keeps exponentially smoothed running
values of these terms for a live display.

For vector Φ the pair sum is symmetrised as ½ Σ_{i≠j}, which equals
Σ_{i<j} whenever Φ(z) = Φ(-z).
"""

from collections import deque
from typing import Deque, Dict

import numpy as np

from ..potentials.base import ConfinementPotential, InteractionPotential
from .mean_field import mean_field_gradient, pairwise_displacements, pairwise_distances


def interaction_energy(positions: np.ndarray, interaction: InteractionPotential) -> float:
    """
    Pair term (1/N²) Σ_{i<j} Φ of the free energy.

    Parameters
    ----------
    positions : np.ndarray
        Positions, shape (N, d)
    interaction : InteractionPotential
        Φ

    Returns
    -------
    float
    """
    x = np.asarray(positions, dtype=np.float64)
    n_particles = x.shape[0]
    z = pairwise_displacements(x)

    if interaction.is_radial:
        values = interaction.evaluate(pairwise_distances(z))
    else:
        values = interaction.evaluate(z)

    values = np.array(values, dtype=np.float64)
    np.fill_diagonal(values, 0.0)
    return float(0.5 * np.sum(values) / n_particles ** 2)


def system_energy(
    positions: np.ndarray,
    confinement: ConfinementPotential,
    interaction: InteractionPotential,
    v_scale: float = 1.0,
    phi_scale: float = 1.0,
) -> float:
    """
    Free energy E(X) for (optionally scaled) potentials.

    Parameters
    ----------
    positions : np.ndarray
        Positions, shape (N, d)
    confinement, interaction
        V and Φ
    v_scale, phi_scale : float
        Multipliers applied to V and Φ (trial potentials)

    Returns
    -------
    float
    """
    x = np.asarray(positions, dtype=np.float64)
    n_particles = x.shape[0]
    confinement_term = float(np.sum(confinement.evaluate(x))) / n_particles
    return v_scale * confinement_term + phi_scale * interaction_energy(x, interaction)


def dissipation(
    positions: np.ndarray,
    confinement: ConfinementPotential,
    interaction: InteractionPotential,
    v_scale: float = 1.0,
    phi_scale: float = 1.0,
) -> float:
    """
    Dissipation rate J(X) = (1/N) Σ_i |∇V(x_i) + G_i|² for scaled potentials.

    Returns
    -------
    float
    """
    x = np.asarray(positions, dtype=np.float64)
    n_particles = x.shape[0]

    grad = v_scale * confinement.gradient(x) + phi_scale * mean_field_gradient(x, interaction)
    return float(np.sum(grad * grad) / n_particles)


class EnergyBalance:
    """
    Running energy ledger for trial potentials.

    Each ``update`` takes the positions before and after one step of the
    TRUE dynamics and scores trial potentials c_V·V and c_Φ·Φ:

        dissipation   ← s·dissipation   + (1-s)·(½·J(X_prev)·Δt)
        energy_change ← s·energy_change + (1-s)·(E(X_curr) - E(X_prev))
        residual      ← s·residual      + (1-s)·(dissipation + energy_change)

    with smoothing factor s. The diffusion contribution is not included.

    Parameters
    ----------
    confinement, interaction
        Reference V and Φ (scaled per update)
    dt : float
        Step size of the observed dynamics
    smoothing : float, default=0.95
        Exponential smoothing factor s in [0, 1)
    history : int, default=200
        Number of residual values kept

    Examples
    --------
    >>> ledger = EnergyBalance(V, Phi, dt=integrator.dt)
    >>> previous = state.copy()
    >>> integrator.step(state)
    >>> ledger.update(previous.as_matrix(), state.as_matrix(), v_scale=1.2)
    """

    def __init__(
        self,
        confinement: ConfinementPotential,
        interaction: InteractionPotential,
        dt: float,
        smoothing: float = 0.95,
        history: int = 200,
    ):
        if dt <= 0:
            raise ValueError(f"Time step dt must be positive, got {dt}")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must lie in [0, 1), got {smoothing}")
        if history < 1:
            raise ValueError(f"history must be at least 1, got {history}")

        self.confinement = confinement
        self.interaction = interaction
        self.dt = float(dt)
        self.smoothing = float(smoothing)
        self.dissipation = 0.0
        self.energy_change = 0.0
        self.residual = 0.0
        self.residual_history: Deque[float] = deque(maxlen=history)

    def update(
        self,
        previous: np.ndarray,
        current: np.ndarray,
        v_scale: float = 1.0,
        phi_scale: float = 1.0,
    ) -> float:
        """
        Fold one observed step into the ledger.

        Parameters
        ----------
        previous, current : np.ndarray
            Positions (N, d) before and after the step
        v_scale, phi_scale : float
            Trial multipliers for V and Φ

        Returns
        -------
        float
            Updated smoothed residual
        """
        previous = np.asarray(previous, dtype=np.float64)
        current = np.asarray(current, dtype=np.float64)
        if previous.shape != current.shape:
            raise ValueError(
                f"Position shapes differ: {previous.shape} vs {current.shape}"
            )

        args = (self.confinement, self.interaction, v_scale, phi_scale)
        d_energy = system_energy(current, *args) - system_energy(previous, *args)
        j_diss = dissipation(previous, *args) * self.dt

        s = self.smoothing
        self.dissipation = s * self.dissipation + (1.0 - s) * (0.5 * j_diss)
        self.energy_change = s * self.energy_change + (1.0 - s) * d_energy
        self.residual = s * self.residual + (1.0 - s) * (self.dissipation + self.energy_change)
        self.residual_history.append(self.residual)
        return self.residual

    def summary(self) -> Dict[str, float]:
        """Current smoothed ledger values."""
        return {
            "dissipation": self.dissipation,
            "energy_change": self.energy_change,
            "residual": self.residual,
        }

    def reset(self):
        self.dissipation = 0.0
        self.energy_change = 0.0
        self.residual = 0.0
        self.residual_history.clear()
