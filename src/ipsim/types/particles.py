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
Particle State and Trajectory Types

Defines the containers exchanged between the integrator and its callers:
- ParticleState: positions of N particles in d dimensions
- ParticleTrajectory: stacked snapshots for playback
- IntegratorStats: counters reported by an integrator

Memory Layout
-------------
Positions live in ONE contiguous float64 buffer of length N·d. Particle i
occupies slots [i·d, (i+1)·d). Matrix access goes through views, never
through copies:

>>> state = ParticleState(np.zeros(6), n_particles=3, dim=2)
>>> state.as_matrix().shape
(3, 2)
>>> state.particle(1)  # view onto slots [2, 4)
array([0., 0.])
"""

from numbers import Integral
from typing import List, Sequence

import numpy as np
from typing_extensions import TypedDict

ParticleTrajectory = np.ndarray
"""
Stacked particle snapshots.

Shape: (n_snapshots, n_particles, dim)

Indexing:
- trajectory[k] -> all positions at snapshot k (N, d)
- trajectory[:, i] -> path of particle i (n_snapshots, d)
"""


class IntegratorStats(TypedDict):
    """
    Counters accumulated by a particle integrator.

    Keys
    ----
    total_steps : int
        Euler-Maruyama steps applied
    total_pair_evaluations : int
        Interaction gradient evaluations (N·(N-1) per step)
    total_noise_draws : int
        Standard-normal draws spent on diffusion
    total_initializations : int
        States produced by initialize()
    avg_pair_evaluations_per_step : float
    avg_noise_draws_per_step : float
    """

    total_steps: int
    total_pair_evaluations: int
    total_noise_draws: int
    total_initializations: int
    avg_pair_evaluations_per_step: float
    avg_noise_draws_per_step: float


class ParticleState:
    """
    Positions of N particles in d dimensions, stored as one flat buffer.

    The integrator mutates ``positions`` in place; the buffer is never
    reallocated or resized.

    Parameters
    ----------
    positions : np.ndarray
        Flat float64 buffer of length n_particles * dim
    n_particles : int
        Number of particles N (>= 1)
    dim : int
        Spatial dimension d (>= 1)

    Raises
    ------
    ValueError
        If counts are invalid or the buffer has the wrong shape
    """

    __slots__ = ("positions", "n_particles", "dim")

    def __init__(self, positions: np.ndarray, n_particles: int, dim: int):
        if not isinstance(n_particles, Integral) or n_particles < 1:
            raise ValueError(f"n_particles must be a positive integer, got {n_particles!r}")
        if not isinstance(dim, Integral) or dim < 1:
            raise ValueError(f"dim must be a positive integer, got {dim!r}")

        positions = np.ascontiguousarray(positions, dtype=np.float64)
        if positions.ndim != 1 or positions.shape[0] != n_particles * dim:
            raise ValueError(
                f"positions must be a flat buffer of length {n_particles * dim} "
                f"(n_particles={n_particles}, dim={dim}), got shape {positions.shape}"
            )

        self.positions = positions
        self.n_particles = int(n_particles)
        self.dim = int(dim)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "ParticleState":
        """Build a state from an (N, d) array (the data is copied)."""
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.ndim != 2:
            raise ValueError(f"Expected an (N, d) array, got shape {matrix.shape}")
        n_particles, dim = matrix.shape
        return cls(matrix.reshape(-1), n_particles, dim)

    def as_matrix(self) -> np.ndarray:
        """(N, d) view sharing memory with ``positions``."""
        return self.positions.reshape(self.n_particles, self.dim)

    def particle(self, i: int) -> np.ndarray:
        """Length-d view of particle i."""
        if not 0 <= i < self.n_particles:
            raise IndexError(f"Particle index {i} out of range for N={self.n_particles}")
        return self.positions[i * self.dim:(i + 1) * self.dim]

    def copy(self) -> "ParticleState":
        return ParticleState(self.positions.copy(), self.n_particles, self.dim)

    def __len__(self) -> int:
        return self.n_particles

    def __repr__(self) -> str:
        return f"ParticleState(n_particles={self.n_particles}, dim={self.dim})"


def stack_snapshots(snapshots: Sequence[ParticleState]) -> ParticleTrajectory:
    """
    Stack recorded snapshots into a (T, N, d) array.

    Parameters
    ----------
    snapshots : Sequence[ParticleState]
        Snapshots sharing the same N and d, e.g. from ``simulate``

    Returns
    -------
    ParticleTrajectory
        Array of shape (len(snapshots), N, d)

    Examples
    --------
    >>> snapshots = integrator.simulate(100)
    >>> trajectory = stack_snapshots(snapshots)
    >>> trajectory[:, 0]  # path of the first particle
    """
    if len(snapshots) == 0:
        raise ValueError("Cannot stack an empty sequence of snapshots")

    shapes = {(s.n_particles, s.dim) for s in snapshots}
    if len(shapes) != 1:
        raise ValueError(f"Snapshots have inconsistent shapes: {sorted(shapes)}")

    frames: List[np.ndarray] = [s.as_matrix() for s in snapshots]
    return np.stack(frames, axis=0)
