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
Euler-Maruyama Integrator for Mean-Field Interacting Particle Systems

Advances N particles in d dimensions under the mean-field SDE

    dX_i = (-∇V(X_i) - (1/N) Σ_{j≠i} ∇Φ(X_i - X_j)) dt + σ dW_i

with the first-order Euler-Maruyama scheme

    X_i ← X_i - (∇V(X_i) + G_i)·Δt + σ·√Δt·η_i,    η_i ~ N(0, I_d)

Step Semantics
--------------
One call to ``step`` performs, in this order:

1. Draw all N·d noise values for the step in one batch
2. Compute ∇V and the mean-field gradient G for every particle from the
   pre-step positions
3. Write the updated positions into a separate buffer
4. Copy that buffer back into the caller's state

Because every force is computed before any position is written, no particle
sees a neighbour's already-advanced position within the same step.

Determinism
-----------
The random draw order is: all noise of step s, then all noise of step s+1.
For a fixed (seed, dt, sigma, N, d, V, Φ) the sequence of states is
reproducible across integrator instances.

Resources
---------
Every integrator owns its generator and all scratch buffers, allocated once
at construction. Separate instances share nothing and need no locking; one
instance must be driven from a single thread.
"""

import math
import warnings
from numbers import Integral, Real
from typing import List

import numpy as np

from ..potentials.base import ConfinementPotential, InteractionKind, InteractionPotential
from ..random import Xoshiro128StarStar
from ..types import IntegratorStats, ParticleState
from .mean_field import select_kernel


def _require_positive_int(name: str, value) -> int:
    if not isinstance(value, Integral) or isinstance(value, bool) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def _require_finite(name: str, value) -> float:
    if not isinstance(value, Real) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite real number, got {value!r}")
    return float(value)


class EulerMaruyamaIntegrator:
    """
    Fixed-step simulator for an interacting particle system.

    Binds one confinement law V and one interaction law Φ. The interaction's
    ``kind`` selects the radial or vector force kernel once, here, rather
    than per particle pair.

    Parameters
    ----------
    confinement : ConfinementPotential
        V(x)
    interaction : InteractionPotential
        Φ, radial or vector
    sigma : float
        Diffusion coefficient (>= 0)
    dt : float
        Step size (> 0)
    n_particles : int
        Number of particles N (>= 1)
    dim : int
        Spatial dimension d (>= 1)
    seed : int, default=42
        Seed of the integrator's private random source

    Raises
    ------
    ValueError
        If a numeric parameter is out of range, or a potential is defined
        for a different dimension
    TypeError
        If confinement or interaction is not a potential, or seed is not an
        integer

    Examples
    --------
    >>> integrator = EulerMaruyamaIntegrator(
    ...     DoubleWellPotential(), InverseInteraction(0.5),
    ...     sigma=0.15, dt=0.02, n_particles=2, dim=2, seed=42,
    ... )
    >>> state = integrator.initialize(1.0)
    >>> integrator.step(state)          # advances state in place
    >>> state.as_matrix().shape
    (2, 2)
    >>>
    >>> # Recorded run for playback
    >>> snapshots = integrator.simulate(100, init_std=0.8)
    >>> len(snapshots)                  # initial + steps 0, 10, ..., 90 + final
    12
    """

    def __init__(
        self,
        confinement: ConfinementPotential,
        interaction: InteractionPotential,
        sigma: float,
        dt: float,
        n_particles: int,
        dim: int,
        seed: int = 42,
    ):
        if not isinstance(confinement, ConfinementPotential):
            raise TypeError(
                f"confinement must be a ConfinementPotential, got {type(confinement).__name__}"
            )
        self._kernel = select_kernel(interaction)

        sigma = _require_finite("sigma", sigma)
        if sigma < 0:
            raise ValueError(f"Diffusion coefficient sigma must be non-negative, got {sigma}")
        dt = _require_finite("dt", dt)
        if dt <= 0:
            raise ValueError(f"Time step dt must be positive, got {dt}")
        n_particles = _require_positive_int("n_particles", n_particles)
        dim = _require_positive_int("dim", dim)

        confinement.check_dimension(dim)
        interaction.check_dimension(dim)

        self._confinement = confinement
        self._interaction = interaction
        self._sigma = sigma
        self._dt = dt
        self._n_particles = n_particles
        self._dim = dim
        self._rng = Xoshiro128StarStar(seed)
        self._seed = self._rng.seed
        self._diffusion_scale = sigma * math.sqrt(dt)
        self._initialized = False

        # Scratch buffers, sized once
        n, d = n_particles, dim
        self._grad_v = np.empty((n, d))
        self._grad_phi = np.empty((n, d))
        self._noise = np.empty(n * d)
        self._next = np.empty((n, d))
        self._displacements = np.empty((n, n, d))
        if interaction.kind is InteractionKind.RADIAL:
            self._scratch = {
                "displacements": self._displacements,
                "distances": np.empty((n, n)),
                "coefficients": np.empty((n, n)),
            }
        else:
            self._scratch = {
                "displacements": self._displacements,
                "pair_gradients": np.empty((n, n, d)),
            }

        self._stats = {
            "total_steps": 0,
            "total_pair_evaluations": 0,
            "total_noise_draws": 0,
            "total_initializations": 0,
        }

    # ========================================================================
    # Read-only configuration
    # ========================================================================

    @property
    def confinement(self) -> ConfinementPotential:
        return self._confinement

    @property
    def interaction(self) -> InteractionPotential:
        return self._interaction

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def n_particles(self) -> int:
        return self._n_particles

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def is_initialized(self) -> bool:
        """False until ``initialize`` has produced a state."""
        return self._initialized

    @property
    def name(self) -> str:
        """Human-readable integrator name."""
        return f"Euler-Maruyama ({self._interaction.kind.value} interaction)"

    # ========================================================================
    # Simulation
    # ========================================================================

    def initialize(self, std: float = 1.0) -> ParticleState:
        """
        Draw initial positions from N(0, std²·I).

        Consumes N·d standard-normal draws from the integrator's generator.

        Parameters
        ----------
        std : float, default=1.0
            Standard deviation of every coordinate

        Returns
        -------
        ParticleState
            New state owned by the caller
        """
        std = _require_finite("std", std)

        positions = np.empty(self._n_particles * self._dim)
        self._rng.fill_normal(positions)
        positions *= std

        self._initialized = True
        self._stats["total_initializations"] += 1
        return ParticleState(positions, self._n_particles, self._dim)

    def step(self, state: ParticleState) -> None:
        """
        Advance ``state`` in place by one interval dt.

        Parameters
        ----------
        state : ParticleState
            State with this integrator's N and d

        Raises
        ------
        ValueError
            If the state's shape does not match the integrator
        """
        if state.n_particles != self._n_particles or state.dim != self._dim:
            raise ValueError(
                f"State has shape ({state.n_particles}, {state.dim}), integrator "
                f"expects ({self._n_particles}, {self._dim})"
            )

        # 1. Noise for the whole step, drawn before any force
        self._rng.fill_normal(self._noise)

        # 2. Forces from the pre-step snapshot
        x = state.as_matrix()
        self._confinement.gradient(x, out=self._grad_v)
        self._kernel(x, self._interaction, out=self._grad_phi, **self._scratch)

        # 3. Update into the separate buffer:
        #    x_next = x - (∇V + G)·dt + σ·√dt·η
        drift = self._grad_v
        drift += self._grad_phi
        np.multiply(drift, self._dt, out=self._next)
        np.subtract(x, self._next, out=self._next)
        noise = self._noise.reshape(self._n_particles, self._dim)
        noise *= self._diffusion_scale
        self._next += noise

        # 4. Publish
        x[...] = self._next

        n = self._n_particles
        self._stats["total_steps"] += 1
        self._stats["total_pair_evaluations"] += n * (n - 1)
        self._stats["total_noise_draws"] += n * self._dim

    def simulate(
        self,
        n_steps: int,
        init_std: float = 1.0,
        record_every: int = 10,
    ) -> List[ParticleState]:
        """
        Initialize, step ``n_steps`` times and record snapshots.

        Snapshots are: the initial state, then the state after step s
        (counting from 0) whenever ``s % record_every == 0`` or s is the
        final step.

        Parameters
        ----------
        n_steps : int
            Number of steps (>= 0)
        init_std : float, default=1.0
            Standard deviation passed to ``initialize``
        record_every : int, default=10
            Snapshot period in steps (>= 1)

        Returns
        -------
        List[ParticleState]
            Independent copies, in time order

        Warns
        -----
        RuntimeWarning
            Once, if positions become non-finite (reduce dt)
        """
        if not isinstance(n_steps, Integral) or isinstance(n_steps, bool) or n_steps < 0:
            raise ValueError(f"n_steps must be a non-negative integer, got {n_steps!r}")
        record_every = _require_positive_int("record_every", record_every)

        state = self.initialize(init_std)
        snapshots = [state.copy()]
        diverged = False

        for s in range(n_steps):
            self.step(state)

            if not diverged and not np.all(np.isfinite(state.positions)):
                diverged = True
                warnings.warn(
                    f"Particle positions became non-finite at step {s} "
                    f"(dt={self._dt}). The explicit scheme is unstable for this "
                    f"step size; reduce dt.",
                    RuntimeWarning,
                )

            if s % record_every == 0 or s == n_steps - 1:
                snapshots.append(state.copy())

        return snapshots

    # ========================================================================
    # Statistics
    # ========================================================================

    def get_stats(self) -> IntegratorStats:
        """
        Get integration statistics.

        Returns
        -------
        IntegratorStats
            Counters plus per-step averages

        Examples
        --------
        >>> integrator.simulate(50)
        >>> integrator.get_stats()['total_steps']
        50
        """
        steps = max(1, self._stats["total_steps"])
        return {
            **self._stats,
            "avg_pair_evaluations_per_step": self._stats["total_pair_evaluations"] / steps,
            "avg_noise_draws_per_step": self._stats["total_noise_draws"] / steps,
        }

    def reset_stats(self):
        """Reset all counters to zero."""
        for key in self._stats:
            self._stats[key] = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"V={self._confinement!r}, Phi={self._interaction!r}, "
            f"sigma={self._sigma}, dt={self._dt}, N={self._n_particles}, "
            f"d={self._dim}, seed={self._seed})"
        )

    def __str__(self) -> str:
        return (
            f"{self.name}: N={self._n_particles}, d={self._dim}, "
            f"dt={self._dt}, sigma={self._sigma}"
        )
