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
Particle-system integration: Euler-Maruyama stepping, mean-field force
kernels and energy diagnostics.
"""

from .energy import EnergyBalance, dissipation, interaction_energy, system_energy
from .euler_maruyama import EulerMaruyamaIntegrator
from .mean_field import (
    mean_field_gradient,
    pairwise_displacements,
    pairwise_distances,
    radial_mean_field,
    select_kernel,
    total_gradient,
    vector_mean_field,
)

__all__ = [
    # Integrator
    "EulerMaruyamaIntegrator",
    # Kernels
    "radial_mean_field",
    "vector_mean_field",
    "select_kernel",
    "mean_field_gradient",
    "total_gradient",
    "pairwise_displacements",
    "pairwise_distances",
    # Energy
    "system_energy",
    "interaction_energy",
    "dissipation",
    "EnergyBalance",
]
