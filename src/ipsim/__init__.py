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
ipsim: Interacting Particle System Simulation

Seeded Euler-Maruyama simulation of mean-field particle systems

    dX_i = (-∇V(X_i) - (1/N) Σ_{j≠i} ∇Φ(X_i - X_j)) dt + σ dW_i

with a library of confinement and interaction potentials.
"""

# Library version
__version__ = "1.0.0"

# Submodules
from . import integrators
from . import models
from . import potentials
from . import random
from . import types

# Integrator
from .integrators import EulerMaruyamaIntegrator, EnergyBalance, system_energy

# Force laws
from .potentials import (
    AnisotropicConfinement,
    AnisotropicGaussianInteraction,
    ConfinementPotential,
    DoubleWellPotential,
    GaussianInteraction,
    HarmonicPotential,
    InteractionKind,
    InteractionPotential,
    InverseInteraction,
    LennardJonesPotential,
    MorsePotential,
    PiecewiseInteraction,
    QuadraticConfinement,
    RadialInteraction,
    VectorInteraction,
)

# Models
from .models import MODELS, ModelConfig, create_integrator, get_model, list_models

# Random source
from .random import Xoshiro128StarStar

# Types
from .types import ParticleState, stack_snapshots

__all__ = [
    "__version__",
    # Submodules
    "integrators",
    "models",
    "potentials",
    "random",
    "types",
    # Integrator
    "EulerMaruyamaIntegrator",
    "EnergyBalance",
    "system_energy",
    # Force laws
    "ConfinementPotential",
    "InteractionPotential",
    "RadialInteraction",
    "VectorInteraction",
    "InteractionKind",
    "HarmonicPotential",
    "QuadraticConfinement",
    "DoubleWellPotential",
    "AnisotropicConfinement",
    "GaussianInteraction",
    "PiecewiseInteraction",
    "InverseInteraction",
    "MorsePotential",
    "LennardJonesPotential",
    "AnisotropicGaussianInteraction",
    # Models
    "ModelConfig",
    "MODELS",
    "get_model",
    "list_models",
    "create_integrator",
    # Random source
    "Xoshiro128StarStar",
    # Types
    "ParticleState",
    "stack_snapshots",
]
