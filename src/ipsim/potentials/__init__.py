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
Force-Law Library

Confinement potentials V(x) and pairwise interaction potentials Φ, each with
a value and a closed-form gradient.

Usage
-----
>>> from ipsim.potentials import DoubleWellPotential, InverseInteraction
>>> V = DoubleWellPotential()
>>> Phi = InverseInteraction(gamma=0.5)
>>> Phi.kind
<InteractionKind.RADIAL: 'radial'>
"""

from .base import (
    DISTANCE_FLOOR,
    ConfinementPotential,
    InteractionKind,
    InteractionPotential,
    RadialInteraction,
    VectorInteraction,
)
from .confinement import (
    AnisotropicConfinement,
    DoubleWellPotential,
    HarmonicPotential,
    QuadraticConfinement,
)
from .interaction import (
    SMOOTHING_WIDTH,
    AnisotropicGaussianInteraction,
    GaussianInteraction,
    InverseInteraction,
    LennardJonesPotential,
    MorsePotential,
    PiecewiseInteraction,
)
from .profiles import potential_profile
from .symbolic import (
    SymbolicConfinement,
    SymbolicRadialInteraction,
    SymbolicVectorInteraction,
)

__all__ = [
    # Base
    "ConfinementPotential",
    "InteractionPotential",
    "RadialInteraction",
    "VectorInteraction",
    "InteractionKind",
    "DISTANCE_FLOOR",
    # Confinement
    "HarmonicPotential",
    "QuadraticConfinement",
    "DoubleWellPotential",
    "AnisotropicConfinement",
    # Radial interaction
    "GaussianInteraction",
    "PiecewiseInteraction",
    "InverseInteraction",
    "MorsePotential",
    "LennardJonesPotential",
    "SMOOTHING_WIDTH",
    # Vector interaction
    "AnisotropicGaussianInteraction",
    # Symbolic
    "SymbolicConfinement",
    "SymbolicRadialInteraction",
    "SymbolicVectorInteraction",
    # Profiles
    "potential_profile",
]
