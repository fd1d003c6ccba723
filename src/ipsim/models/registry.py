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
Model Registry - Named Particle Systems

Each model pairs one confinement law with one interaction law and a default
diffusion coefficient:

| Key         | V(x)                     | Φ                                  | σ   |
|-------------|--------------------------|------------------------------------|-----|
| model_a     | QuadraticConfinement     | PiecewiseInteraction(-3, 2)        | 0.1 |
| model_b     | DoubleWellPotential      | InverseInteraction(0.5)            | 0.1 |
| model_lj    | HarmonicPotential(2)     | LennardJonesPotential()            | 0.1 |
| model_morse | DoubleWellPotential      | MorsePotential(0.5, 2, 0.8)        | 0.1 |
| model_aniso | AnisotropicConfinement   | AnisotropicGaussianInteraction     | 0.1 |

Usage
-----
>>> from ipsim.models import create_integrator, get_model
>>> get_model('model_b').label
'Model B (Double-Well + Inverse)'
>>> integrator = create_integrator('model_b', n_particles=50)
>>> snapshots = integrator.simulate(500)

Switching models means building a new integrator; an existing integrator
never changes its potentials.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..integrators import EulerMaruyamaIntegrator
from ..potentials import (
    AnisotropicConfinement,
    AnisotropicGaussianInteraction,
    ConfinementPotential,
    DoubleWellPotential,
    HarmonicPotential,
    InteractionPotential,
    InverseInteraction,
    LennardJonesPotential,
    MorsePotential,
    PiecewiseInteraction,
    QuadraticConfinement,
)


@dataclass(frozen=True)
class ModelConfig:
    """
    Named pairing of potentials with a default diffusion coefficient.

    Attributes
    ----------
    name : str
        Registry key
    label : str
        Display name
    confinement : ConfinementPotential
        V(x)
    interaction : InteractionPotential
        Φ
    sigma : float
        Default diffusion coefficient
    description : str
        One-line summary
    """

    name: str
    label: str
    confinement: ConfinementPotential = field(repr=False)
    interaction: InteractionPotential = field(repr=False)
    sigma: float = 0.1
    description: str = ""

    @property
    def dim(self):
        """Dimension forced by the potentials, or None if any d works."""
        return self.confinement.dim or self.interaction.dim


MODELS: Dict[str, ModelConfig] = {
    "model_a": ModelConfig(
        name="model_a",
        label="Model A (Quadratic + Piecewise)",
        confinement=QuadraticConfinement(alpha1=-1.0, alpha2=2.0),
        interaction=PiecewiseInteraction(beta1=-3.0, beta2=2.0),
        sigma=0.1,
        description="Quadratic confinement with piecewise constant interaction",
    ),
    "model_b": ModelConfig(
        name="model_b",
        label="Model B (Double-Well + Inverse)",
        confinement=DoubleWellPotential(),
        interaction=InverseInteraction(gamma=0.5),
        sigma=0.1,
        description="Double-well confinement with inverse-distance interaction",
    ),
    "model_lj": ModelConfig(
        name="model_lj",
        label="Model C (Harmonic + Lennard-Jones)",
        confinement=HarmonicPotential(k=2.0),
        interaction=LennardJonesPotential(),
        sigma=0.1,
        description="Harmonic confinement with truncated Lennard-Jones interaction",
    ),
    "model_morse": ModelConfig(
        name="model_morse",
        label="Model D (Double-Well + Morse)",
        confinement=DoubleWellPotential(),
        interaction=MorsePotential(depth=0.5, stiffness=2.0, r0=0.8),
        sigma=0.1,
        description="Double-well confinement with Morse interaction",
    ),
    "model_aniso": ModelConfig(
        name="model_aniso",
        label="Model E (Anisotropic)",
        confinement=AnisotropicConfinement([1.0, 4.0]),
        interaction=AnisotropicGaussianInteraction(amplitude=2.0, scales=[0.5, 1.5]),
        sigma=0.1,
        description="Anisotropic confinement with direction-dependent Gaussian interaction",
    ),
}


def list_models() -> List[str]:
    """Registered model keys, in registration order."""
    return list(MODELS)


def get_model(key: str) -> ModelConfig:
    """
    Look up a model by key.

    Raises
    ------
    KeyError
        If the key is not registered; the message lists the valid keys
    """
    try:
        return MODELS[key]
    except KeyError:
        raise KeyError(
            f"Unknown model '{key}'. Available models: {', '.join(MODELS)}"
        ) from None


def create_integrator(
    key: str,
    n_particles: int = 10,
    dim: int = 2,
    dt: float = 0.005,
    seed: int = 42,
    sigma: Optional[float] = None,
) -> EulerMaruyamaIntegrator:
    """
    Build a fresh integrator for a registered model.

    Parameters
    ----------
    key : str
        Model key
    n_particles : int, default=10
        Number of particles
    dim : int, default=2
        Spatial dimension; must match models with a fixed dimension
    dt : float, default=0.005
        Step size
    seed : int, default=42
        Generator seed
    sigma : float, optional
        Override of the model's default diffusion coefficient

    Returns
    -------
    EulerMaruyamaIntegrator

    Raises
    ------
    KeyError
        If the key is not registered
    ValueError
        If the configuration is invalid for the model

    Examples
    --------
    >>> a = create_integrator('model_lj', n_particles=20, seed=7)
    >>> b = create_integrator('model_lj', n_particles=20, seed=7)
    >>> # a and b produce identical trajectories
    """
    model = get_model(key)
    return EulerMaruyamaIntegrator(
        model.confinement,
        model.interaction,
        sigma=model.sigma if sigma is None else sigma,
        dt=dt,
        n_particles=n_particles,
        dim=dim,
        seed=seed,
    )
