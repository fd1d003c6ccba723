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
One-dimensional cuts through potentials, for plotting V and Φ curves.
"""

from typing import Optional, Union

import numpy as np

from .base import ConfinementPotential, InteractionPotential


def potential_profile(
    potential: Union[ConfinementPotential, InteractionPotential],
    grid: np.ndarray,
    dim: Optional[int] = None,
) -> np.ndarray:
    """
    Sample a potential along the first coordinate axis.

    - Confinement V: evaluated at x = (t, 0, ..., 0)
    - Radial Φ: evaluated at r = |t|
    - Vector Φ: evaluated at z = (t, 0, ..., 0)

    Parameters
    ----------
    potential : ConfinementPotential or InteractionPotential
        Potential to sample
    grid : np.ndarray
        1-D array of sample coordinates t
    dim : Optional[int]
        Embedding dimension for vector arguments. Defaults to the potential's
        own dimension, or 2 if it works in any dimension.

    Returns
    -------
    np.ndarray
        Values, same length as grid

    Examples
    --------
    >>> t = np.linspace(-2.5, 2.5, 201)
    >>> curve = potential_profile(DoubleWellPotential(), t)
    >>> curve.shape
    (201,)
    """
    grid = np.asarray(grid, dtype=np.float64).reshape(-1)

    if isinstance(potential, InteractionPotential) and potential.is_radial:
        return np.asarray(potential.evaluate(np.abs(grid)), dtype=np.float64)

    if not isinstance(potential, (ConfinementPotential, InteractionPotential)):
        raise TypeError(f"Expected a potential, got {type(potential).__name__}")

    if dim is None:
        dim = potential.dim if potential.dim is not None else 2
    potential.check_dimension(dim)

    points = np.zeros((grid.shape[0], dim))
    points[:, 0] = grid
    return np.asarray(potential.evaluate(points), dtype=np.float64)
