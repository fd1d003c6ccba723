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
Symbolic Potentials - SymPy Expressions as Numeric Force Laws

Builds potentials from SymPy expressions. The gradient is derived
symbolically with ``sp.diff`` and both value and gradient are compiled to
NumPy with ``sp.lambdify``, so a new force law needs no hand-written
derivative.

Parameters are given as a ``{Symbol: value}`` map and substituted before
compilation, the same way symbolic systems substitute their parameters.

Examples
--------
>>> import sympy as sp
>>> x, y = sp.symbols('x y', real=True)
>>> k = sp.symbols('k', positive=True)
>>> V = SymbolicConfinement(k * (x**2 + y**2) / 2, [x, y], {k: 2.0})
>>> V.gradient(np.array([1.0, -0.5]))
array([ 2., -1.])
>>>
>>> r = sp.symbols('r', nonnegative=True)
>>> Phi = SymbolicRadialInteraction(sp.exp(-r**2), r)
>>> Phi.kind
<InteractionKind.RADIAL: 'radial'>
"""

import warnings
from typing import Dict, Optional, Sequence

import numpy as np
import sympy as sp

from .base import ConfinementPotential, RadialInteraction, VectorInteraction, write_or_return


def _substitute_parameters(
    expr: sp.Expr,
    variables: Sequence[sp.Symbol],
    parameters: Optional[Dict[sp.Symbol, float]],
) -> sp.Expr:
    """Substitute parameter values and check that only ``variables`` remain free."""
    expr = sp.sympify(expr)
    parameters = dict(parameters or {})

    unused = [p for p in parameters if p not in expr.free_symbols]
    if unused:
        warnings.warn(
            f"Parameters {sorted(str(p) for p in unused)} do not appear in the "
            f"expression {expr} and are ignored.",
            UserWarning,
        )

    expr = expr.subs(parameters)

    leftover = expr.free_symbols - set(variables)
    if leftover:
        raise ValueError(
            f"Expression has unbound symbols {sorted(str(s) for s in leftover)}; "
            f"provide values for them in `parameters`"
        )
    return expr


def _broadcast(value, shape) -> np.ndarray:
    # lambdify returns a Python scalar for expressions that do not depend on
    # every variable
    value = np.asarray(value, dtype=np.float64)
    if value.shape != shape:
        value = np.broadcast_to(value, shape).copy()
    return value


class _CompiledField:
    """Value and gradient of a scalar field over d coordinate symbols."""

    def __init__(self, expr: sp.Expr, coordinates: Sequence[sp.Symbol]):
        self.coordinates = list(coordinates)
        self.expr = expr
        self.gradient_exprs = [sp.diff(expr, c) for c in self.coordinates]

        self._value_fn = sp.lambdify(self.coordinates, expr, modules="numpy")
        self._gradient_fns = [
            sp.lambdify(self.coordinates, g, modules="numpy") for g in self.gradient_exprs
        ]

    def _unpack(self, x):
        x = np.asarray(x, dtype=np.float64)
        if x.shape[-1] != len(self.coordinates):
            raise ValueError(
                f"Expected last axis of length {len(self.coordinates)}, got shape {x.shape}"
            )
        return x, [x[..., k] for k in range(x.shape[-1])]

    def value(self, x):
        x, args = self._unpack(x)
        return _broadcast(self._value_fn(*args), x.shape[:-1])

    def gradient(self, x, out):
        x, args = self._unpack(x)
        components = [_broadcast(g(*args), x.shape[:-1]) for g in self._gradient_fns]
        return write_or_return(np.stack(components, axis=-1), out)


class SymbolicConfinement(ConfinementPotential):
    """
    Confinement potential V(x₁, ..., x_d) from a SymPy expression.

    Parameters
    ----------
    expr : sp.Expr
        Potential expression
    coordinates : Sequence[sp.Symbol]
        One symbol per axis, in axis order; fixes the dimension
    parameters : Optional[Dict[sp.Symbol, float]]
        Values substituted for the remaining symbols

    Raises
    ------
    ValueError
        If symbols other than coordinates remain after substitution
    """

    def __init__(
        self,
        expr: sp.Expr,
        coordinates: Sequence[sp.Symbol],
        parameters: Optional[Dict[sp.Symbol, float]] = None,
    ):
        if len(coordinates) == 0:
            raise ValueError("At least one coordinate symbol is required")
        expr = _substitute_parameters(expr, coordinates, parameters)
        self._field = _CompiledField(expr, coordinates)
        self.dim = len(coordinates)

    @property
    def expr(self) -> sp.Expr:
        return self._field.expr

    @property
    def gradient_exprs(self):
        """Symbolic partial derivatives, one per coordinate."""
        return list(self._field.gradient_exprs)

    def evaluate(self, x):
        return self._field.value(x)

    def gradient(self, x, out: Optional[np.ndarray] = None):
        return self._field.gradient(x, out)

    def __repr__(self) -> str:
        return f"SymbolicConfinement({self.expr})"


class SymbolicRadialInteraction(RadialInteraction):
    """
    Radial interaction Φ(r) from a SymPy expression in one distance symbol.

    Parameters
    ----------
    expr : sp.Expr
        Potential expression
    r : sp.Symbol
        Distance symbol
    parameters : Optional[Dict[sp.Symbol, float]]
        Values substituted for the remaining symbols
    """

    def __init__(
        self,
        expr: sp.Expr,
        r: sp.Symbol,
        parameters: Optional[Dict[sp.Symbol, float]] = None,
    ):
        self.r = r
        self.expr = _substitute_parameters(expr, [r], parameters)
        self.derivative_expr = sp.diff(self.expr, r)

        self._value_fn = sp.lambdify(r, self.expr, modules="numpy")
        self._derivative_fn = sp.lambdify(r, self.derivative_expr, modules="numpy")

    def evaluate(self, r):
        r = np.asarray(r, dtype=np.float64)
        return _broadcast(self._value_fn(r), r.shape)

    def gradient(self, r):
        r = np.asarray(r, dtype=np.float64)
        return _broadcast(self._derivative_fn(r), r.shape)

    def __repr__(self) -> str:
        return f"SymbolicRadialInteraction({self.expr})"


class SymbolicVectorInteraction(VectorInteraction):
    """
    Anisotropic interaction Φ(z₁, ..., z_d) from a SymPy expression.

    Parameters
    ----------
    expr : sp.Expr
        Potential expression in the displacement components
    coordinates : Sequence[sp.Symbol]
        One symbol per displacement axis; fixes the dimension
    parameters : Optional[Dict[sp.Symbol, float]]
        Values substituted for the remaining symbols
    """

    def __init__(
        self,
        expr: sp.Expr,
        coordinates: Sequence[sp.Symbol],
        parameters: Optional[Dict[sp.Symbol, float]] = None,
    ):
        if len(coordinates) == 0:
            raise ValueError("At least one coordinate symbol is required")
        expr = _substitute_parameters(expr, coordinates, parameters)
        self._field = _CompiledField(expr, coordinates)
        self.dim = len(coordinates)

    @property
    def expr(self) -> sp.Expr:
        return self._field.expr

    def evaluate(self, z):
        return self._field.value(z)

    def gradient(self, z, out: Optional[np.ndarray] = None):
        return self._field.gradient(z, out)

    def __repr__(self) -> str:
        return f"SymbolicVectorInteraction({self.expr})"
