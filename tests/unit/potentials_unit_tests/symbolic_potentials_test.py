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
Unit tests for SymPy-backed potentials and potential profiles.

Tests cover:
1. SymbolicConfinement against closed-form potentials
2. SymbolicRadialInteraction against closed-form interactions
3. SymbolicVectorInteraction
4. Parameter substitution warnings and errors
5. Integration with the integrator
6. potential_profile sampling
"""

import numpy as np
import pytest
import sympy as sp

from ipsim.integrators import EulerMaruyamaIntegrator
from ipsim.potentials import (
    AnisotropicGaussianInteraction,
    DoubleWellPotential,
    HarmonicPotential,
    InteractionKind,
    InverseInteraction,
    MorsePotential,
    SymbolicConfinement,
    SymbolicRadialInteraction,
    SymbolicVectorInteraction,
    potential_profile,
)


@pytest.fixture
def xy():
    return sp.symbols("x y", real=True)


@pytest.fixture
def r():
    return sp.symbols("r", nonnegative=True)


@pytest.fixture
def sample_points():
    return np.random.default_rng(3).normal(size=(6, 2))


# ============================================================================
# Test Class 1: Symbolic Confinement
# ============================================================================


class TestSymbolicConfinement:
    """Test confinement potentials built from expressions"""

    def test_double_well_matches_closed_form(self, xy, sample_points):
        x, y = xy
        V_sym = SymbolicConfinement((x**2 + y**2 - 1) ** 2 / 4, [x, y])
        V = DoubleWellPotential()

        np.testing.assert_allclose(V_sym.evaluate(sample_points), V.evaluate(sample_points))
        np.testing.assert_allclose(V_sym.gradient(sample_points), V.gradient(sample_points))

    def test_parameters_substituted(self, xy, sample_points):
        x, y = xy
        k = sp.symbols("k", positive=True)
        V_sym = SymbolicConfinement(k * (x**2 + y**2) / 2, [x, y], {k: 2.5})

        np.testing.assert_allclose(
            V_sym.gradient(sample_points), HarmonicPotential(2.5).gradient(sample_points)
        )
        assert k not in V_sym.expr.free_symbols

    def test_gradient_exprs(self, xy):
        x, y = xy
        V_sym = SymbolicConfinement(x**2 + 3 * y, [x, y])
        assert V_sym.gradient_exprs == [2 * x, 3]

    def test_constant_partial_derivative_broadcast(self, xy, sample_points):
        """A derivative independent of the coordinates still yields one value per point"""
        x, y = xy
        V_sym = SymbolicConfinement(x**2 + 3 * y, [x, y])

        grad = V_sym.gradient(sample_points)

        assert grad.shape == sample_points.shape
        np.testing.assert_allclose(grad[:, 1], 3.0)
        np.testing.assert_allclose(grad[:, 0], 2 * sample_points[:, 0])

    def test_single_point_and_out(self, xy):
        x, y = xy
        V_sym = SymbolicConfinement(x**2 + y**2, [x, y])
        out = np.empty(2)

        result = V_sym.gradient(np.array([1.0, -2.0]), out=out)

        assert result is out
        np.testing.assert_allclose(out, [2.0, -4.0])

    def test_dimension_from_coordinates(self, xy):
        x, y = xy
        V_sym = SymbolicConfinement(x**2 + y**2, [x, y])
        assert V_sym.dim == 2
        with pytest.raises(ValueError):
            V_sym.check_dimension(3)

    def test_wrong_point_dimension(self, xy):
        x, y = xy
        V_sym = SymbolicConfinement(x**2 + y**2, [x, y])
        with pytest.raises(ValueError, match="last axis"):
            V_sym.evaluate(np.zeros(3))

    def test_no_coordinates(self, xy):
        with pytest.raises(ValueError):
            SymbolicConfinement(sp.Integer(1), [])


# ============================================================================
# Test Class 2: Symbolic Radial Interaction
# ============================================================================


class TestSymbolicRadialInteraction:
    """Test radial interactions built from expressions"""

    def test_inverse_matches_closed_form(self, r):
        gamma = sp.symbols("gamma", positive=True)
        phi_sym = SymbolicRadialInteraction(gamma / (r + 1), r, {gamma: 0.5})
        phi = InverseInteraction(0.5)

        distances = np.linspace(0.0, 3.0, 31)
        np.testing.assert_allclose(phi_sym.evaluate(distances), phi.evaluate(distances))
        np.testing.assert_allclose(phi_sym.gradient(distances), phi.gradient(distances))

    def test_morse_matches_closed_form(self, r):
        D, a, r0 = sp.symbols("D a r0", positive=True)
        expr = D * (1 - sp.exp(-a * (r - r0))) ** 2
        phi_sym = SymbolicRadialInteraction(expr, r, {D: 0.5, a: 2.0, r0: 0.8})
        phi = MorsePotential(0.5, 2.0, 0.8)

        # r0 = 0.8 is the well bottom, where both value and slope vanish
        distances = np.array([[0.2, 0.8], [1.4, 2.5]])
        np.testing.assert_allclose(
            phi_sym.evaluate(distances), phi.evaluate(distances), rtol=1e-9, atol=1e-12
        )
        np.testing.assert_allclose(
            phi_sym.gradient(distances), phi.gradient(distances), rtol=1e-9, atol=1e-12
        )
        assert phi_sym.evaluate(0.8) == pytest.approx(0.0, abs=1e-12)

    def test_kind_and_derivative_expr(self, r):
        phi_sym = SymbolicRadialInteraction(sp.exp(-(r**2)), r)
        assert phi_sym.kind is InteractionKind.RADIAL
        assert sp.simplify(phi_sym.derivative_expr + 2 * r * sp.exp(-(r**2))) == 0

    def test_constant_interaction_has_zero_force(self, r):
        phi_sym = SymbolicRadialInteraction(sp.Integer(2), r)
        distances = np.ones((3, 3))
        np.testing.assert_array_equal(phi_sym.gradient(distances), np.zeros((3, 3)))


# ============================================================================
# Test Class 3: Symbolic Vector Interaction
# ============================================================================


class TestSymbolicVectorInteraction:
    """Test vector interactions built from expressions"""

    def test_anisotropic_gaussian_matches_closed_form(self, xy):
        z1, z2 = xy
        expr = 2 * sp.exp(-(z1**2 / sp.Rational(1, 4) + z2**2 / sp.Rational(9, 4)) / 2)
        phi_sym = SymbolicVectorInteraction(expr, [z1, z2])
        phi = AnisotropicGaussianInteraction(2.0, [0.5, 1.5])

        z = np.random.default_rng(1).normal(size=(3, 3, 2))
        np.testing.assert_allclose(phi_sym.evaluate(z), phi.evaluate(z))
        np.testing.assert_allclose(phi_sym.gradient(z), phi.gradient(z))
        assert phi_sym.kind is InteractionKind.VECTOR
        assert phi_sym.dim == 2


# ============================================================================
# Test Class 4: Parameter Handling
# ============================================================================


class TestParameterHandling:
    """Test substitution diagnostics"""

    def test_unused_parameter_warns(self, xy):
        x, y = xy
        unused = sp.symbols("unused")
        with pytest.warns(UserWarning, match="unused"):
            SymbolicConfinement(x**2 + y**2, [x, y], {unused: 1.0})

    def test_unbound_symbol_raises(self, xy):
        x, y = xy
        k = sp.symbols("k")
        with pytest.raises(ValueError, match="unbound symbols"):
            SymbolicConfinement(k * x**2 + y**2, [x, y])

    def test_unbound_symbol_in_radial(self, r):
        c = sp.symbols("c")
        with pytest.raises(ValueError, match="c"):
            SymbolicRadialInteraction(c / (r + 1), r)


# ============================================================================
# Test Class 5: Integration
# ============================================================================


class TestSymbolicIntegration:
    """Test that symbolic potentials drive the integrator like closed forms"""

    def test_trajectory_matches_closed_form(self, xy, r):
        x, y = xy
        V_sym = SymbolicConfinement((x**2 + y**2 - 1) ** 2 / 4, [x, y])
        phi_sym = SymbolicRadialInteraction(sp.Rational(1, 2) / (r + 1), r)

        kwargs = dict(sigma=0.1, dt=0.01, n_particles=5, dim=2, seed=11)
        symbolic = EulerMaruyamaIntegrator(V_sym, phi_sym, **kwargs)
        closed = EulerMaruyamaIntegrator(DoubleWellPotential(), InverseInteraction(0.5), **kwargs)

        a = symbolic.simulate(20)
        b = closed.simulate(20)

        np.testing.assert_allclose(a[-1].positions, b[-1].positions, rtol=1e-10, atol=1e-12)


# ============================================================================
# Test Class 6: Potential Profiles
# ============================================================================


class TestPotentialProfile:
    """Test 1-D sampling of potentials"""

    def test_confinement_along_first_axis(self):
        t = np.linspace(-2.0, 2.0, 41)
        curve = potential_profile(DoubleWellPotential(), t)
        np.testing.assert_allclose(curve, 0.25 * (t**2 - 1) ** 2)

    def test_radial_uses_absolute_value(self):
        t = np.linspace(-3.0, 3.0, 61)
        curve = potential_profile(InverseInteraction(0.5), t)
        np.testing.assert_allclose(curve, 0.5 / (np.abs(t) + 1))

    def test_vector_embedded(self):
        t = np.linspace(-1.0, 1.0, 11)
        curve = potential_profile(AnisotropicGaussianInteraction(2.0, [0.5, 1.5]), t)
        np.testing.assert_allclose(curve, 2.0 * np.exp(-0.5 * t**2 / 0.25))

    def test_explicit_dimension(self):
        t = np.linspace(0.0, 1.0, 5)
        curve = potential_profile(HarmonicPotential(2.0), t, dim=3)
        np.testing.assert_allclose(curve, t**2)

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError):
            potential_profile(AnisotropicGaussianInteraction(), np.zeros(3), dim=3)

    def test_not_a_potential(self):
        with pytest.raises(TypeError):
            potential_profile(lambda t: t, np.zeros(3))
