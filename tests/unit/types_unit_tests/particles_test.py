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
Unit tests for particle state types.

Tests cover:
1. ParticleState construction and validation
2. Views onto the flat buffer
3. Copies
4. Snapshot stacking
"""

import numpy as np
import pytest

from ipsim.types import IntegratorStats, ParticleState, stack_snapshots


# ============================================================================
# Test Class 1: Construction
# ============================================================================


class TestParticleStateConstruction:
    """Test ParticleState creation"""

    def test_basic(self):
        state = ParticleState(np.arange(6.0), n_particles=3, dim=2)
        assert state.n_particles == 3
        assert state.dim == 2
        assert len(state) == 3
        assert state.positions.dtype == np.float64

    def test_integer_input_converted(self):
        state = ParticleState([1, 2, 3, 4], 2, 2)
        assert state.positions.dtype == np.float64
        np.testing.assert_array_equal(state.positions, [1.0, 2.0, 3.0, 4.0])

    def test_from_matrix_copies(self):
        matrix = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        state = ParticleState.from_matrix(matrix)
        matrix[0, 0] = 99.0

        assert (state.n_particles, state.dim) == (3, 2)
        assert state.positions[0] == 1.0

    @pytest.mark.parametrize(
        "positions,n,d",
        [
            (np.zeros(5), 3, 2),
            (np.zeros((3, 2)), 3, 2),
            (np.zeros(0), 0, 2),
            (np.zeros(4), 2, 0),
        ],
    )
    def test_invalid(self, positions, n, d):
        with pytest.raises(ValueError):
            ParticleState(positions, n, d)

    def test_from_matrix_requires_2d(self):
        with pytest.raises(ValueError, match="N, d"):
            ParticleState.from_matrix(np.zeros(4))

    def test_repr(self):
        assert repr(ParticleState(np.zeros(6), 2, 3)) == "ParticleState(n_particles=2, dim=3)"


# ============================================================================
# Test Class 2: Views
# ============================================================================


class TestViews:
    """Test that matrix and particle access share memory"""

    def test_as_matrix_is_view(self):
        state = ParticleState(np.arange(6.0), 3, 2)
        matrix = state.as_matrix()
        matrix[1, 0] = -1.0

        assert np.shares_memory(matrix, state.positions)
        assert state.positions[2] == -1.0

    def test_particle_slots(self):
        state = ParticleState(np.arange(6.0), 3, 2)
        np.testing.assert_array_equal(state.particle(0), [0.0, 1.0])
        np.testing.assert_array_equal(state.particle(2), [4.0, 5.0])

        state.particle(1)[:] = 7.0
        np.testing.assert_array_equal(state.positions, [0.0, 1.0, 7.0, 7.0, 4.0, 5.0])

    @pytest.mark.parametrize("index", [-1, 3])
    def test_particle_out_of_range(self, index):
        with pytest.raises(IndexError):
            ParticleState(np.zeros(6), 3, 2).particle(index)


# ============================================================================
# Test Class 3: Copies
# ============================================================================


class TestCopy:
    """Test independent snapshots"""

    def test_copy_independent(self):
        state = ParticleState(np.ones(4), 2, 2)
        snapshot = state.copy()
        state.positions[:] = 0.0

        np.testing.assert_array_equal(snapshot.positions, 1.0)
        assert (snapshot.n_particles, snapshot.dim) == (2, 2)


# ============================================================================
# Test Class 4: Stacking
# ============================================================================


class TestStackSnapshots:
    """Test trajectory assembly"""

    def test_shape_and_order(self):
        snapshots = [ParticleState(np.full(6, float(k)), 3, 2) for k in range(4)]
        trajectory = stack_snapshots(snapshots)

        assert trajectory.shape == (4, 3, 2)
        np.testing.assert_array_equal(trajectory[:, 0, 0], [0.0, 1.0, 2.0, 3.0])

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            stack_snapshots([])

    def test_inconsistent_shapes(self):
        with pytest.raises(ValueError, match="inconsistent"):
            stack_snapshots([ParticleState(np.zeros(4), 2, 2), ParticleState(np.zeros(6), 3, 2)])

    def test_integrator_stats_keys(self):
        assert set(IntegratorStats.__annotations__) == {
            "total_steps",
            "total_pair_evaluations",
            "total_noise_draws",
            "total_initializations",
            "avg_pair_evaluations_per_step",
            "avg_noise_draws_per_step",
        }
