"""
Tests for the one-step projection.
"""

import numpy as np
import pytest

from pomdpsolve.solver import AlphaVector, PointPruner, Projecter


def test_table_shape_and_tags(two_state):
    vlist = (AlphaVector([1.0, 2.0]), AlphaVector([-3.0, 0.5]))

    table = Projecter(two_state)(vlist)

    assert len(table) == two_state.n_actions
    for a, row in enumerate(table):
        assert len(row) == two_state.n_observations
        for cell in row:
            assert len(cell) == len(vlist)
            assert [v.observations for v in cell] == [(0,), (1,)]
            assert all(v.action == a for v in cell)


def test_projections_sum_to_bellman_backup(random_model):
    """Summing one projection of v per observation gives R + gamma * T v."""
    v = np.array([1.0, -2.0, 4.0])

    table = Projecter(random_model).project((AlphaVector(v),))

    for a, label in enumerate(random_model.A):
        total = sum(cell[0].values for cell in table[a])
        expected = random_model.expected_rewards[:, a] + random_model.gamma * random_model.T[label] @ v
        assert np.allclose(total, expected)


def test_single_projection_values(two_state):
    v = np.array([10.0, -4.0])

    table = Projecter(two_state).project((AlphaVector(v),))

    # wait / alarm: R/|O| + gamma * sum_s' T(s, s') Z(s', alarm) v(s')
    T = two_state.T["wait"]
    Z = two_state.Z["wait"][:, 1]
    expected = two_state.expected_rewards[:, 0] / 2 + 0.95 * T @ (Z * v)
    assert np.allclose(table[0][1][0].values, expected)


def test_projection_cells_can_be_pruned(two_state):
    vlist = (AlphaVector([1.0, 1.0]), AlphaVector([0.0, 0.0]), AlphaVector([2.0, -5.0]))
    beliefs = np.array([[0.5, 0.5]])

    table = Projecter(two_state, pruner=PointPruner()).project(vlist, beliefs)

    for row in table:
        for cell in row:
            assert len(cell) == 1


def test_projecting_empty_set_fails(two_state):
    with pytest.raises(ValueError):
        Projecter(two_state).project(())
