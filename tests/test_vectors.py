"""
Tests for alpha-vectors, vector-set helpers and the convergence metric.
"""

import numpy as np
import pytest

from pomdpsolve.solver import (
    AlphaVector,
    best_values_at_beliefs,
    find_best_at_belief,
    weak_bound_distance,
)
from pomdpsolve.solver.vectors import make_pessimistic_vlist, values_matrix
from pomdpsolve.utils import validate_vector_set


def test_alpha_vector_is_immutable():
    source = np.array([1.0, 2.0])
    v = AlphaVector(source, action=1, observations=[0, 2])

    source[0] = 100.0
    assert v.values[0] == 1.0, "Values must be copied on construction"

    with pytest.raises(ValueError):
        v.values[0] = 5.0

    assert v.observations == (0, 2)
    assert v.value_at(np.array([0.5, 0.5])) == pytest.approx(1.5)


def test_with_witness_returns_new_vector():
    v = AlphaVector([1.0, 0.0], action=2)
    w = v.with_witness(np.array([1.0, 0.0]))

    assert v.witness is None
    assert w is not v
    assert np.array_equal(w.values, v.values) and w.action == 2
    assert np.array_equal(w.witness, [1.0, 0.0])


def test_as_carried_flags_a_copy():
    v = AlphaVector([1.0, 0.0], action=1, observations=(0, 1))
    c = v.as_carried()

    assert not v.carried and c.carried
    assert c.observations == v.observations and c.action == 1
    assert c.as_carried() is c
    assert c.with_witness(np.array([1.0, 0.0])).carried


def test_find_best_at_belief_first_on_ties():
    vlist = (AlphaVector([1.0, 0.0]), AlphaVector([0.0, 1.0]), AlphaVector([0.5, 0.5]))

    assert find_best_at_belief(np.array([0.5, 0.5]), vlist) == (0, 0.5)
    assert find_best_at_belief(np.array([0.2, 0.8]), vlist) == (1, 0.8)

    with pytest.raises(ValueError):
        find_best_at_belief(np.array([0.5, 0.5]), ())


def test_best_values_at_beliefs():
    vlist = (AlphaVector([1.0, 0.0]), AlphaVector([0.0, 1.0]))
    beliefs = np.array([[1.0, 0.0], [0.3, 0.7], [0.5, 0.5]])

    assert np.allclose(best_values_at_beliefs(beliefs, vlist), [1.0, 0.7, 0.5])


def test_pessimistic_vlist():
    vlist = make_pessimistic_vlist(2, -10.0, 0.95)

    assert len(vlist) == 1
    assert np.allclose(vlist[0].values, [-200.0, -200.0])

    with pytest.raises(ValueError):
        make_pessimistic_vlist(2, -10.0, 1.0)


def test_weak_bound_distance_zero_for_same_set_reordered():
    a = (AlphaVector([1.0, 2.0]), AlphaVector([3.0, -1.0]))
    b = (a[1], a[0])

    assert weak_bound_distance(a, b) == 0.0


def test_weak_bound_distance_positive_and_one_sided():
    old = (AlphaVector([0.0, 0.0]),)
    new = (AlphaVector([0.0, 0.0]), AlphaVector([0.5, -2.0]))

    # Every new vector is measured against its closest old vector
    assert weak_bound_distance(old, new) == pytest.approx(2.0)
    # Old vectors missing from the new set do not count
    assert weak_bound_distance(new, old) == 0.0


def test_validate_vector_set():
    vlist = (AlphaVector([1.0, 2.0]),)
    assert validate_vector_set(vlist, 2)
    assert values_matrix(vlist).shape == (1, 2)

    with pytest.raises(ValueError):
        validate_vector_set((), 2)
    with pytest.raises(ValueError):
        validate_vector_set((AlphaVector([np.inf, 0.0]),), 2)
    with pytest.raises(ValueError):
        validate_vector_set(vlist, 3)
