"""
End-to-end tests for the PERSEUS iteration controller.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from pomdpsolve.solver import PERSEUS, SolverConfig, ValueFunctionPolicy, best_values_at_beliefs, solve
from pomdpsolve.utils import validate_vector_set


def test_two_state_scenario(two_state):
    """2 states / 2 actions / 2 observations, discount 0.95, minReward -10."""
    solver = PERSEUS(belief_size=50, horizon=10, epsilon=0.01, rng=np.random.default_rng(0))

    result = solver.solve(two_state, -10.0)

    assert result.iterations <= 10
    assert len(result.value_function) == result.iterations + 1
    assert len(result.value_function[0]) == 1
    assert np.allclose(result.value_function[0][0].values, [-200.0, -200.0])

    for vlist in result.value_function:
        assert validate_vector_set(vlist, two_state.n_states)
        for v in vlist:
            assert np.all(v.values >= -200.0 - 1e-9), f"{v} falls below the pessimistic bound"


def test_horizon_bound_without_epsilon(two_state):
    solver = PERSEUS(belief_size=20, horizon=7, epsilon=0.0, rng=np.random.default_rng(0))

    variation, value_function = solver(two_state, -10.0)

    assert variation == 0.0
    assert len(value_function) == 8


def test_zero_horizon_returns_initialization(two_state):
    result = PERSEUS(belief_size=5, horizon=0, epsilon=0.0).solve(two_state, -10.0)

    assert result.iterations == 0
    assert len(result.value_function) == 1


def test_values_improve_at_sampled_beliefs(random_model):
    result = PERSEUS(belief_size=40, horizon=15, epsilon=0.0, rng=np.random.default_rng(4)).solve(
        random_model, random_model.min_reward
    )

    for previous, current in zip(result.value_function, result.value_function[1:]):
        assert np.all(
            best_values_at_beliefs(result.beliefs, current)
            >= best_values_at_beliefs(result.beliefs, previous) - 1e-9
        )


def test_epsilon_stops_early(tiger):
    result = PERSEUS(belief_size=100, horizon=1000, epsilon=0.05, rng=np.random.default_rng(0)).solve(
        tiger, tiger.min_reward
    )

    assert result.iterations < 1000
    assert 0.0 <= result.variation <= 0.05


def test_discount_of_one_is_rejected(two_state):
    two_state.gamma = 1.0
    solver = PERSEUS(belief_size=10, horizon=5, epsilon=0.0)

    with pytest.raises(ValueError):
        solver.solve(two_state, -10.0)


def test_one_state_model_keeps_one_vector(one_state):
    result = PERSEUS(belief_size=5, horizon=20, epsilon=0.0).solve(one_state, 1.0)

    for vlist in result.value_function:
        assert len(vlist) == 1
    # Always taking the best action is worth 2 / (1 - 0.9) in the limit
    final = result.final[0]
    assert one_state.A[final.action] == "high"
    assert 2.0 < final.values[0] <= 20.0


def test_tiger_policy(tiger):
    result = solve(
        tiger,
        config=SolverConfig(belief_size=200, horizon=150, epsilon=0.001, seed=0),
    )
    policy = ValueFunctionPolicy(tiger, result.value_function)

    assert policy(np.array([0.5, 0.5])) == "listen"
    assert policy(np.array([1.0, 0.0])) == "open-right"
    assert policy(np.array([0.0, 1.0])) == "open-left"

    values = policy.action_values(np.array([0.5, 0.5]))
    assert set(values) == set(tiger.A)
    assert values["listen"] == pytest.approx(policy.sample_action(np.array([0.5, 0.5]))[1])


def test_witness_mode(tiger):
    result = solve(
        tiger,
        config=SolverConfig(belief_size=30, horizon=10, epsilon=0.0, prune_mode="witness", seed=1),
    )

    assert len(result.value_function) == 11
    for vlist in result.value_function[1:]:
        assert len(vlist) > 0
        assert all(v.witness is not None for v in vlist)


def test_same_seed_same_solution(random_model):
    config = SolverConfig(belief_size=30, horizon=5, epsilon=0.0, seed=9)

    first = solve(random_model, config=config)
    second = solve(random_model, config=config)

    for a, b in zip(first.value_function, second.value_function):
        assert len(a) == len(b)
        assert all(np.array_equal(x.values, y.values) for x, y in zip(a, b))


def test_invalid_parameters():
    with pytest.raises(ValueError):
        PERSEUS(belief_size=10, horizon=5, epsilon=-0.1)
    with pytest.raises(ValueError):
        PERSEUS(belief_size=0, horizon=5, epsilon=0.0)

    solver = PERSEUS(belief_size=10, horizon=5, epsilon=0.0)
    with pytest.raises(ValueError):
        solver.horizon = -1

    with pytest.raises(ValidationError):
        SolverConfig(epsilon=-1.0)
    with pytest.raises(ValidationError):
        SolverConfig(prune_mode="fastest")
    with pytest.raises(ValidationError):
        SolverConfig(projection_prune="fastest")


@pytest.mark.parametrize("model_name", ["two_state", "random_model"])
def test_point_pruned_projections_keep_values(model_name, request):
    pomdp = request.getfixturevalue(model_name)
    plain = solve(pomdp, config=SolverConfig(belief_size=30, horizon=8, epsilon=0.0, seed=3))
    pruned = solve(
        pomdp,
        config=SolverConfig(belief_size=30, horizon=8, epsilon=0.0, seed=3, projection_prune="point"),
    )

    assert np.array_equal(plain.beliefs, pruned.beliefs)
    assert len(plain.value_function) == len(pruned.value_function)
    for a, b in zip(plain.value_function, pruned.value_function):
        assert np.allclose(best_values_at_beliefs(plain.beliefs, a), best_values_at_beliefs(plain.beliefs, b))


def test_witness_pruned_projections(tiger):
    result = solve(
        tiger,
        config=SolverConfig(belief_size=20, horizon=5, epsilon=0.0, seed=2, projection_prune="witness"),
    )

    assert len(result.value_function) == 6
    for vlist in result.value_function:
        assert validate_vector_set(vlist, tiger.n_states)


def test_strategies_point_into_previous_set(two_state, caplog):
    # No one-step reward beats a zero initial value at the uniform belief
    with caplog.at_level("WARNING"):
        result = solve(
            two_state, min_reward=0.0,
            config=SolverConfig(belief_size=20, horizon=6, epsilon=0.0, seed=0),
        )

    assert any("not a lower bound" in record.getMessage() for record in caplog.records)

    carried = [v for v in result.value_function[1] if v.carried]
    assert carried and carried[0].observations == ()

    for depth in range(1, len(result.value_function)):
        previous = result.value_function[depth - 1]
        for v in result.value_function[depth]:
            if v.carried:
                continue
            assert len(v.observations) == two_state.n_observations
            assert all(0 <= k < len(previous) for k in v.observations)


def test_policy_on_chosen_horizon(two_state):
    result = PERSEUS(belief_size=10, horizon=3, epsilon=0.0, rng=np.random.default_rng(0)).solve(
        two_state, -10.0
    )

    policy = ValueFunctionPolicy(two_state, result.value_function, horizon=0)

    assert policy.vlist is result.value_function[0]
    assert policy.sample_action(np.array([0.5, 0.5]))[1] == pytest.approx(-200.0)
