"""
Shared models for the test suite.
"""

from pathlib import Path

import numpy as np
import pytest

from pomdpsolve.pomdp import POMDP, load_problem

PROBLEMS_DIR = Path(__file__).parent.parent / "problems"


@pytest.fixture
def tiger() -> POMDP:
    return load_problem(PROBLEMS_DIR / "tiger.yaml")


@pytest.fixture
def two_state() -> POMDP:
    """2 states, 2 actions, 2 observations, discount 0.95, rewards >= -10."""
    return POMDP(
        S=["good", "bad"],
        A=["wait", "fix"],
        O=["ok", "alarm"],
        T={
            "wait": np.array([[0.9, 0.1], [0.2, 0.8]]),
            "fix": np.array([[0.5, 0.5], [0.5, 0.5]]),
        },
        Z={
            "wait": np.array([[0.8, 0.2], [0.3, 0.7]]),
            "fix": np.array([[0.5, 0.5], [0.5, 0.5]]),
        },
        R={
            "wait": np.array([1.0, -2.0]),
            "fix": np.array([5.0, -10.0]),
        },
        gamma=0.95,
    )


@pytest.fixture
def one_state() -> POMDP:
    return POMDP(
        S=["only"],
        A=["low", "high"],
        O=["nothing"],
        T={"low": np.array([[1.0]]), "high": np.array([[1.0]])},
        Z={"low": np.array([[1.0]]), "high": np.array([[1.0]])},
        R={"low": np.array([1.0]), "high": np.array([2.0])},
        gamma=0.9,
    )


@pytest.fixture
def random_model() -> POMDP:
    """Asymmetric 3x3x3 model without ties between actions."""
    rng = np.random.default_rng(7)
    T = rng.dirichlet(np.ones(3), size=(3, 3))
    Z = rng.dirichlet(np.ones(3), size=(3, 3))
    R = rng.uniform(-5.0, 5.0, size=(3, 3))
    return POMDP.from_arrays(T, Z, R, gamma=0.9)
