"""
POMDP model definitions and problem file loading.
"""

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass
class POMDP:
    """
    Partially Observable Markov Decision Process.

    Attributes:
        S: List of state labels
        A: List of action labels
        O: List of observation labels
        T: Transition probabilities T[a][s, s'] = P(s' | s, a)
        Z: Observation probabilities Z[a][s', o] = P(o | s', a)
        R: Rewards, either R[a][s] = R(s, a) or R[a][s, s'] = R(s, a, s')
        gamma: Discount factor in [0, 1]
    """
    S: List[str]
    A: List[str]
    O: List[str]
    T: Dict[str, np.ndarray]  # T[a] is |S| x |S| matrix
    Z: Dict[str, np.ndarray]  # Z[a] is |S| x |O| matrix
    R: Dict[str, np.ndarray]  # R[a] is |S| vector or |S| x |S| matrix
    gamma: float = 0.95

    def __post_init__(self):
        """Validate POMDP structure."""
        n_states = len(self.S)
        n_obs = len(self.O)

        if n_states == 0 or len(self.A) == 0 or n_obs == 0:
            raise ValueError("POMDP needs at least one state, action and observation")

        if not 0.0 <= self.gamma <= 1.0:
            raise ValueError(f"Discount factor must be in [0, 1], got {self.gamma}")

        for a in self.A:
            if a not in self.T:
                raise ValueError(f"Missing transition matrix for action {a}")
            T_a = np.asarray(self.T[a], dtype=float)
            if T_a.shape != (n_states, n_states):
                raise ValueError(
                    f"T[{a}] has shape {T_a.shape}, expected ({n_states}, {n_states})"
                )
            if np.any(T_a < 0) or not np.allclose(T_a.sum(axis=1), 1.0, atol=1e-6):
                raise ValueError(f"T[{a}] rows are not probability distributions")
            self.T[a] = T_a

        for a in self.A:
            if a not in self.Z:
                raise ValueError(f"Missing emission matrix for action {a}")
            Z_a = np.asarray(self.Z[a], dtype=float)
            if Z_a.shape != (n_states, n_obs):
                raise ValueError(
                    f"Z[{a}] has shape {Z_a.shape}, expected ({n_states}, {n_obs})"
                )
            if np.any(Z_a < 0) or not np.allclose(Z_a.sum(axis=1), 1.0, atol=1e-6):
                raise ValueError(f"Z[{a}] rows are not probability distributions")
            self.Z[a] = Z_a

        for a in self.A:
            if a not in self.R:
                raise ValueError(f"Missing reward matrix for action {a}")
            R_a = np.asarray(self.R[a], dtype=float)
            if R_a.shape not in ((n_states,), (n_states, n_states)):
                raise ValueError(
                    f"R[{a}] has shape {R_a.shape}, expected ({n_states},) "
                    f"or ({n_states}, {n_states})"
                )
            if not np.all(np.isfinite(R_a)):
                raise ValueError(f"R[{a}] contains non-finite rewards")
            self.R[a] = R_a

    @classmethod
    def from_arrays(
        cls,
        T: np.ndarray,
        Z: np.ndarray,
        R: np.ndarray,
        gamma: float = 0.95,
        states: Optional[Sequence[str]] = None,
        actions: Optional[Sequence[str]] = None,
        observations: Optional[Sequence[str]] = None,
    ) -> "POMDP":
        """
        Build a POMDP from stacked tensors.

        Args:
            T: Transitions, shape (|A|, |S|, |S|)
            Z: Observations, shape (|A|, |S|, |O|)
            R: Rewards, shape (|A|, |S|) or (|A|, |S|, |S|)
            gamma: Discount factor
            states, actions, observations: Optional labels (generated if None)

        Returns:
            POMDP model
        """
        T = np.asarray(T, dtype=float)
        Z = np.asarray(Z, dtype=float)
        R = np.asarray(R, dtype=float)
        if T.ndim != 3 or Z.ndim != 3:
            raise ValueError("T and Z must be three-dimensional (action-major)")

        n_actions, n_states, _ = T.shape
        n_obs = Z.shape[2]

        S = list(states) if states is not None else [f"s{i}" for i in range(n_states)]
        A = list(actions) if actions is not None else [f"a{i}" for i in range(n_actions)]
        O = list(observations) if observations is not None else [f"o{i}" for i in range(n_obs)]
        if len(A) != n_actions or Z.shape[0] != n_actions or R.shape[0] != n_actions:
            raise ValueError("T, Z and R must agree on the number of actions")

        return cls(
            S=S,
            A=A,
            O=O,
            T={a: T[i] for i, a in enumerate(A)},
            Z={a: Z[i] for i, a in enumerate(A)},
            R={a: R[i] for i, a in enumerate(A)},
            gamma=gamma,
        )

    @property
    def n_states(self) -> int:
        return len(self.S)

    @property
    def n_actions(self) -> int:
        return len(self.A)

    @property
    def n_observations(self) -> int:
        return len(self.O)

    @cached_property
    def transition_tensor(self) -> np.ndarray:
        """Transitions stacked as (|A|, |S|, |S|)."""
        return np.stack([self.T[a] for a in self.A])

    @cached_property
    def observation_tensor(self) -> np.ndarray:
        """Observation probabilities stacked as (|A|, |S|, |O|)."""
        return np.stack([self.Z[a] for a in self.A])

    @cached_property
    def expected_rewards(self) -> np.ndarray:
        """
        Expected immediate reward R(s, a), shape (|S|, |A|).

        Rewards given per transition are averaged over next states.
        """
        columns = []
        for a in self.A:
            R_a = self.R[a]
            if R_a.ndim == 1:
                columns.append(R_a)
            else:
                columns.append((self.T[a] * R_a).sum(axis=1))
        return np.stack(columns, axis=1)

    @property
    def min_reward(self) -> float:
        """Smallest expected immediate reward over all state-action pairs."""
        return float(self.expected_rewards.min())


class ProblemConfig(BaseModel):
    """Schema for YAML problem files."""

    name: str = Field(..., description="Problem name")
    description: Optional[str] = Field(default=None, description="Problem description")
    gamma: float = Field(..., ge=0, le=1, description="Discount factor")

    states: List[str] = Field(..., min_length=1, description="State labels")
    actions: List[str] = Field(..., min_length=1, description="Action labels")
    observations: List[str] = Field(..., min_length=1, description="Observation labels")

    transitions: Dict[str, List[List[float]]] = Field(..., description="T[a][s][s']")
    emissions: Dict[str, List[List[float]]] = Field(..., description="Z[a][s'][o]")
    rewards: Dict[str, Union[List[List[float]], List[float]]] = Field(
        ..., description="R[a][s] or R[a][s][s']"
    )

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_action_keys(self):
        """Every table must be keyed by exactly the declared actions."""
        expected = set(self.actions)
        for table_name in ("transitions", "emissions", "rewards"):
            keys = set(getattr(self, table_name))
            if keys != expected:
                raise ValueError(
                    f"{table_name} keys {sorted(keys)} do not match actions {sorted(expected)}"
                )
        return self

    def to_pomdp(self) -> POMDP:
        """Build the POMDP model described by this config."""
        return POMDP(
            S=list(self.states),
            A=list(self.actions),
            O=list(self.observations),
            T={a: np.array(m, dtype=float) for a, m in self.transitions.items()},
            Z={a: np.array(m, dtype=float) for a, m in self.emissions.items()},
            R={a: np.array(m, dtype=float) for a, m in self.rewards.items()},
            gamma=self.gamma,
        )


def load_problem(path: Union[str, Path]) -> POMDP:
    """Load and validate a POMDP from a YAML problem file."""
    problem_path = Path(path)
    if not problem_path.exists():
        raise FileNotFoundError(f"Problem file not found: {path}")

    with open(problem_path, "r") as f:
        data = yaml.safe_load(f)

    return ProblemConfig(**data).to_pomdp()
