"""
Alpha-vectors and value functions.

A value function at a given depth is a `VList`: a tuple of immutable
`AlphaVector`. The full solution is a `ValueFunction`, the list of VLists
computed so far, index 0 being the pessimistic initialization.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class AlphaVector:
    """
    Hyperplane over the belief simplex.

    Attributes:
        values: Expected value from each state (read-only array)
        action: Index of the action recommended where this vector is best
        observations: For each observation, the index of the vector in the
            previous VList to follow next (empty for the initial vector)
        witness: Belief at which this vector was proven optimal, if known
        carried: True when the vector was kept unchanged from an earlier
            depth; its observations then index the set it was built from,
            not the previous VList
    """
    values: np.ndarray
    action: int = 0
    observations: Tuple[int, ...] = ()
    witness: Optional[np.ndarray] = None
    carried: bool = False

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        if values.ndim != 1:
            raise ValueError(f"Alpha-vector values must be 1-D, got shape {values.shape}")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "observations", tuple(int(o) for o in self.observations))

    def value_at(self, belief: np.ndarray) -> float:
        """Expected value of this vector at `belief`."""
        return float(self.values @ belief)

    def with_witness(self, belief: np.ndarray) -> "AlphaVector":
        """Copy of this vector carrying a witness belief."""
        witness = np.array(belief, dtype=float)
        witness.setflags(write=False)
        return replace(self, witness=witness)

    def as_carried(self) -> "AlphaVector":
        """Copy of this vector flagged as kept from an earlier depth."""
        return self if self.carried else replace(self, carried=True)

    def __repr__(self):
        return (
            f"AlphaVector(values={np.array2string(self.values, precision=4)}, "
            f"action={self.action}, observations={self.observations}"
            + (", carried=True)" if self.carried else ")")
        )


VList = Tuple[AlphaVector, ...]
ValueFunction = List[VList]


def values_matrix(vlist: Sequence[AlphaVector]) -> np.ndarray:
    """Stack the values of a vector set into an array of shape (n, |S|)."""
    if len(vlist) == 0:
        return np.empty((0, 0))
    return np.stack([v.values for v in vlist])


def find_best_at_belief(belief: np.ndarray, vlist: Sequence[AlphaVector]) -> Tuple[int, float]:
    """
    Index and value of the vector maximizing expected value at `belief`.

    Ties go to the first vector encountered.
    """
    if len(vlist) == 0:
        raise ValueError("Cannot pick a best vector from an empty set")
    scores = values_matrix(vlist) @ belief
    best = int(np.argmax(scores))
    return best, float(scores[best])


def best_values_at_beliefs(beliefs: np.ndarray, vlist: Sequence[AlphaVector]) -> np.ndarray:
    """Value of the upper envelope of `vlist` at each row of `beliefs`."""
    return (np.atleast_2d(beliefs) @ values_matrix(vlist).T).max(axis=1)


def make_pessimistic_vlist(n_states: int, min_reward: float, discount: float) -> VList:
    """
    Single vector worth minReward / (1 - discount) in every state.

    This is the value of receiving the minimum reward forever, a lower
    bound on the value of any policy.
    """
    if discount == 1:
        raise ValueError("Discount of 1 has no finite pessimistic initialization")
    return (AlphaVector(np.full(n_states, min_reward / (1.0 - discount))),)


def weak_bound_distance(old_vlist: Sequence[AlphaVector], new_vlist: Sequence[AlphaVector]) -> float:
    """
    One-sided distance between two successive value functions.

    For every vector in the newer set take the smallest max-norm distance to
    any vector in the older set, then return the largest of these.
    """
    if len(new_vlist) == 0:
        return 0.0
    if len(old_vlist) == 0:
        return float("inf")

    new_values = values_matrix(new_vlist)
    old_values = values_matrix(old_vlist)
    distances = np.abs(new_values[:, None, :] - old_values[None, :, :]).max(axis=2)
    return float(distances.min(axis=1).max())
