"""
Belief state update for POMDP.
"""

from typing import List, Union

import numpy as np

from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)

Label = Union[str, int]


def _index(labels: List[str], item: Label, kind: str) -> int:
    """Resolve a label or an integer index against a label list."""
    if isinstance(item, (int, np.integer)):
        if not 0 <= item < len(labels):
            raise ValueError(f"{kind} index {item} out of range")
        return int(item)
    if item not in labels:
        raise ValueError(f"{kind} {item} not in POMDP {kind.lower()}s")
    return labels.index(item)


def predict(pomdp: POMDP, belief: np.ndarray, action: Label) -> np.ndarray:
    """Distribution over next states after taking `action`: T[a].T @ b."""
    a = pomdp.A[_index(pomdp.A, action, "Action")]
    return pomdp.T[a].T @ belief


def observation_distribution(
    pomdp: POMDP,
    belief: np.ndarray,
    action: Label,
) -> np.ndarray:
    """
    Probability of each observation after taking `action` in `belief`.

    P(o | b, a) = sum_{s'} Z[a][s', o] * (T[a].T @ b)[s']
    """
    a = pomdp.A[_index(pomdp.A, action, "Action")]
    return pomdp.Z[a].T @ predict(pomdp, belief, a)


def belief_update(
    pomdp: POMDP,
    belief: np.ndarray,
    action: Label,
    observation: Label,
) -> np.ndarray:
    """
    Update belief state: b' ∝ Z[a][:,o] * (T[a].T @ b)

    Args:
        pomdp: POMDP model
        belief: Current belief vector (|S|,)
        action: Action taken (label or index)
        observation: Observation received (label or index)

    Returns:
        Updated belief vector (normalized)
    """
    a_idx = _index(pomdp.A, action, "Action")
    o_idx = _index(pomdp.O, observation, "Observation")
    a = pomdp.A[a_idx]

    new_belief = pomdp.Z[a][:, o_idx] * predict(pomdp, belief, a_idx)

    norm = new_belief.sum()
    if norm < 1e-10:
        logger.warning(
            f"Observation {pomdp.O[o_idx]} has near-zero probability after "
            f"{a}, using uniform belief"
        )
        return np.ones(pomdp.n_states) / pomdp.n_states

    new_belief = np.maximum(new_belief / norm, 0.0)
    return new_belief / new_belief.sum()
