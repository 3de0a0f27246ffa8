"""
Validation utilities for beliefs and vector sets.
"""

from typing import Optional, Sequence
import numpy as np
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)


def validate_belief(
    belief: np.ndarray,
    n_states: Optional[int] = None,
    atol: float = 1e-6,
) -> bool:
    """
    Validate that an array is a probability distribution over states.

    Args:
        belief: Belief vector
        n_states: Expected length (skipped if None)
        atol: Tolerance on the sum-to-one check

    Returns:
        True if validation passes

    Raises:
        ValueError: If validation fails
    """
    belief = np.asarray(belief, dtype=float)

    if belief.ndim != 1:
        raise ValueError(f"Belief must be one-dimensional, got shape {belief.shape}")

    if n_states is not None and belief.shape[0] != n_states:
        raise ValueError(f"Belief has length {belief.shape[0]}, expected {n_states}")

    if np.any(belief < -atol):
        raise ValueError("Belief contains negative probabilities")

    if not np.isclose(belief.sum(), 1.0, atol=atol):
        raise ValueError(f"Belief sums to {belief.sum()}, expected 1")

    return True


def validate_vector_set(
    vectors: Sequence,
    n_states: int,
) -> bool:
    """
    Validate that every entry of a vector set has one finite value per state.

    Args:
        vectors: Sequence of AlphaVector (or anything with a `values` array)
        n_states: Size of the state space

    Returns:
        True if validation passes

    Raises:
        ValueError: If the set is empty or an entry is malformed
    """
    if len(vectors) == 0:
        raise ValueError("Vector set must not be empty")

    for i, entry in enumerate(vectors):
        values = np.asarray(getattr(entry, "values", entry))
        if values.shape != (n_states,):
            raise ValueError(
                f"Vector {i} has shape {values.shape}, expected ({n_states},)"
            )
        if not np.all(np.isfinite(values)):
            raise ValueError(f"Vector {i} contains non-finite values")

    logger.debug(f"Vector set validation passed: {len(vectors)} vectors")
    return True
