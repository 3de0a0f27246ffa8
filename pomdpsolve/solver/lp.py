"""
Witness search by linear programming.

Given a target vector and a set of competitors, find a belief at which the
target beats every competitor by the largest possible margin:

    maximize    delta
    subject to  b . (other - target) + delta <= 0   for every other
                sum(b) = 1,  b >= 0
"""

from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog

from pomdpsolve.config import Config
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)


def find_witness(
    target: np.ndarray,
    others: Sequence[np.ndarray],
    tolerance: Optional[float] = None,
) -> Optional[Tuple[np.ndarray, float]]:
    """
    Search for a belief where `target` strictly exceeds all of `others`.

    Args:
        target: Values of the vector under test (|S|,)
        others: Values of the competing vectors
        tolerance: Margins at or below this are treated as no advantage

    Returns:
        (witness belief, margin) if one exists, None if the target is dominated.
        Any solver failure is reported as None.
    """
    if tolerance is None:
        tolerance = Config.PRUNE_TOLERANCE

    target = np.asarray(target, dtype=float)
    n_states = target.shape[0]

    if len(others) == 0:
        return np.full(n_states, 1.0 / n_states), float("inf")

    others = np.atleast_2d(np.asarray(others, dtype=float))

    # Variables: b_0 .. b_{S-1}, delta
    c = np.zeros(n_states + 1)
    c[-1] = -1.0

    A_ub = np.hstack([others - target, np.ones((others.shape[0], 1))])
    b_ub = np.zeros(others.shape[0])

    A_eq = np.ones((1, n_states + 1))
    A_eq[0, -1] = 0.0
    b_eq = np.array([1.0])

    bounds = [(0.0, 1.0)] * n_states + [(None, None)]

    res = linprog(c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq, bounds=bounds, method="highs")

    if res.status != 0:
        logger.debug(f"Witness LP returned status {res.status}: {res.message}")
        return None

    margin = float(res.x[-1])
    if margin <= tolerance:
        return None

    belief = np.maximum(res.x[:-1], 0.0)
    belief = belief / belief.sum()
    return belief, margin
