"""
Action selection from a solved value function.
"""

from typing import Dict, Optional, Tuple

import numpy as np

from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.solver.vectors import ValueFunction, find_best_at_belief


class ValueFunctionPolicy:
    """
    Greedy policy over the vector set of one solved depth.

    Args:
        pomdp: Model the value function was computed for
        value_function: Output of a solve
        horizon: Index of the vector set to act on (defaults to the last one)
    """

    def __init__(self, pomdp: POMDP, value_function: ValueFunction, horizon: Optional[int] = None):
        if len(value_function) == 0:
            raise ValueError("Value function is empty")
        self.pomdp = pomdp
        self.vlist = value_function[-1 if horizon is None else horizon]

    def __call__(self, belief: np.ndarray) -> str:
        return self.sample_action(belief)[0]

    def sample_action(self, belief: np.ndarray) -> Tuple[str, float]:
        """Action label and value of the best vector at `belief`."""
        idx, value = find_best_at_belief(belief, self.vlist)
        return self.pomdp.A[self.vlist[idx].action], value

    def action_values(self, belief: np.ndarray) -> Dict[str, float]:
        """Best value at `belief` among the vectors recommending each action."""
        values = {a: -np.inf for a in self.pomdp.A}
        for vector in self.vlist:
            a = self.pomdp.A[vector.action]
            values[a] = max(values[a], vector.value_at(belief))
        return values
