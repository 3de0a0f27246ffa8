"""
One-step Bellman projection of a vector set.
"""

from typing import Optional, Tuple

import numpy as np

from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.solver.prune import Pruner
from pomdpsolve.solver.vectors import AlphaVector, VList, values_matrix
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)

# ProjectionTable[a][o] is the VList projected through action a and observation o
ProjectionTable = Tuple[Tuple[VList, ...], ...]


class Projecter:
    """
    Expands a vector set through every action-observation pair.

    For vector v (index k in the input), action a and observation o the
    projected vector is

        R(s, a) / |O| + gamma * sum_{s'} T(s, a, s') Z(s', a, o) v(s')

    so that summing one projection per observation gives a full backup. The
    projection carries action a and strategy (k,).
    """

    def __init__(self, pomdp: POMDP, pruner: Optional[Pruner] = None):
        self.pomdp = pomdp
        self.pruner = pruner
        self.immediate_rewards = pomdp.expected_rewards / pomdp.n_observations

    def __call__(self, vlist: VList, beliefs: Optional[np.ndarray] = None) -> ProjectionTable:
        return self.project(vlist, beliefs)

    def project(self, vlist: VList, beliefs: Optional[np.ndarray] = None) -> ProjectionTable:
        """
        Build the projection table of `vlist`.

        Args:
            vlist: Previous-timestep vector set (read only)
            beliefs: Belief set handed to the per-cell pruner, if any

        Returns:
            Table of |A| x |O| vector sets
        """
        if len(vlist) == 0:
            raise ValueError("Cannot project an empty vector set")

        pomdp = self.pomdp
        values = values_matrix(vlist)
        T = pomdp.transition_tensor
        Z = pomdp.observation_tensor

        table = []
        for a in range(pomdp.n_actions):
            row = []
            for o in range(pomdp.n_observations):
                # (K, S') * (S',) -> (K, S'), then @ T[a].T -> (K, S)
                projected = pomdp.gamma * (values * Z[a][:, o]) @ T[a].T
                projected += self.immediate_rewards[:, a]
                cell = tuple(
                    AlphaVector(projected[k], action=a, observations=(k,))
                    for k in range(len(vlist))
                )
                if self.pruner is not None:
                    cell = self.pruner.prune(cell, beliefs)
                row.append(cell)
            table.append(tuple(row))

        logger.debug(
            f"Projected {len(vlist)} vectors through "
            f"{pomdp.n_actions}x{pomdp.n_observations} action-observation pairs"
        )
        return tuple(table)
