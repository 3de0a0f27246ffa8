"""
Dominance pruning of vector sets.

Pruners only look at the numeric values of the entries they receive and
return the surviving entries unchanged (apart from witness annotations), so
action and observation strategy travel along with the values.
"""

from abc import ABC, abstractmethod
from typing import List, Literal, Optional, Sequence

import numpy as np

from pomdpsolve.config import Config
from pomdpsolve.solver.lp import find_witness
from pomdpsolve.solver.vectors import AlphaVector, VList, values_matrix
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)

PruneMode = Literal["point", "witness", "none"]


class Pruner(ABC):
    """Removes vectors that are never the maximizer under some criterion."""

    @abstractmethod
    def _prune(self, vlist: VList, beliefs: Optional[np.ndarray]) -> VList:
        ...

    def prune(self, vlist: Sequence[AlphaVector], beliefs: Optional[np.ndarray] = None) -> VList:
        """
        Prune a vector set.

        Args:
            vlist: Vectors to prune
            beliefs: Belief set, for strategies that use one

        Returns:
            Surviving vectors, never more than the input and never empty
            for a non-empty input
        """
        vlist = tuple(vlist)
        if not vlist:
            return vlist

        result = self._prune(vlist, beliefs)

        assert len(result) > 0, f"{type(self).__name__} pruned every vector of a non-empty set"
        assert len(result) <= len(vlist)
        logger.debug(f"{type(self).__name__}: {len(vlist)} -> {len(result)} vectors")
        return result


class NoPruner(Pruner):
    """Keeps every vector."""

    def _prune(self, vlist, beliefs):
        return vlist


class PointPruner(Pruner):
    """
    Keeps only the vectors that are best at one of a finite set of beliefs.

    The result is free of domination on that belief set only, not over the
    whole simplex.
    """

    def __init__(self, beliefs: Optional[np.ndarray] = None, atol: float = 1e-10):
        self.beliefs = None if beliefs is None else np.atleast_2d(np.asarray(beliefs, dtype=float))
        self.atol = atol

    def _prune(self, vlist, beliefs):
        beliefs = self.beliefs if beliefs is None else np.atleast_2d(np.asarray(beliefs, dtype=float))
        if beliefs is None or len(beliefs) == 0:
            raise ValueError("PointPruner needs a non-empty belief set")

        values = values_matrix(vlist)
        # argmax keeps the first maximizer on ties
        winners = np.unique(np.argmax(beliefs @ values.T, axis=1))

        kept: List[int] = []
        for idx in winners:
            if not any(np.allclose(values[idx], values[k], rtol=0.0, atol=self.atol) for k in kept):
                kept.append(int(idx))

        return tuple(vlist[k] for k in kept)


class WitnessPruner(Pruner):
    """
    Exact pruning with Lark's filtering algorithm.

    Every surviving vector is annotated with a belief witnessing that it is
    the strict maximizer there. Costs one LP per tested vector.
    """

    def __init__(self, tolerance: Optional[float] = None):
        self.tolerance = Config.PRUNE_TOLERANCE if tolerance is None else tolerance

    def _prune(self, vlist, beliefs):
        candidates = list(extract_dominated(vlist))
        n_states = candidates[0].values.shape[0]
        accepted: List[AlphaVector] = []

        # Best vectors at the simplex corners need no LP
        for s in range(n_states):
            if not candidates:
                break
            corner = np.zeros(n_states)
            corner[s] = 1.0
            best = _lex_best_index(values_matrix(candidates), corner, self.tolerance)
            accepted.append(candidates.pop(best).with_witness(corner))

        while candidates:
            found = find_witness(
                candidates[-1].values,
                [v.values for v in accepted],
                self.tolerance,
            )
            if found is None:
                candidates.pop()
                continue

            witness, _ = found
            best = _lex_best_index(values_matrix(candidates), witness, self.tolerance)
            accepted.append(candidates.pop(best).with_witness(witness))

        return tuple(accepted)


def _lex_best_index(values: np.ndarray, belief: np.ndarray, tolerance: float) -> int:
    """
    Best row of `values` at `belief`, ties broken by lexicographic order.

    The lexicographic maximum among tied vectors is always part of the upper
    envelope, while an arbitrary tied vector may not be.
    """
    scores = values @ belief
    tied = np.flatnonzero(scores >= scores.max() - tolerance)
    if len(tied) == 1:
        return int(tied[0])
    # lexsort sorts by the last key first
    order = np.lexsort(values[tied].T[::-1])
    return int(tied[order[-1]])


def extract_dominated(vlist: Sequence[AlphaVector]) -> VList:
    """
    Remove vectors pointwise dominated by another vector in the set.

    Of several identical vectors only the first is kept.
    """
    vlist = tuple(vlist)
    if len(vlist) <= 1:
        return vlist

    values = values_matrix(vlist)
    kept = []
    for i in range(len(vlist)):
        geq = np.all(values >= values[i], axis=1)
        strictly = np.any(values > values[i], axis=1)
        geq[i] = False
        # dominated by a strictly better vector, or a duplicate of an earlier one
        dominated = np.any(geq & strictly) or np.any(geq[:i] & ~strictly[:i])
        if not dominated:
            kept.append(vlist[i])
    return tuple(kept)


def make_pruner(
    mode: PruneMode,
    beliefs: Optional[np.ndarray] = None,
    tolerance: Optional[float] = None,
) -> Pruner:
    """
    Build a pruning strategy by name.

    Args:
        mode: "point", "witness" or "none"
        beliefs: Belief set used by the point strategy
        tolerance: LP margin tolerance used by the witness strategy

    Returns:
        Pruner instance
    """
    if mode == "point":
        return PointPruner(beliefs)
    if mode == "witness":
        return WitnessPruner(tolerance)
    if mode == "none":
        return NoPruner()
    raise ValueError(f"Unknown prune mode: {mode}")
