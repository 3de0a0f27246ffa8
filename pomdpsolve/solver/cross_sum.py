"""
Cross-sum of projected vector sets.

`cross_sum` builds new vectors only at the beliefs that are not yet
improved in the current pass, picking for each observation the projection
that is best at the belief. `exhaustive_cross_sum` enumerates every
combination, pruning after each observation.
"""

from typing import List, Optional

import numpy as np

from pomdpsolve.solver.projection import ProjectionTable
from pomdpsolve.solver.prune import PointPruner, Pruner
from pomdpsolve.solver.vectors import AlphaVector, VList, values_matrix
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)


def backup_at_belief(projections: ProjectionTable, belief: np.ndarray) -> AlphaVector:
    """
    Best cross-sum vector at a single belief.

    For every action, sum the per-observation projections that are best at
    `belief`; then keep the action whose sum is best at `belief`. Ties go
    to the first vector and the first action.
    """
    best_vector = None
    best_value = -np.inf

    for a, row in enumerate(projections):
        total = None
        strategy = []
        for cell in row:
            scores = values_matrix(cell) @ belief
            k = int(np.argmax(scores))
            total = cell[k].values.copy() if total is None else total + cell[k].values
            strategy.append(cell[k].observations[0])

        candidate = AlphaVector(total, action=a, observations=tuple(strategy))
        value = candidate.value_at(belief)
        if value > best_value:
            best_vector, best_value = candidate, value

    return best_vector


def cross_sum(
    projections: ProjectionTable,
    beliefs: np.ndarray,
    old_vlist: VList,
    pruner: Optional[Pruner] = None,
    compare_previous_only: bool = False,
) -> VList:
    """
    Compute the new vector set from a projection table and a belief set.

    Beliefs are visited in order. A belief already improved by a vector
    found earlier in the pass (value at least that of `old_vlist`) is
    skipped; the first belief is always processed. When the backup at a
    belief is worse than `old_vlist` there, the old maximizer is kept
    instead, flagged as carried, so values at the sampled beliefs never
    decrease.

    With `compare_previous_only`, no belief is skipped and each belief's
    contribution depends only on `old_vlist`, which makes the result
    independent of the belief order.

    Args:
        projections: |A| x |O| table from the Projecter
        beliefs: Belief set, shape (n, |S|)
        old_vlist: Previous-timestep vector set (read only)
        pruner: Final pruning strategy (point pruning on `beliefs` by default)
        compare_previous_only: Disable the order-dependent skip

    Returns:
        Pruned vector set
    """
    beliefs = np.atleast_2d(np.asarray(beliefs, dtype=float))
    if len(beliefs) == 0:
        raise ValueError("Cross-sum needs at least one belief")

    old_scores = beliefs @ values_matrix(old_vlist).T
    old_best = old_scores.max(axis=1)
    old_best_idx = old_scores.argmax(axis=1)

    current_best = np.full(len(beliefs), -np.inf)
    result: List[AlphaVector] = []
    skipped = 0
    start = True

    for i, belief in enumerate(beliefs):
        if not start and not compare_previous_only and current_best[i] >= old_best[i]:
            skipped += 1
            continue

        vector = backup_at_belief(projections, belief)
        if vector.value_at(belief) < old_best[i]:
            vector = old_vlist[old_best_idx[i]].as_carried()

        result.append(vector)
        current_best = np.maximum(current_best, beliefs @ vector.values)
        start = False

    logger.debug(f"Cross-sum built {len(result)} vectors, skipped {skipped} improved beliefs")

    if pruner is None:
        pruner = PointPruner(beliefs)
    return pruner.prune(tuple(result), beliefs)


def exhaustive_cross_sum(projections: ProjectionTable, pruner: Pruner) -> VList:
    """
    Exact cross-sum by enumeration with incremental pruning.

    For each action the per-observation sets are combined one observation
    at a time, pruning after each combination; the per-action results are
    then merged and pruned again.

    Args:
        projections: |A| x |O| table from the Projecter
        pruner: Strategy applied after every combination

    Returns:
        Pruned vector set
    """
    merged: List[AlphaVector] = []
    for a, row in enumerate(projections):
        accumulated = pruner.prune(row[0])
        for cell in row[1:]:
            combined = tuple(
                AlphaVector(x.values + y.values, action=a, observations=x.observations + y.observations)
                for x in accumulated
                for y in cell
            )
            accumulated = pruner.prune(combined)
        merged.extend(accumulated)

    return pruner.prune(tuple(merged))
