"""
Value-function solving engine: alpha-vectors, projection, cross-sum,
pruning and the PERSEUS iteration loop.
"""

from pomdpsolve.solver.vectors import (
    AlphaVector,
    VList,
    ValueFunction,
    find_best_at_belief,
    best_values_at_beliefs,
    weak_bound_distance,
)
from pomdpsolve.solver.lp import find_witness
from pomdpsolve.solver.prune import (
    Pruner,
    NoPruner,
    PointPruner,
    WitnessPruner,
    extract_dominated,
    make_pruner,
)
from pomdpsolve.solver.projection import Projecter, ProjectionTable
from pomdpsolve.solver.cross_sum import backup_at_belief, cross_sum, exhaustive_cross_sum
from pomdpsolve.solver.schema import SolverConfig, SolveResult
from pomdpsolve.solver.perseus import PERSEUS, solve
from pomdpsolve.solver.policy import ValueFunctionPolicy

__all__ = [
    "AlphaVector",
    "VList",
    "ValueFunction",
    "find_best_at_belief",
    "best_values_at_beliefs",
    "weak_bound_distance",
    "find_witness",
    "Pruner",
    "NoPruner",
    "PointPruner",
    "WitnessPruner",
    "extract_dominated",
    "make_pruner",
    "Projecter",
    "ProjectionTable",
    "backup_at_belief",
    "cross_sum",
    "exhaustive_cross_sum",
    "SolverConfig",
    "SolveResult",
    "PERSEUS",
    "solve",
    "ValueFunctionPolicy",
]
