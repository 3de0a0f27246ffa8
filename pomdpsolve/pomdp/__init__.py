"""
POMDP models, belief updates and belief sampling.
"""

from pomdpsolve.pomdp.schema import POMDP, ProblemConfig, load_problem
from pomdpsolve.pomdp.belief import belief_update, observation_distribution
from pomdpsolve.pomdp.sampling import BeliefGenerator
from pomdpsolve.pomdp.simulate import rollout

__all__ = [
    "POMDP",
    "ProblemConfig",
    "load_problem",
    "belief_update",
    "observation_distribution",
    "BeliefGenerator",
    "rollout",
]
