"""
PERSEUS: randomized point-based value iteration.

Beliefs are sampled once up front. Each iteration projects the previous
vector set, then builds only as many new vectors as needed to improve the
value of every sampled belief. Solutions can be very approximate away from
the sampled beliefs, but iterations are cheap, so the method works best
when allowed to run until convergence.
"""

from typing import Optional, Tuple

import numpy as np

from pomdpsolve.config import Config
from pomdpsolve.pomdp.sampling import BeliefGenerator
from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.solver.cross_sum import cross_sum
from pomdpsolve.solver.projection import Projecter
from pomdpsolve.solver.prune import Pruner, make_pruner
from pomdpsolve.solver.schema import SolverConfig, SolveResult
from pomdpsolve.solver.vectors import ValueFunction, make_pessimistic_vlist, weak_bound_distance
from pomdpsolve.utils.logging_utils import get_logger
from pomdpsolve.utils.validation import validate_vector_set

logger = get_logger(__name__)


class PERSEUS:
    """
    Iteration controller for point-based value iteration.

    Args:
        belief_size: Number of support beliefs to sample
        horizon: Maximum number of backups
        epsilon: Stop once successive value functions are closer than this
            (0 disables the check and runs exactly `horizon` backups)
        rng: Random source for belief sampling
        prune_mode: "point" or "witness" pruning of each new vector set
        projection_prune: "none", "point" or "witness" pruning of each
            action-observation cell of the projection table
        compare_previous_only: Make cross-sum independent of belief order
    """

    def __init__(
        self,
        belief_size: int,
        horizon: int,
        epsilon: float,
        rng: Optional[np.random.Generator] = None,
        prune_mode: str = "point",
        compare_previous_only: bool = False,
        prune_tolerance: Optional[float] = None,
        projection_prune: str = "none",
    ):
        self.belief_size = belief_size
        self.horizon = horizon
        self.epsilon = epsilon
        self.rng = rng if rng is not None else np.random.default_rng(Config.DEFAULT_RANDOM_SEED)
        self.prune_mode = prune_mode
        self.compare_previous_only = compare_previous_only
        self.prune_tolerance = prune_tolerance
        self.projection_prune = projection_prune

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        if value < 0.0:
            raise ValueError(f"Epsilon must be >= 0, got {value}")
        self._epsilon = float(value)

    @property
    def horizon(self) -> int:
        return self._horizon

    @horizon.setter
    def horizon(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Horizon must be >= 0, got {value}")
        self._horizon = int(value)

    @property
    def belief_size(self) -> int:
        return self._belief_size

    @belief_size.setter
    def belief_size(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"Belief size must be >= 1, got {value}")
        self._belief_size = int(value)

    def __call__(self, pomdp: POMDP, min_reward: float) -> Tuple[float, ValueFunction]:
        return self.solve(pomdp, min_reward).as_tuple()

    def solve(self, pomdp: POMDP, min_reward: float) -> SolveResult:
        """
        Solve a POMDP approximately.

        Args:
            pomdp: Model to solve; its discount must be below 1
            min_reward: Minimum reward obtainable in the model, used for the
                pessimistic initial value function

        Returns:
            SolveResult with the last variation and every computed vector set

        Raises:
            ValueError: If the model's discount is 1
        """
        if pomdp.gamma == 1:
            raise ValueError("The model cannot have a discount of 1 in PERSEUS")
        if min_reward > pomdp.min_reward:
            logger.warning(
                f"min_reward {min_reward} is above the smallest expected reward {pomdp.min_reward}; "
                "the initial value function is not a lower bound and early vectors may be carried over"
            )

        beliefs = BeliefGenerator(pomdp, self.rng).generate(self.belief_size)
        pruner: Pruner = make_pruner(self.prune_mode, beliefs, self.prune_tolerance)
        projection_pruner = None
        if self.projection_prune != "none":
            projection_pruner = make_pruner(self.projection_prune, beliefs, self.prune_tolerance)
        projecter = Projecter(pomdp, pruner=projection_pruner)

        value_function: ValueFunction = [
            make_pessimistic_vlist(pomdp.n_states, min_reward, pomdp.gamma)
        ]

        use_epsilon = not np.isclose(self.epsilon, 0.0)
        variation = self.epsilon * 2
        timestep = 0

        logger.info(
            f"Solving |S|={pomdp.n_states} |A|={pomdp.n_actions} |O|={pomdp.n_observations} "
            f"with {len(beliefs)} beliefs, horizon {self.horizon}, epsilon {self.epsilon}"
        )

        while timestep < self.horizon and (not use_epsilon or variation > self.epsilon):
            timestep += 1
            previous = value_function[timestep - 1]

            projections = projecter(previous, beliefs)
            value_function.append(
                cross_sum(
                    projections,
                    beliefs,
                    previous,
                    pruner=pruner,
                    compare_previous_only=self.compare_previous_only,
                )
            )

            validate_vector_set(value_function[timestep], pomdp.n_states)

            if use_epsilon:
                variation = weak_bound_distance(previous, value_function[timestep])

            logger.info(
                f"Timestep {timestep}: {len(value_function[timestep])} vectors"
                + (f", variation {variation:.6f}" if use_epsilon else "")
            )

        return SolveResult(
            variation=variation if use_epsilon else 0.0,
            value_function=value_function,
            beliefs=beliefs,
            iterations=timestep,
        )


def solve(
    pomdp: POMDP,
    min_reward: Optional[float] = None,
    config: Optional[SolverConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SolveResult:
    """
    Solve a POMDP with PERSEUS.

    Args:
        pomdp: Model to solve
        min_reward: Minimum obtainable reward (defaults to the model's
            smallest expected immediate reward)
        config: Solver parameters (defaults from Config)
        rng: Random source (defaults to one seeded with config.seed)

    Returns:
        SolveResult
    """
    config = config or SolverConfig()
    if min_reward is None:
        min_reward = pomdp.min_reward
    if rng is None:
        rng = np.random.default_rng(config.seed)

    solver = PERSEUS(
        belief_size=config.belief_size,
        horizon=config.horizon,
        epsilon=config.epsilon,
        rng=rng,
        prune_mode=config.prune_mode,
        compare_previous_only=config.compare_previous_only,
        prune_tolerance=config.prune_tolerance,
        projection_prune=config.projection_prune,
    )
    return solver.solve(pomdp, min_reward)
