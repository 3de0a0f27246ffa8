"""Solver configuration and result schemas."""

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from pomdpsolve.config import Config
from pomdpsolve.solver.vectors import ValueFunction, VList


class SolverConfig(BaseModel):
    """Parameters of a PERSEUS solve."""

    belief_size: int = Field(default=Config.BELIEF_SIZE, ge=1, description="Number of sampled beliefs")
    horizon: int = Field(default=Config.HORIZON, ge=0, description="Maximum number of backups")
    epsilon: float = Field(
        default=Config.EPSILON, ge=0,
        description="Convergence threshold (0 runs exactly `horizon` backups)",
    )
    prune_mode: Literal["point", "witness"] = Field(
        default="point", description="Pruning applied to each new vector set"
    )
    projection_prune: Literal["none", "point", "witness"] = Field(
        default="none", description="Pruning applied to each action-observation projection cell"
    )
    compare_previous_only: bool = Field(
        default=False, description="Make the cross-sum independent of belief order"
    )
    prune_tolerance: float = Field(
        default=Config.PRUNE_TOLERANCE, gt=0, description="LP margin tolerance for witness pruning"
    )
    seed: int = Field(default=Config.DEFAULT_RANDOM_SEED, description="Seed for belief sampling")

    model_config = ConfigDict(extra="forbid")


@dataclass
class SolveResult:
    """Outcome of a solve."""
    variation: float  # last weak-bound distance, 0.0 when epsilon is disabled
    value_function: ValueFunction
    beliefs: np.ndarray
    iterations: int

    @property
    def final(self) -> VList:
        """Vector set of the deepest solved horizon."""
        return self.value_function[-1]

    def as_tuple(self) -> Tuple[float, ValueFunction]:
        return self.variation, self.value_function
