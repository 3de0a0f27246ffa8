"""
Belief sampling for point-based value iteration.

Beliefs are collected by simulating random trajectories through the model,
starting from the uniform belief and the corners of the simplex.
"""

from typing import List, Optional

import numpy as np

from pomdpsolve.config import Config
from pomdpsolve.pomdp.belief import belief_update
from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.utils.logging_utils import get_logger

logger = get_logger(__name__)

# Consecutive fruitless expansions before a random simplex point is used
MAX_STALE_TRIES = 20


class BeliefGenerator:
    """
    Generates beliefs reachable from the uniform belief under random actions.

    The random source is owned by the caller; two generators built with
    equally seeded `np.random.Generator` produce identical belief lists.
    """

    def __init__(self, pomdp: POMDP, rng: Optional[np.random.Generator] = None):
        self.pomdp = pomdp
        self.rng = rng if rng is not None else np.random.default_rng(Config.DEFAULT_RANDOM_SEED)

    def __call__(self, n: int) -> np.ndarray:
        return self.generate(n)

    def seed_beliefs(self, n: int) -> List[np.ndarray]:
        """Uniform belief followed by simplex corners, at most `n` in total."""
        n_states = self.pomdp.n_states
        beliefs = []
        if n <= 0:
            return beliefs

        beliefs.append(np.full(n_states, 1.0 / n_states))
        for s in range(n_states):
            if len(beliefs) >= n:
                break
            corner = np.zeros(n_states)
            corner[s] = 1.0
            if not self._contains(beliefs, corner):
                beliefs.append(corner)
        return beliefs

    def generate(self, n: int) -> np.ndarray:
        """
        Produce `n` beliefs.

        Args:
            n: Number of beliefs requested

        Returns:
            Array of shape (n, |S|)
        """
        beliefs = self.expand(self.seed_beliefs(n), n)
        logger.debug(f"Generated {len(beliefs)} beliefs over {self.pomdp.n_states} states")
        return np.array(beliefs).reshape(len(beliefs), self.pomdp.n_states)

    def expand(self, beliefs: List[np.ndarray], n: int) -> List[np.ndarray]:
        """
        Grow `beliefs` in place by simulation until it holds `n` entries.

        Args:
            beliefs: Starting beliefs (must be non-empty if n > len(beliefs))
            n: Target number of beliefs

        Returns:
            The same list, extended
        """
        if len(beliefs) >= n:
            return beliefs
        if not beliefs:
            raise ValueError("Cannot expand an empty belief list")

        stale = 0
        while len(beliefs) < n:
            new_belief = self._simulate_step(beliefs[self.rng.integers(len(beliefs))])
            if not self._contains(beliefs, new_belief):
                beliefs.append(new_belief)
                stale = 0
                continue

            stale += 1
            if stale >= MAX_STALE_TRIES:
                beliefs.append(self.rng.dirichlet(np.ones(self.pomdp.n_states)))
                stale = 0

        return beliefs

    def _simulate_step(self, belief: np.ndarray) -> np.ndarray:
        """Random action, sampled observation, updated belief."""
        pomdp = self.pomdp
        a_idx = int(self.rng.integers(pomdp.n_actions))
        a = pomdp.A[a_idx]

        s = self.rng.choice(pomdp.n_states, p=belief)
        s_next = self.rng.choice(pomdp.n_states, p=pomdp.T[a][s, :])
        o_idx = int(self.rng.choice(pomdp.n_observations, p=pomdp.Z[a][s_next, :]))

        return belief_update(pomdp, belief, a_idx, o_idx)

    @staticmethod
    def _contains(beliefs: List[np.ndarray], belief: np.ndarray) -> bool:
        return bool(np.isclose(np.asarray(beliefs), belief).all(axis=1).any())
