"""
POMDP simulation and rollouts.
"""

from typing import Any, Callable, Dict, Optional
import numpy as np

from pomdpsolve.pomdp.schema import POMDP
from pomdpsolve.pomdp.belief import belief_update
from pomdpsolve.config import Config
from pomdpsolve.utils.logging_utils import get_logger
from pomdpsolve.utils.validation import validate_belief

logger = get_logger(__name__)


def rollout(
    pomdp: POMDP,
    policy: Callable[[np.ndarray], str],
    start_belief: np.ndarray,
    horizon: int = 25,
    true_state: Optional[str] = None,
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, Any]:
    """
    Simulate a POMDP rollout.

    Args:
        pomdp: POMDP model
        policy: Policy function that maps belief to action label
        start_belief: Initial belief vector
        horizon: Number of steps to simulate
        true_state: True hidden state (if None, sample from belief)
        rng: Random number generator

    Returns:
        Dict with keys:
            - total_reward: Cumulative reward
            - discounted_reward: Reward discounted by the model's gamma
            - belief_history: List of belief vectors
            - action_history: List of actions taken
            - observation_history: List of observations
            - state_history: List of true states
            - reward_history: List of step rewards
    """
    if rng is None:
        rng = np.random.default_rng(Config.DEFAULT_RANDOM_SEED)

    belief = np.array(start_belief, dtype=float)
    validate_belief(belief, pomdp.n_states)
    if true_state is None:
        state_idx = int(rng.choice(pomdp.n_states, p=belief))
    else:
        state_idx = pomdp.S.index(true_state)

    belief_history = [belief.copy()]
    action_history = []
    observation_history = []
    state_history = [pomdp.S[state_idx]]
    reward_history = []
    total_reward = 0.0
    discounted_reward = 0.0

    for step in range(horizon):
        action = policy(belief)
        action_history.append(action)

        next_state_idx = int(rng.choice(pomdp.n_states, p=pomdp.T[action][state_idx, :]))
        state_history.append(pomdp.S[next_state_idx])

        obs_idx = int(rng.choice(pomdp.n_observations, p=pomdp.Z[action][next_state_idx, :]))
        observation = pomdp.O[obs_idx]
        observation_history.append(observation)

        R_a = pomdp.R[action]
        reward = float(R_a[state_idx] if R_a.ndim == 1 else R_a[state_idx, next_state_idx])
        reward_history.append(reward)
        total_reward += reward
        discounted_reward += pomdp.gamma ** step * reward

        belief = belief_update(pomdp, belief, action, observation)
        belief_history.append(belief.copy())

        state_idx = next_state_idx

    logger.debug(f"Rollout of {horizon} steps: total reward {total_reward:.2f}")

    return {
        "total_reward": total_reward,
        "discounted_reward": discounted_reward,
        "belief_history": belief_history,
        "action_history": action_history,
        "observation_history": observation_history,
        "state_history": state_history,
        "reward_history": reward_history,
    }
