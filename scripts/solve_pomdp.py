#!/usr/bin/env python3
"""
Solve a POMDP problem file with PERSEUS and evaluate the resulting policy.
"""

import argparse
import json
from pathlib import Path
import numpy as np

from pomdpsolve.config import Config
from pomdpsolve.pomdp import load_problem, rollout
from pomdpsolve.solver import SolverConfig, ValueFunctionPolicy, solve
from pomdpsolve.utils.logging_utils import get_logger, set_level

logger = get_logger(__name__)


def vlist_to_records(pomdp, vlist):
    """JSON-friendly view of a vector set."""
    return [
        {
            "values": v.values.tolist(),
            "action": pomdp.A[v.action],
            "observations": list(v.observations),
            "carried": v.carried,
        }
        for v in vlist
    ]


def main():
    parser = argparse.ArgumentParser(description="Solve a POMDP with PERSEUS")
    parser.add_argument("--problem", type=str, default=str(Config.PROBLEMS_DIR / "tiger.yaml"),
                       help="Path to problem YAML")
    parser.add_argument("--beliefs", type=int, default=Config.BELIEF_SIZE,
                       help="Number of sampled beliefs")
    parser.add_argument("--horizon", type=int, default=Config.HORIZON,
                       help="Maximum number of backups")
    parser.add_argument("--epsilon", type=float, default=Config.EPSILON,
                       help="Convergence threshold (0 disables)")
    parser.add_argument("--prune", choices=["point", "witness"], default="point",
                       help="Pruning strategy")
    parser.add_argument("--min-reward", type=float, default=None,
                       help="Minimum reward (defaults to the model's smallest reward)")
    parser.add_argument("--rollouts", type=int, default=100,
                       help="Number of evaluation rollouts")
    parser.add_argument("--rollout-horizon", type=int, default=50,
                       help="Steps per evaluation rollout")
    parser.add_argument("--seed", type=int, default=Config.DEFAULT_RANDOM_SEED,
                       help="Random seed")
    parser.add_argument("--out-dir", type=str, default=None,
                       help="Directory for the solution JSON (not saved if omitted)")
    parser.add_argument("--log-level", type=str, default=None,
                       help="Override LOG_LEVEL")

    args = parser.parse_args()
    if args.log_level:
        set_level(args.log_level)

    rng = np.random.default_rng(args.seed)

    logger.info(f"Loading problem from {args.problem}")
    pomdp = load_problem(args.problem)

    config = SolverConfig(
        belief_size=args.beliefs,
        horizon=args.horizon,
        epsilon=args.epsilon,
        prune_mode=args.prune,
        seed=args.seed,
    )
    result = solve(pomdp, min_reward=args.min_reward, config=config, rng=rng)

    policy = ValueFunctionPolicy(pomdp, result.value_function)
    start_belief = np.ones(pomdp.n_states) / pomdp.n_states
    returns = [
        rollout(pomdp, policy, start_belief, horizon=args.rollout_horizon, rng=rng)["discounted_reward"]
        for _ in range(args.rollouts)
    ]
    start_action, start_value = policy.sample_action(start_belief)

    print("\n" + "="*60)
    print("PERSEUS Summary")
    print("="*60)
    print(f"States (|S|): {pomdp.n_states}  Actions (|A|): {pomdp.n_actions}  "
          f"Observations (|O|): {pomdp.n_observations}")
    print(f"Iterations: {result.iterations}")
    print(f"Final variation: {result.variation:.6f}")
    print(f"Vectors per depth: {[len(v) for v in result.value_function]}")
    print(f"Value at uniform belief: {start_value:.3f} (action: {start_action})")
    if returns:
        print(f"Mean discounted return over {len(returns)} rollouts: {np.mean(returns):.3f} "
              f"(std {np.std(returns):.3f})")

    if args.out_dir:
        out_dir = Path(args.out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        solution = {
            "problem": args.problem,
            "config": config.model_dump(),
            "iterations": result.iterations,
            "variation": result.variation,
            "vectors": vlist_to_records(pomdp, result.final),
        }
        with open(out_dir / "solution.json", "w", encoding="utf-8") as f:
            json.dump(solution, f, indent=2)
        print(f"Solution saved to: {out_dir / 'solution.json'}")
    print("="*60)


if __name__ == "__main__":
    main()
