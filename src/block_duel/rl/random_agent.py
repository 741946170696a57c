from __future__ import annotations

import argparse
import logging

import gymnasium as gym
import numpy as np

import block_duel.env  # noqa: F401  ensure registration

logger = logging.getLogger("random_agent")


def run_random(steps: int = 200, seed: int = 0) -> float:
    env = gym.make("BlockDuel-v0")
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer actions that are not blocked
        valid = np.flatnonzero(info["action_mask"])
        action = int(rng.choice(valid)) if valid.size else env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("episode %d finished: score=%d winner=%s", episodes, info["score"], info["winner"])
            obs, info = env.reset()
    env.close()
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=0)
    args = p.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    total = run_random(args.steps, args.seed)
    logger.info("random agent total reward: %.2f", total)


if __name__ == "__main__":  # pragma: no cover
    main()
