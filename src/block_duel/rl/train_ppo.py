from __future__ import annotations

import argparse
import logging
import os

import gymnasium as gym

# Ensure envs are registered
import block_duel.env  # noqa: F401
from block_duel.env.wrappers import ResampleInvalidActionWrapper

logger = logging.getLogger("train_ppo")


def make_env(seed: int | None = None) -> gym.Env:
    env = gym.make("BlockDuel-v0")
    # Resample blocked actions for vanilla PPO
    env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_blockduel.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=0)
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")

    from stable_baselines3 import PPO
    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    def make_env_idx(i: int):
        def thunk():
            return make_env(args.seed + i)
        return thunk

    vec_env = SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)])
    vec_env = VecMonitor(vec_env)
    model = PPO(
        policy="MultiInputPolicy",
        env=vec_env,
        verbose=1,
        tensorboard_log=args.logdir,
    )

    save_dir = os.path.dirname(args.save_path)
    if save_dir:
        os.makedirs(save_dir, exist_ok=True)
    logger.info("training PPO for %d timesteps on %d envs", args.timesteps, args.n_envs)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)
    logger.info("saved model to %s", args.save_path)


if __name__ == "__main__":  # pragma: no cover
    main()
