"""Gymnasium environments for Block Duel."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Agent plays the human board against the heuristic opponent
register(
    id="BlockDuel-v0",
    entry_point="block_duel.env.duel_env:DuelEnv",
)

__all__ = ["BlockDuel-v0"]
