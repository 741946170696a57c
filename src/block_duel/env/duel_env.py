from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_duel.game import (
    GARBAGE,
    Action,
    GameConfig,
    Match,
    Session,
    Side,
    collides,
    max_height,
    with_piece,
)


def _compute_action_mask(session: Session) -> np.ndarray:
    mask = np.zeros((len(Action),), dtype=np.bool_)
    mask[Action.NONE] = True
    piece = session.current
    if piece is None:
        return mask
    board = session.board
    mask[Action.LEFT] = not collides(piece, board, -1, 0)
    mask[Action.RIGHT] = not collides(piece, board, 1, 0)
    mask[Action.DOWN] = not collides(piece, board, 0, 1)
    mask[Action.ROTATE] = not collides(piece.rotated(1), board)
    mask[Action.HARD_DROP] = True
    mask[Action.HOLD] = session.can_hold
    return mask


def _kind_index(kind) -> int:
    return 0 if kind is None else int(kind)


class DuelEnv(gym.Env):
    """The agent plays the human board against the heuristic opponent.

    Each step applies one action, then advances the match clock by `frame_ms`
    in scheduler-sized ticks.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 frame_ms: int = 100,
                 max_episode_steps: int = 10000,
                 garbage_weight: float = 50.0,
                 terminal_penalty: float = -100.0) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.frame_ms = int(frame_ms)
        self.max_episode_steps = int(max_episode_steps)
        self.garbage_weight = float(garbage_weight)
        self.terminal_penalty = float(terminal_penalty)
        self.match = Match(self.config)

        h, w = self.config.height, self.config.width
        n_kinds = 8  # 0 = none, 1..7 = piece kinds

        # Active piece is overlaid on the player's board as negative values
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-7, high=GARBAGE, shape=(h, w), dtype=np.int8),
                "opponent": spaces.Box(low=-7, high=GARBAGE, shape=(h, w), dtype=np.int8),
                "current": spaces.Discrete(n_kinds),
                "next": spaces.Discrete(n_kinds),
                "hold": spaces.Discrete(n_kinds),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._now = 0
        self._steps = 0
        self._last_obs: Optional[Dict[str, Any]] = None

    def _get_obs(self) -> Dict[str, Any]:
        player = self.match.snapshot(Side.PLAYER)
        opponent = self.match.snapshot(Side.OPPONENT)
        return {
            "board": with_piece(player).astype(np.int8),
            "opponent": with_piece(opponent).astype(np.int8),
            "current": _kind_index(player.current.kind if player.current is not None else None),
            "next": _kind_index(player.next.kind),
            "hold": _kind_index(player.hold),
        }

    def _get_info(self) -> Dict[str, Any]:
        player = self.match.snapshot(Side.PLAYER)
        opponent = self.match.snapshot(Side.OPPONENT)
        return {
            "action_mask": _compute_action_mask(player),
            "score": player.score,
            "opponent_score": opponent.score,
            "lines_cleared": player.lines_cleared,
            "stack_height": max_height(player.board),
            "opponent_stack_height": max_height(opponent.board),
            "winner": self.match.winner.value if self.match.winner is not None else None,
            "time_ms": self._now,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.match.snapshot(Side.PLAYER))

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.config = replace(self.config, random_seed=seed)
            self.match = Match(self.config)
        self._now = 0
        self._steps = 0
        self.match.start(self._now)
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        score_before = self.match.snapshot(Side.PLAYER).score
        garbage_sent = 0

        event = self.match.apply_action(Action(int(action)), self._now)
        garbage_sent += event.garbage_sent

        # Advance the clock one scheduler tick at a time
        elapsed = 0
        while elapsed < self.frame_ms and self.match.running:
            step_ms = min(self.config.tick_ms, self.frame_ms - elapsed)
            elapsed += step_ms
            self._now += step_ms
            for side, ev in self.match.advance(self._now):
                if side is Side.PLAYER:
                    garbage_sent += ev.garbage_sent

        self._steps += 1
        terminated = self.match.game_over
        truncated = self._steps >= self.max_episode_steps and not terminated

        reward_components: Dict[str, float] = {
            "score": float(self.match.snapshot(Side.PLAYER).score - score_before),
            "garbage": self.garbage_weight * float(garbage_sent),
        }
        if terminated and self.match.winner is Side.OPPONENT:
            reward_components["terminal"] = self.terminal_penalty
        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            from block_duel.visualization.palette import color_for_value

            obs = self._last_obs if self._last_obs is not None else self._get_obs()
            cell = 12
            gap = 2
            h, w = obs["board"].shape
            img = np.zeros((h * cell, (w * 2 + gap) * cell, 3), dtype=np.uint8)
            for offset, grid in ((0, obs["board"]), (w + gap, obs["opponent"])):
                for y in range(h):
                    for x in range(w):
                        color = color_for_value(int(grid[y, x]))
                        img[y * cell : (y + 1) * cell, (offset + x) * cell : (offset + x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
