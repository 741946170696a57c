from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .config import GameConfig
from .heuristic import HeuristicWeights, Move, best_move, steer
from .rules import ScoringRules
from .session import (
    Action,
    EventKind,
    LockResult,
    Session,
    SessionEvent,
    StepResult,
    apply_action,
    clear_transients,
    gravity_step,
    new_session,
    receive_garbage,
)

logger = logging.getLogger(__name__)


class Side(Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class MatchState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    OVER = "over"


@dataclass(frozen=True)
class ControlHint:
    target: Optional[Move]
    computed_at: int


@dataclass
class Scheduler:
    """Last-action timestamps (ms) for every periodic source of a match."""

    last_drop: Dict[Side, int] = field(default_factory=lambda: {Side.PLAYER: 0, Side.OPPONENT: 0})
    last_think: int = 0
    last_control: int = 0
    transient_since: Dict[Side, Optional[int]] = field(
        default_factory=lambda: {Side.PLAYER: None, Side.OPPONENT: None}
    )

    def reset(self, now: int) -> None:
        self.last_drop = {Side.PLAYER: now, Side.OPPONENT: now}
        self.last_think = now
        self.last_control = now
        self.transient_since = {Side.PLAYER: None, Side.OPPONENT: None}


class Match:
    """Two boards, one human and one heuristic, driven by an explicit clock.

    Every public method takes `now` in milliseconds and runs to completion, so
    callers only need to avoid overlapping calls. Once the match is over all
    actions and ticks are no-ops.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        weights: Optional[HeuristicWeights] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.weights = weights or HeuristicWeights()
        self.state = MatchState.IDLE
        self.winner: Optional[Side] = None
        self.scheduler = Scheduler()
        self.hint: Optional[ControlHint] = None
        self.sessions: Dict[Side, Session] = {}
        self._rngs: Dict[Side, random.Random] = {}
        self._seed_rng = random.Random(self.config.random_seed)

    # ---------- Lifecycle ----------
    def start(self, now: int = 0) -> None:
        for side in Side:
            self._rngs[side] = random.Random(self._seed_rng.getrandbits(64))
            self.sessions[side] = new_session(self._rngs[side], self.config)
        self.scheduler.reset(now)
        self.hint = None
        self.winner = None
        self.state = MatchState.RUNNING
        logger.info("match started at %d ms (%dx%d)", now, self.config.width, self.config.height)

    def stop(self) -> None:
        if self.state is MatchState.RUNNING:
            logger.info("match stopped")
        self.state = MatchState.OVER

    @property
    def game_over(self) -> bool:
        return self.state is MatchState.OVER

    @property
    def running(self) -> bool:
        return self.state is MatchState.RUNNING

    def snapshot(self, side: Side) -> Session:
        return self.sessions[side]

    # ---------- Player input ----------
    def apply_action(self, action: Action, now: int) -> SessionEvent:
        if not self.running:
            return SessionEvent()
        session = self.sessions[Side.PLAYER]
        if session.current is None:
            return SessionEvent()
        result = apply_action(session, Action(action), self._rngs[Side.PLAYER], self.config, self.rules)
        if (action == Action.DOWN and result.moved) or result.locked is not None:
            self.scheduler.last_drop[Side.PLAYER] = now
        return self._commit(Side.PLAYER, result, now)

    # ---------- Periodic sources ----------
    def tick_gravity(self, side: Side, now: int) -> SessionEvent:
        if not self.running:
            return SessionEvent()
        if now - self.scheduler.last_drop[side] <= self.config.drop_interval_ms:
            return SessionEvent()
        session = self.sessions[side]
        if session.current is None:
            return SessionEvent()
        result = gravity_step(session, self._rngs[side], self.config, self.rules)
        self.scheduler.last_drop[side] = now
        return self._commit(side, result, now)

    def tick_think(self, now: int) -> Optional[ControlHint]:
        if not self.running:
            return None
        if now - self.scheduler.last_think <= self.config.think_interval_ms:
            return None
        self.scheduler.last_think = now
        session = self.sessions[Side.OPPONENT]
        if session.current is None:
            return None
        target = best_move(session.current, session.board, self.config.spawn_y, self.weights)
        self.hint = ControlHint(target=target, computed_at=now)
        logger.debug("opponent target %s for %s", target, session.current.kind.name)
        return self.hint

    def tick_control(self, now: int) -> bool:
        """Nudge the opponent piece one step toward the current hint."""
        if not self.running or self.hint is None:
            return False
        if now - self.scheduler.last_control <= self.config.control_interval_ms:
            return False
        self.scheduler.last_control = now
        session = self.sessions[Side.OPPONENT]
        if session.current is None:
            return False
        steered = steer(session.current, session.board, self.hint.target)
        if steered is session.current:
            return False
        self.sessions[Side.OPPONENT] = replace(session, current=steered)
        return True

    def advance(self, now: int) -> List[Tuple[Side, SessionEvent]]:
        """Run every periodic source once, in a fixed order."""
        events: List[Tuple[Side, SessionEvent]] = []
        if not self.running:
            return events
        self._expire_transients(now)
        event = self.tick_gravity(Side.PLAYER, now)
        if event.kind is not EventKind.NONE:
            events.append((Side.PLAYER, event))
        if not self.running:
            return events
        self.tick_think(now)
        self.tick_control(now)
        event = self.tick_gravity(Side.OPPONENT, now)
        if event.kind is not EventKind.NONE:
            events.append((Side.OPPONENT, event))
        return events

    # ---------- Internals ----------
    def _commit(self, side: Side, result: StepResult, now: int) -> SessionEvent:
        self.sessions[side] = result.session
        if result.locked is None:
            return SessionEvent(EventKind.MOVED) if result.moved else SessionEvent()
        return self._settle(side, result.locked, now)

    def _settle(self, side: Side, locked: LockResult, now: int) -> SessionEvent:
        if locked.cleared_rows:
            self.scheduler.transient_since[side] = now
        if locked.garbage is not None:
            target = side.other
            self.sessions[target] = receive_garbage(self.sessions[target], locked.garbage, self._rngs[target])
            self.scheduler.transient_since[target] = now
            logger.info("%s sent %d garbage rows to %s", side.value, locked.garbage.count, target.value)
        if side is Side.OPPONENT:
            self.hint = None
        if locked.game_over:
            self.winner = side.other
            self.state = MatchState.OVER
            logger.info("%s topped out; %s wins", side.value, self.winner.value)
        return locked.event()

    def _expire_transients(self, now: int) -> None:
        for side, since in list(self.scheduler.transient_since.items()):
            if since is not None and now - since >= self.config.transient_ms:
                self.sessions[side] = clear_transients(self.sessions[side])
                self.scheduler.transient_since[side] = None
