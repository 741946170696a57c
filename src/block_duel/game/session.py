"""Per-board state and the operations that advance it.

A Session is an immutable value: every operation returns a new Session and
leaves its input untouched. The only effect one board has on another is the
InjectGarbage command returned from `lock`, which the match applies to the
other board with `receive_garbage`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .bag import Queue, draw_next, start_queue
from .config import GameConfig
from .grid import empty_board, inject_garbage, merge, sweep
from .pieces import PieceInstance, PieceKind
from .placement import collides, hard_drop_offset, try_move, try_rotate
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    ROTATE = 3
    HARD_DROP = 4
    HOLD = 5
    NONE = 6


class EventKind(Enum):
    NONE = "none"
    MOVED = "moved"
    MERGED = "merged"
    GAME_OVER = "game_over"


# Cosmetic effect flags read by front-ends
EFFECT_ATTACK = "attack-launch"
EFFECT_ATTACKED = "attacked"


@dataclass(frozen=True)
class SessionEvent:
    kind: EventKind = EventKind.NONE
    cleared_rows: Tuple[int, ...] = ()
    garbage_sent: int = 0


@dataclass(frozen=True)
class InjectGarbage:
    count: int


@dataclass(frozen=True, eq=False)
class Session:
    board: np.ndarray
    current: Optional[PieceInstance]
    next: PieceInstance
    queue: Queue
    hold: Optional[PieceKind] = None
    can_hold: bool = True
    score: int = 0
    lines_cleared: int = 0
    pending_clear: Tuple[int, ...] = ()
    effect: Optional[str] = None


@dataclass(frozen=True, eq=False)
class LockResult:
    session: Session
    cleared_rows: Tuple[int, ...] = ()
    garbage: Optional[InjectGarbage] = None
    game_over: bool = False
    # The locked piece at its resting position, flagged as landed
    piece: Optional[PieceInstance] = None

    def event(self) -> SessionEvent:
        if self.game_over:
            return SessionEvent(EventKind.GAME_OVER, self.cleared_rows, self.garbage_sent)
        return SessionEvent(EventKind.MERGED, self.cleared_rows, self.garbage_sent)

    @property
    def garbage_sent(self) -> int:
        return self.garbage.count if self.garbage is not None else 0


@dataclass(frozen=True, eq=False)
class StepResult:
    session: Session
    moved: bool = False
    locked: Optional[LockResult] = field(default=None)


def _spawn(kind: PieceKind, config: GameConfig) -> PieceInstance:
    return PieceInstance.spawn(kind, config.spawn_x, config.spawn_y)


def new_session(rng: random.Random, config: Optional[GameConfig] = None) -> Session:
    cfg = config or GameConfig()
    first, queue = start_queue(rng)
    upcoming, queue = draw_next(queue, rng, cfg.lookahead)
    return Session(
        board=empty_board(cfg.width, cfg.height),
        current=_spawn(first, cfg),
        next=_spawn(upcoming, cfg),
        queue=queue,
    )


def lock(
    session: Session,
    rng: random.Random,
    config: Optional[GameConfig] = None,
    rules: Optional[ScoringRules] = None,
) -> LockResult:
    """Merge the active piece where it is, clear rows, and bring in the next piece."""
    if session.current is None:
        return LockResult(session)
    cfg = config or GameConfig()
    rules = rules or ScoringRules()

    landed = replace(session.current, landed=True)
    board = merge(session.board, landed)
    board, cleared = sweep(board)
    lines = len(cleared)
    count = rules.garbage_for_lines(lines)
    garbage = InjectGarbage(count) if count > 0 else None

    upcoming, queue = draw_next(session.queue, rng, cfg.lookahead)
    game_over = collides(session.next, board)
    updated = replace(
        session,
        board=board,
        current=None if game_over else session.next,
        next=_spawn(upcoming, cfg),
        queue=queue,
        can_hold=True,
        score=session.score + rules.score_for_lines(lines),
        lines_cleared=session.lines_cleared + lines,
        pending_clear=cleared,
        effect=EFFECT_ATTACK if lines > 1 else session.effect,
    )
    return LockResult(updated, cleared, garbage, game_over, landed)


def gravity_step(
    session: Session,
    rng: random.Random,
    config: Optional[GameConfig] = None,
    rules: Optional[ScoringRules] = None,
) -> StepResult:
    """Move the active piece down one row, or lock it in place when blocked."""
    if session.current is None:
        return StepResult(session)
    if not collides(session.current, session.board, 0, 1):
        return StepResult(replace(session, current=session.current.moved(0, 1)), moved=True)
    result = lock(session, rng, config, rules)
    return StepResult(result.session, locked=result)


def hold(session: Session, rng: random.Random, config: Optional[GameConfig] = None) -> Session:
    if session.current is None or not session.can_hold:
        return session
    cfg = config or GameConfig()
    if session.hold is None:
        upcoming, queue = draw_next(session.queue, rng, cfg.lookahead)
        return replace(
            session,
            current=session.next,
            next=_spawn(upcoming, cfg),
            queue=queue,
            hold=session.current.kind,
            can_hold=False,
        )
    return replace(
        session,
        current=_spawn(session.hold, cfg),
        hold=session.current.kind,
        can_hold=False,
    )


def apply_action(
    session: Session,
    action: Action,
    rng: random.Random,
    config: Optional[GameConfig] = None,
    rules: Optional[ScoringRules] = None,
) -> StepResult:
    """Apply one player action. Blocked moves and rotations change nothing."""
    piece = session.current
    if piece is None:
        return StepResult(session)
    board = session.board

    if action == Action.LEFT:
        moved = try_move(piece, board, -1, 0)
    elif action == Action.RIGHT:
        moved = try_move(piece, board, 1, 0)
    elif action == Action.DOWN:
        moved = try_move(piece, board, 0, 1)
    elif action == Action.ROTATE:
        moved = try_rotate(piece, board, 1)
    elif action == Action.HARD_DROP:
        dropped = replace(session, current=piece.moved(0, hard_drop_offset(piece, board)))
        result = lock(dropped, rng, config, rules)
        return StepResult(result.session, locked=result)
    elif action == Action.HOLD:
        held = hold(session, rng, config)
        return StepResult(held, moved=held is not session)
    else:
        return StepResult(session)

    if moved is piece:
        return StepResult(session)
    return StepResult(replace(session, current=moved), moved=True)


def receive_garbage(session: Session, command: InjectGarbage, rng: random.Random) -> Session:
    if command.count <= 0:
        return session
    return replace(
        session,
        board=inject_garbage(session.board, command.count, rng),
        effect=EFFECT_ATTACKED,
    )


def clear_transients(session: Session) -> Session:
    if not session.pending_clear and session.effect is None:
        return session
    return replace(session, pending_clear=(), effect=None)


def with_piece(session: Session) -> np.ndarray:
    """Board copy with the active piece overlaid as negative kind values."""
    state = session.board.copy()
    if session.current is not None:
        height, width = state.shape
        for x, y in session.current.cells():
            if 0 <= y < height and 0 <= x < width:
                state[y, x] = -int(session.current.kind)
    return state
