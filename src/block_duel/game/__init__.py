"""Game module for Block Duel.

Exports the deterministic two-board engine:
- PieceKind, PieceInstance: piece catalog and placed pieces
- start_queue, draw_next: bag randomizer
- collides, hard_drop_offset, rotate: placement checks
- merge, sweep, inject_garbage: board mutations (copy-on-write)
- ScoringRules: line clear score and garbage tables
- evaluate, best_move, steer: heuristic opponent
- Session and its operations: per-board state
- Match: two sessions, scheduler and winner
"""

from .bag import LOOKAHEAD, draw_next, start_queue
from .config import GameConfig
from .grid import (
    bumpiness,
    column_heights,
    count_holes,
    empty_board,
    full_rows,
    inject_garbage,
    max_height,
    merge,
    sweep,
)
from .heuristic import HeuristicWeights, Move, best_move, evaluate, steer
from .match import ControlHint, Match, MatchState, Scheduler, Side
from .pieces import COLORS, EMPTY, GARBAGE, ORIENTATIONS, PieceInstance, PieceKind, color_of, orientations
from .placement import collides, hard_drop_offset, rotate, try_move, try_rotate
from .rules import ScoringRules
from .session import (
    Action,
    EventKind,
    InjectGarbage,
    LockResult,
    Session,
    SessionEvent,
    StepResult,
    apply_action,
    clear_transients,
    gravity_step,
    hold,
    lock,
    new_session,
    receive_garbage,
    with_piece,
)

__all__ = [
    "LOOKAHEAD",
    "draw_next",
    "start_queue",
    "GameConfig",
    "bumpiness",
    "column_heights",
    "count_holes",
    "empty_board",
    "full_rows",
    "inject_garbage",
    "max_height",
    "merge",
    "sweep",
    "HeuristicWeights",
    "Move",
    "best_move",
    "evaluate",
    "steer",
    "ControlHint",
    "Match",
    "MatchState",
    "Scheduler",
    "Side",
    "COLORS",
    "EMPTY",
    "GARBAGE",
    "ORIENTATIONS",
    "PieceInstance",
    "PieceKind",
    "color_of",
    "orientations",
    "collides",
    "hard_drop_offset",
    "rotate",
    "try_move",
    "try_rotate",
    "ScoringRules",
    "Action",
    "EventKind",
    "InjectGarbage",
    "LockResult",
    "Session",
    "SessionEvent",
    "StepResult",
    "apply_action",
    "clear_transients",
    "gravity_step",
    "hold",
    "lock",
    "new_session",
    "receive_garbage",
    "with_piece",
]
