"""One-ply placement search used by the computer-controlled board.

Every (orientation, column) pair is dropped onto a scratch copy of the board
and the resulting stack is scored; lower scores are better.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .grid import bumpiness, column_heights, count_holes, merge
from .pieces import ORIENTATIONS, PieceInstance
from .placement import collides, hard_drop_offset, try_move, try_rotate


@dataclass
class HeuristicWeights:
    height: float = 0.5
    holes: float = 0.4
    bumpiness: float = 0.1


@dataclass(frozen=True)
class Move:
    x: int
    orientation: int


def evaluate(board: np.ndarray, weights: Optional[HeuristicWeights] = None) -> float:
    w = weights or HeuristicWeights()
    heights = column_heights(board)
    return (
        w.height * sum(heights)
        + w.holes * count_holes(board)
        + w.bumpiness * bumpiness(heights)
    )


def best_move(
    piece: PieceInstance,
    board: np.ndarray,
    spawn_y: int = 0,
    weights: Optional[HeuristicWeights] = None,
) -> Optional[Move]:
    """Lowest-scoring legal placement, or None if the piece fits nowhere.

    Ties keep the first candidate found (lowest orientation, then lowest x).
    """
    if piece is None or board is None:
        return None
    width = board.shape[1]
    best: Optional[Move] = None
    best_score = float("inf")
    for r in range(piece.orientation_count):
        size = ORIENTATIONS[piece.kind][r].shape[1]
        # Every anchor column where some part of the matrix overlaps the board
        for x in range(-(size - 1), width):
            candidate = PieceInstance(kind=piece.kind, orientation=r, x=x, y=spawn_y)
            if collides(candidate, board):
                continue
            dy = hard_drop_offset(candidate, board)
            score = evaluate(merge(board, candidate.moved(0, dy)), weights)
            if score < best_score:
                best_score = score
                best = Move(x=x, orientation=r)
    return best


def steer(piece: PieceInstance, board: np.ndarray, target: Optional[Move]) -> PieceInstance:
    """Advance `piece` one control step toward `target`.

    Rotation is fixed first, then the column; a blocked step leaves the piece
    where it is.
    """
    if target is None:
        return piece
    if piece.orientation != target.orientation:
        return try_rotate(piece, board, 1)
    if piece.x < target.x:
        return try_move(piece, board, 1, 0)
    if piece.x > target.x:
        return try_move(piece, board, -1, 0)
    return piece
