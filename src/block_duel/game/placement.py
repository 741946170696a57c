from __future__ import annotations

from typing import Optional

import numpy as np

from .pieces import EMPTY, ORIENTATIONS, PieceInstance


def collides(piece: Optional[PieceInstance], board: Optional[np.ndarray], dx: int = 0, dy: int = 0) -> bool:
    """True when `piece` shifted by (dx, dy) would be an illegal placement.

    Cells left of, right of, or below the board collide, as do cells landing on
    an occupied board cell. Rows above the board (y < 0) are always free.
    Missing or malformed input collides.
    """
    if piece is None or board is None:
        return True
    if not isinstance(board, np.ndarray) or board.ndim != 2:
        return True
    states = ORIENTATIONS.get(piece.kind)
    if states is None or not 0 <= piece.orientation < len(states):
        return True
    height, width = board.shape
    for fx, fy in piece.cells(dx, dy):
        if fx < 0 or fx >= width or fy >= height:
            return True
        if fy >= 0 and board[fy, fx] != EMPTY:
            return True
    return False


def hard_drop_offset(piece: Optional[PieceInstance], board: Optional[np.ndarray]) -> int:
    if piece is None or board is None:
        return 0
    dy = 0
    while not collides(piece, board, 0, dy + 1):
        dy += 1
    return dy


def rotate(piece: PieceInstance, direction: int = 1) -> PieceInstance:
    return piece.rotated(direction)


def try_rotate(piece: PieceInstance, board: np.ndarray, direction: int = 1) -> PieceInstance:
    # No wall kicks: a blocked rotation is simply rejected.
    candidate = rotate(piece, direction)
    if collides(candidate, board):
        return piece
    return candidate


def try_move(piece: PieceInstance, board: np.ndarray, dx: int, dy: int) -> PieceInstance:
    if collides(piece, board, dx, dy):
        return piece
    return piece.moved(dx, dy)
