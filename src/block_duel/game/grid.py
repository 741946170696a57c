from __future__ import annotations

import random
from typing import List, Tuple

import numpy as np

from .pieces import EMPTY, GARBAGE, PieceInstance


def empty_board(width: int = 10, height: int = 20) -> np.ndarray:
    """Board grid: 0 for empty cells, piece kind values or GARBAGE otherwise."""
    return np.zeros((int(height), int(width)), dtype=np.int8)


def merge(board: np.ndarray, piece: PieceInstance) -> np.ndarray:
    """Copy of `board` with the piece written in. Cells above row 0 are lost."""
    merged = board.copy()
    height, width = merged.shape
    value = int(piece.kind)
    for x, y in piece.cells():
        if 0 <= y < height and 0 <= x < width:
            merged[y, x] = value
    return merged


def full_rows(board: np.ndarray) -> List[int]:
    return [int(r) for r in np.where(np.all(board != EMPTY, axis=1))[0]]


def sweep(board: np.ndarray) -> Tuple[np.ndarray, Tuple[int, ...]]:
    """Remove full rows and pad with empty rows on top.

    Returns the new board and the indices of the removed rows, top to bottom.
    """
    rows = full_rows(board)
    if not rows:
        return board.copy(), ()
    width = board.shape[1]
    kept = np.delete(board, rows, axis=0)
    new_rows = np.full((len(rows), width), EMPTY, dtype=board.dtype)
    swept = np.vstack((new_rows, kept))
    return swept, tuple(rows)


def garbage_row(width: int, rng: random.Random) -> np.ndarray:
    row = np.full((width,), GARBAGE, dtype=np.int8)
    row[rng.randrange(width)] = EMPTY
    return row


def inject_garbage(board: np.ndarray, count: int, rng: random.Random) -> np.ndarray:
    """Push `count` garbage rows in from the bottom.

    The top row is discarded for each injected row, so a stack reaching the
    ceiling is truncated.
    """
    result = board.copy()
    width = result.shape[1]
    for _ in range(max(0, int(count))):
        result = np.vstack((result[1:], garbage_row(width, rng)[np.newaxis, :]))
    return result


# ---------- Metrics ----------

def column_heights(board: np.ndarray) -> List[int]:
    height = board.shape[0]
    heights: List[int] = []
    for col in board.T:
        filled = np.flatnonzero(col)
        heights.append(height - int(filled[0]) if filled.size else 0)
    return heights


def count_holes(board: np.ndarray) -> int:
    """Empty cells lying below the topmost filled cell of their column."""
    filled = board != EMPTY
    covered = np.logical_or.accumulate(filled, axis=0)
    return int(np.count_nonzero(covered & ~filled))


def bumpiness(heights: List[int]) -> int:
    return sum(abs(heights[i] - heights[i + 1]) for i in range(len(heights) - 1))


def max_height(board: np.ndarray) -> int:
    non_empty_rows = np.where(np.any(board != EMPTY, axis=1))[0]
    if non_empty_rows.size == 0:
        return 0
    return board.shape[0] - int(non_empty_rows[0])
