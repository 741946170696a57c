from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class PieceKind(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


EMPTY = 0
GARBAGE = 8

Shape = np.ndarray


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape
    return np.rot90(shape, k, axes=(1, 0))  # rotate clockwise when k>0


# Padded base matrices; rotation states are clockwise quarter turns of these.
BASE_SHAPES = {
    PieceKind.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    PieceKind.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    PieceKind.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    PieceKind.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    PieceKind.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    PieceKind.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    PieceKind.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}

COLORS: Dict[int, str] = {
    PieceKind.I: "cyan",
    PieceKind.O: "yellow",
    PieceKind.T: "purple",
    PieceKind.S: "green",
    PieceKind.Z: "red",
    PieceKind.J: "blue",
    PieceKind.L: "orange",
    GARBAGE: "gray",
}


def _build_orientations() -> Dict[PieceKind, Tuple[Shape, ...]]:
    table: Dict[PieceKind, Tuple[Shape, ...]] = {}
    for kind, base in BASE_SHAPES.items():
        count = 1 if kind == PieceKind.O else 4
        states: List[Shape] = []
        for k in range(count):
            state = np.ascontiguousarray(_rot90(base, k))
            state.setflags(write=False)
            states.append(state)
        table[kind] = tuple(states)
    return table


ORIENTATIONS = _build_orientations()


def orientations(kind: PieceKind) -> Tuple[Shape, ...]:
    return ORIENTATIONS[PieceKind(kind)]


def color_of(tag: int) -> str | None:
    """Color tag for a board cell value, None for empty cells."""
    return COLORS.get(int(tag))


@dataclass(frozen=True)
class PieceInstance:
    """A piece of a given kind placed with its matrix top-left at (x, y)."""

    kind: PieceKind
    orientation: int = 0
    x: int = 0
    y: int = 0
    landed: bool = False

    @staticmethod
    def spawn(kind: PieceKind, x: int = 3, y: int = 0) -> "PieceInstance":
        return PieceInstance(kind=PieceKind(kind), orientation=0, x=x, y=y)

    @property
    def orientation_count(self) -> int:
        return len(ORIENTATIONS[self.kind])

    def shape(self) -> Shape:
        return ORIENTATIONS[self.kind][self.orientation]

    def moved(self, dx: int, dy: int) -> "PieceInstance":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, direction: int = 1) -> "PieceInstance":
        return replace(self, orientation=(self.orientation + direction) % self.orientation_count)

    def cells(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """Absolute (x, y) of every filled cell, offset by (dx, dy)."""
        s = self.shape()
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for r in range(h):
            for c in range(w):
                if s[r, c]:
                    cells.append((self.x + c + dx, self.y + r + dy))
        return cells
