from __future__ import annotations

from typing import Tuple

from block_duel.game import GARBAGE, PieceKind

BACKGROUND = (20, 20, 26)

PALETTE = {
    0: BACKGROUND,
    PieceKind.I: (51, 217, 255),   # cyan
    PieceKind.O: (255, 235, 59),   # yellow
    PieceKind.T: (224, 64, 251),   # purple
    PieceKind.S: (0, 230, 118),    # green
    PieceKind.Z: (255, 23, 68),    # red
    PieceKind.J: (41, 121, 255),   # blue
    PieceKind.L: (255, 145, 0),    # orange
    GARBAGE: (158, 158, 158),      # gray
}


def color_for_value(v: int) -> Tuple[int, int, int]:
    """Cell color; negative values (the falling piece overlay) use their kind."""
    return PALETTE.get(abs(v), (200, 200, 200))
