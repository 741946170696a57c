from __future__ import annotations

import random

import numpy as np
import pytest

from block_duel.game import PieceInstance, PieceKind, empty_board


@pytest.fixture
def board() -> np.ndarray:
    return empty_board(10, 20)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def piece(kind: PieceKind, x: int = 3, y: int = 0, orientation: int = 0) -> PieceInstance:
    return PieceInstance(kind=kind, orientation=orientation, x=x, y=y)
