"""Bag randomizer: every kind appears once per shuffled set."""

from __future__ import annotations

import random
from typing import List, Tuple

from .pieces import PieceKind

LOOKAHEAD = 5

Queue = Tuple[PieceKind, ...]


def _shuffled_bag(rng: random.Random) -> List[PieceKind]:
    bag = list(PieceKind)
    rng.shuffle(bag)
    return bag


def start_queue(rng: random.Random) -> Tuple[PieceKind, Queue]:
    bag = _shuffled_bag(rng)
    first = bag.pop(0)
    return first, tuple(bag)


def draw_next(queue: Queue, rng: random.Random, lookahead: int = LOOKAHEAD) -> Tuple[PieceKind, Queue]:
    q = list(queue)
    if len(q) < lookahead:
        q.extend(_shuffled_bag(rng))
    kind = q.pop(0)
    return kind, tuple(q)
