from __future__ import annotations

import numpy as np
import pytest

from block_duel.game import (
    HeuristicWeights,
    best_move,
    Move,
    PieceInstance,
    PieceKind,
    collides,
    empty_board,
    evaluate,
    steer,
)

from conftest import piece


def test_evaluate_empty_board_is_zero(board):
    assert evaluate(board) == 0.0


def test_evaluate_weights_terms():
    board = empty_board(4, 5)
    board[2, 1] = 1  # height 3 with two holes under it
    # heights [0, 3, 0, 0]: total 3, bumpiness 6
    assert evaluate(board) == pytest.approx(0.5 * 3 + 0.4 * 2 + 0.1 * 6)
    assert evaluate(board, HeuristicWeights(1.0, 0.0, 0.0)) == pytest.approx(3.0)


def test_best_move_prefers_flat_i_on_empty_board(board):
    move = best_move(piece(PieceKind.I), board)
    # flat I adds height 4; the first flat column found is x=0
    assert move == Move(x=0, orientation=0)


def test_best_move_fills_a_well(board):
    board[16:, :] = 8
    board[16:, 9] = 0
    move = best_move(piece(PieceKind.I), board)
    vertical = PieceInstance(PieceKind.I, orientation=move.orientation, x=move.x, y=0)
    assert {x for x, _ in vertical.cells()} == {9}


def test_best_move_o_piece_keeps_first_tie(board):
    assert best_move(piece(PieceKind.O), board) == Move(x=0, orientation=0)


@pytest.mark.parametrize("kind", list(PieceKind))
def test_best_move_is_always_legal_at_spawn(kind):
    rng = np.random.default_rng(7 + int(kind))
    board = empty_board()
    board[6:, :] = rng.integers(0, 2, size=(14, 10)) * 8
    move = best_move(piece(kind), board)
    assert move is not None
    assert not collides(PieceInstance(kind, orientation=move.orientation, x=move.x, y=0), board)


def test_best_move_none_when_nothing_fits(board):
    board[:, :] = 8
    assert best_move(piece(PieceKind.T), board) is None


def test_best_move_does_not_touch_the_board(board):
    board[19, :5] = 3
    before = board.copy()
    best_move(piece(PieceKind.L), board)
    np.testing.assert_array_equal(board, before)


def test_steer_rotates_before_moving(board):
    t = piece(PieceKind.T, x=3)
    step = steer(t, board, Move(x=6, orientation=2))
    assert (step.orientation, step.x) == (1, 3)
    step = steer(step, board, Move(x=6, orientation=2))
    assert (step.orientation, step.x) == (2, 3)
    step = steer(step, board, Move(x=6, orientation=2))
    assert (step.orientation, step.x) == (2, 4)


def test_steer_converges_over_several_steps(board):
    p = piece(PieceKind.J, x=3)
    target = Move(x=0, orientation=3)
    for _ in range(10):
        p = steer(p, board, target)
    assert (p.x, p.orientation) == (0, 3)
    assert steer(p, board, target) is p


def test_steer_blocked_step_stays_put(board):
    board[0:2, 5] = 8
    o = piece(PieceKind.O, x=3)
    assert steer(o, board, Move(x=7, orientation=0)) is o
    assert steer(o, board, None) is o
