from __future__ import annotations

import random
from dataclasses import replace

import numpy as np
import pytest

from block_duel.game import (
    GARBAGE,
    Action,
    EventKind,
    InjectGarbage,
    PieceInstance,
    PieceKind,
    apply_action,
    clear_transients,
    empty_board,
    gravity_step,
    hold,
    lock,
    new_session,
    receive_garbage,
    with_piece,
)
from block_duel.game.session import EFFECT_ATTACK, EFFECT_ATTACKED


@pytest.fixture
def session(rng):
    return new_session(rng)


def _with(session, board, current):
    return replace(session, board=board, current=current)


def test_new_session(session):
    assert session.board.shape == (20, 10)
    assert not session.board.any()
    assert (session.current.x, session.current.y) == (3, 0)
    assert (session.next.x, session.next.y) == (3, 0)
    assert len(session.queue) == 5
    assert session.hold is None
    assert session.can_hold
    assert session.score == 0


def test_four_row_clear_scores_800_and_sends_four(session, rng):
    board = empty_board()
    board[16:, 1:] = GARBAGE
    # vertical I occupies column x + 2
    s = _with(session, board, PieceInstance(PieceKind.I, orientation=1, x=-2, y=16))
    result = lock(s, rng)
    assert result.cleared_rows == (16, 17, 18, 19)
    assert result.session.score == 800
    assert result.garbage == InjectGarbage(4)
    assert result.session.effect == EFFECT_ATTACK
    assert result.session.pending_clear == (16, 17, 18, 19)
    assert not result.session.board.any()
    assert result.event().kind is EventKind.MERGED
    assert result.event().garbage_sent == 4


def test_two_row_clear_scores_200_and_sends_one(session, rng):
    board = empty_board()
    board[18:, 2:] = GARBAGE
    s = _with(session, board, PieceInstance(PieceKind.O, x=0, y=18))
    result = lock(s, rng)
    assert result.session.score == 200
    assert result.garbage == InjectGarbage(1)
    assert result.session.lines_cleared == 2


def test_single_row_clear_scores_100_and_sends_nothing(session, rng):
    board = empty_board()
    board[19, 2:] = GARBAGE
    s = _with(session, board, PieceInstance(PieceKind.O, x=0, y=18))
    result = lock(s, rng)
    assert result.cleared_rows == (19,)
    assert result.session.score == 100
    assert result.garbage is None
    assert result.session.effect is None
    # the top half of the O piece fell into the bottom row
    assert list(result.session.board[19, :2]) == [int(PieceKind.O)] * 2


def test_lock_advances_pieces_and_restores_hold(session, rng):
    s = replace(session, can_hold=False, current=session.current.moved(0, 10))
    upcoming = s.next
    result = lock(s, rng)
    assert result.session.current == upcoming
    assert result.session.queue == s.queue[1:]
    assert result.session.next.kind == s.queue[0]
    assert result.session.can_hold
    assert not result.game_over


def test_lock_does_not_mutate_input(session, rng):
    s = replace(session, current=session.current.moved(0, 15))
    before = s.board.copy()
    lock(s, rng)
    np.testing.assert_array_equal(s.board, before)


def test_top_out_ends_the_session(session, rng):
    board = empty_board()
    board[0:2, 3:7] = GARBAGE
    s = _with(session, board, PieceInstance(PieceKind.O, x=0, y=18))
    result = lock(s, rng)
    assert result.game_over
    assert result.session.current is None
    assert result.event().kind is EventKind.GAME_OVER


def test_hold_into_empty_slot_draws_next(session, rng):
    first, upcoming = session.current, session.next
    held = hold(session, rng)
    assert held.hold == first.kind
    assert held.current == upcoming
    assert not held.can_hold
    assert hold(held, rng) is held


def test_hold_swaps_with_held_kind_at_spawn(session, rng):
    s = replace(session, hold=PieceKind.Z, current=PieceInstance(PieceKind.T, orientation=2, x=6, y=9))
    swapped = hold(s, rng)
    assert swapped.current == PieceInstance.spawn(PieceKind.Z)
    assert swapped.hold == PieceKind.T
    assert swapped.next == s.next
    assert swapped.queue == s.queue


def test_actions_move_the_active_piece(session, rng):
    s = replace(session, current=PieceInstance(PieceKind.T, x=3, y=5))
    assert apply_action(s, Action.LEFT, rng).session.current.x == 2
    assert apply_action(s, Action.RIGHT, rng).session.current.x == 4
    assert apply_action(s, Action.DOWN, rng).session.current.y == 6
    assert apply_action(s, Action.ROTATE, rng).session.current.orientation == 1
    assert apply_action(s, Action.NONE, rng).session is s


def test_blocked_action_is_a_no_op(session, rng):
    s = replace(session, current=PieceInstance(PieceKind.O, x=0, y=0))
    result = apply_action(s, Action.LEFT, rng)
    assert result.session is s
    assert not result.moved


def test_hard_drop_locks_at_the_bottom(session, rng):
    s = replace(session, current=PieceInstance(PieceKind.O, x=3, y=0))
    result = apply_action(s, Action.HARD_DROP, rng)
    assert result.locked is not None
    assert result.session.board[18, 3] == result.session.board[19, 4] == int(PieceKind.O)


def test_actions_without_active_piece_do_nothing(session, rng):
    s = replace(session, current=None)
    for action in Action:
        assert apply_action(s, action, rng).session is s


def test_gravity_moves_then_locks(session, rng):
    s = replace(session, current=PieceInstance(PieceKind.O, x=3, y=17))
    step = gravity_step(s, rng)
    assert step.moved and step.session.current.y == 18
    step = gravity_step(step.session, rng)
    assert step.locked is not None
    assert step.session.board[19, 3] == int(PieceKind.O)


def test_receive_garbage(session):
    s = receive_garbage(session, InjectGarbage(2), random.Random(0))
    assert s.effect == EFFECT_ATTACKED
    assert int((s.board == GARBAGE).sum()) == 18
    assert receive_garbage(session, InjectGarbage(0), random.Random(0)) is session


def test_clear_transients(session):
    s = replace(session, pending_clear=(19,), effect=EFFECT_ATTACK)
    cleared = clear_transients(s)
    assert cleared.pending_clear == () and cleared.effect is None
    assert clear_transients(cleared) is cleared


def test_with_piece_overlays_negative_tags(session):
    s = replace(session, current=PieceInstance(PieceKind.O, x=0, y=-1))
    overlay = with_piece(s)
    assert overlay[0, 0] == overlay[0, 1] == -int(PieceKind.O)
    assert int((overlay != 0).sum()) == 2
    assert not s.board.any()


def test_lock_reports_the_landed_piece(session, rng):
    s = _with(session, empty_board(), PieceInstance(PieceKind.O, x=3, y=18))
    result = lock(s, rng)
    assert result.piece is not None
    assert result.piece.landed
    assert (result.piece.x, result.piece.y) == (3, 18)
    for x, y in result.piece.cells():
        assert result.session.board[y, x] == int(PieceKind.O)
    assert not s.current.landed
