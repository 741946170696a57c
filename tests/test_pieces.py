from __future__ import annotations

import numpy as np
import pytest

from block_duel.game import COLORS, GARBAGE, ORIENTATIONS, PieceInstance, PieceKind, color_of, orientations


def test_catalog_has_seven_kinds_with_colors():
    assert [k.name for k in PieceKind] == ["I", "O", "T", "S", "Z", "J", "L"]
    for kind in PieceKind:
        assert kind in ORIENTATIONS
        assert COLORS[kind]
    assert color_of(GARBAGE) == "gray"
    assert color_of(0) is None


def test_orientation_counts():
    for kind in PieceKind:
        expected = 1 if kind == PieceKind.O else 4
        assert len(orientations(kind)) == expected


def test_every_orientation_is_square_with_four_cells():
    for kind in PieceKind:
        for state in orientations(kind):
            assert state.shape[0] == state.shape[1]
            assert int(state.sum()) == 4


def test_canonical_states_match_table():
    i_states = orientations(PieceKind.I)
    np.testing.assert_array_equal(i_states[0], [[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]])
    np.testing.assert_array_equal(i_states[1], [[0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0]])
    np.testing.assert_array_equal(i_states[3], [[0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0]])
    np.testing.assert_array_equal(orientations(PieceKind.S)[1], [[0, 1, 0], [0, 1, 1], [0, 0, 1]])
    np.testing.assert_array_equal(orientations(PieceKind.J)[1], [[0, 1, 1], [0, 1, 0], [0, 1, 0]])
    np.testing.assert_array_equal(orientations(PieceKind.L)[3], [[1, 1, 0], [0, 1, 0], [0, 1, 0]])
    np.testing.assert_array_equal(orientations(PieceKind.T)[2], [[0, 0, 0], [1, 1, 1], [0, 1, 0]])


def test_catalog_matrices_are_read_only():
    with pytest.raises(ValueError):
        orientations(PieceKind.T)[0][0, 0] = 1


def test_spawn_and_cells():
    p = PieceInstance.spawn(PieceKind.O)
    assert (p.x, p.y, p.orientation, p.landed) == (3, 0, 0, False)
    assert sorted(p.cells()) == [(3, 0), (3, 1), (4, 0), (4, 1)]
    assert sorted(p.cells(1, 2)) == [(4, 2), (4, 3), (5, 2), (5, 3)]


def test_rotated_wraps_and_keeps_position():
    p = PieceInstance(PieceKind.T, orientation=3, x=5, y=7)
    r = p.rotated(1)
    assert (r.orientation, r.x, r.y) == (0, 5, 7)
    assert p.rotated(-1).orientation == 2
    assert PieceInstance(PieceKind.O).rotated(1).orientation == 0
