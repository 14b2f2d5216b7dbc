import pytest

from ttt_engine.board import (
    Cell,
    Position,
    copy_board,
    deserialize,
    empty_board,
    flip_horizontal,
    make_board,
    piece_counts,
    place,
    rotate90,
    serialize,
    symmetries,
)


def test_empty_board_all_cells_empty():
    b = empty_board()
    assert serialize(b) == "000000000"
    assert all(cell is Cell.EMPTY for row in b for cell in row)


def test_rotate90_moves_cell_i_j_to_j_2_minus_i():
    b = deserialize("120000000")  # X at (0,0), O at (0,1)
    r = rotate90(b)
    assert r[0][2] == Cell.X
    assert r[1][2] == Cell.O
    # input untouched
    assert serialize(b) == "120000000"


def test_rotate90_four_times_identity():
    b = deserialize("120201100")
    r = b
    for _ in range(4):
        r = rotate90(r)
    assert r == b


def test_flip_horizontal_mirrors_rows():
    b = deserialize("120000201")
    assert serialize(flip_horizontal(b)) == "021000102"


def test_symmetries_generation_order():
    b = deserialize("100000000")
    keys = [serialize(s) for s in symmetries(b)]
    # 4 rotations of the original, then 4 rotations of the mirror
    assert keys == [
        "100000000", "001000000", "000000001", "000000100",
        "001000000", "000000001", "000000100", "100000000",
    ]


def test_serialize_round_trip_and_invalid_strings():
    assert serialize(deserialize("012012012")) == "012012012"
    for bad in ["abc", "0123456789", "01201201", "01201201x", "012012013"]:
        with pytest.raises(ValueError):
            deserialize(bad)


def test_make_board_rejects_bad_values_and_shapes():
    with pytest.raises(ValueError):
        make_board([[0, 0, 3], [0, 0, 0], [0, 0, 0]])
    with pytest.raises(ValueError):
        make_board([[0, 0], [0, 0]])


def test_place_returns_fresh_board():
    b = empty_board()
    b2 = place(b, Position(1, 1), Cell.X)
    assert copy_board(b2) == b2
    assert b2[1][1] == Cell.X
    assert b[1][1] == Cell.EMPTY
    assert piece_counts(b2) == (1, 0)


def test_opponent():
    assert Cell.X.opponent is Cell.O
    assert Cell.O.opponent is Cell.X
    with pytest.raises(ValueError):
        Cell.EMPTY.opponent
