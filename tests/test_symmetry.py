import pytest

from ttt_engine.board import ALL_POSITIONS, Position, cell_at, deserialize, serialize, symmetries
from ttt_engine.rules import check_status
from ttt_engine.symmetry import (
    ALL_SYMS,
    INVERSE_SYM,
    canonical_form,
    canonical_key,
    symmetry_info,
    transform_board,
    transform_position,
)

BOARDS = ["000000000", "100000000", "000010000", "102010200", "120201100", "121212212", "110220000"]


@pytest.mark.parametrize("raw", BOARDS)
def test_named_transforms_follow_generation_order(raw):
    b = deserialize(raw)
    assert [transform_board(b, k) for k in ALL_SYMS] == symmetries(b)


def test_canonical_is_lexicographically_minimum():
    board = deserialize("102010200")
    images = [serialize(transform_board(board, k)) for k in ALL_SYMS]
    cf = canonical_form(board)
    assert cf.key == min(images)
    assert serialize(cf.board) == cf.key


@pytest.mark.parametrize("raw", BOARDS)
def test_canonical_form_idempotent(raw):
    cf = canonical_form(deserialize(raw))
    assert canonical_form(cf.board) == cf


def test_single_corner_canonicalizes_to_bottom_right():
    for corner in ["100000000", "001000000", "000000100", "000000001"]:
        assert canonical_key(deserialize(corner)) == "000000001"


def test_symmetric_board_is_its_own_canonical_form():
    b = deserialize("000000000")
    assert canonical_form(b).board == b
    center = deserialize("000010000")
    assert canonical_form(center).key == "000010000"


@pytest.mark.parametrize("raw", BOARDS)
def test_status_invariant_under_symmetries(raw):
    b = deserialize(raw)
    assert {check_status(s) for s in symmetries(b)} == {check_status(b)}


def test_transform_position_tracks_cells():
    b = deserialize("120201100")
    for k in ALL_SYMS:
        tb = transform_board(b, k)
        for p in ALL_POSITIONS:
            assert cell_at(tb, transform_position(p, k)) == cell_at(b, p)


def test_position_transform_roundtrip():
    for k, inv in INVERSE_SYM.items():
        for p in ALL_POSITIONS:
            assert transform_position(transform_position(p, k), inv) == p


def test_unknown_transform_raises():
    with pytest.raises(ValueError):
        transform_board(deserialize("000000000"), "rot45")
    with pytest.raises(ValueError):
        transform_position(Position(0, 0), "spin")


def test_symmetry_info_fields():
    info = symmetry_info(deserialize("000000000"))
    assert info['orbit_size'] == 1
    assert info['any_symmetric'] is True
    info = symmetry_info(deserialize("100000000"))
    assert info['orbit_size'] == 4
    assert info['canonical_form'] == "000000001"
    assert info['diagonal_symmetric'] is True
    assert info['rotational_symmetric'] is False
    info = symmetry_info(deserialize("120000000"))
    assert info['orbit_size'] == 8
    assert info['any_symmetric'] is False
    assert info['canonical_op'] in ALL_SYMS
