"""
Symmetry and canonicalization for the 3x3 board.
Notes:
- There are 8 symmetries (the dihedral group of the square). Positions that
  differ only by a symmetry share one search value.
- The canonical form is the image with the lexicographically smallest
  serialization; ties go to the first image in generation order.
- Generation order follows `board.symmetries`: 4 rotations, then the 4
  rotations of the horizontal mirror. Named, that is
  id, rot90, rot180, rot270, hflip, d2, vflip, d1.
"""
from functools import lru_cache
from typing import Dict, List, NamedTuple

from .board import (
    ALL_POSITIONS,
    Board,
    Position,
    deserialize,
    serialize,
    symmetries,
)

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270', 'hflip', 'd2', 'vflip', 'd1']

# new_flat[k] = old_flat[SYM_SOURCE[kind][k]]
SYM_SOURCE: Dict[str, List[int]] = {
    'id': [0, 1, 2, 3, 4, 5, 6, 7, 8],
    'rot90': [6, 3, 0, 7, 4, 1, 8, 5, 2],
    'rot180': [8, 7, 6, 5, 4, 3, 2, 1, 0],
    'rot270': [2, 5, 8, 1, 4, 7, 0, 3, 6],
    'hflip': [2, 1, 0, 5, 4, 3, 8, 7, 6],
    'd2': [8, 5, 2, 7, 4, 1, 6, 3, 0],
    'vflip': [6, 7, 8, 3, 4, 5, 0, 1, 2],
    'd1': [0, 3, 6, 1, 4, 7, 2, 5, 8],
}

INVERSE_SYM = {
    'id': 'id',
    'rot90': 'rot270',
    'rot180': 'rot180',
    'rot270': 'rot90',
    'hflip': 'hflip',
    'd2': 'd2',
    'vflip': 'vflip',
    'd1': 'd1',
}


class CanonicalForm(NamedTuple):
    board: Board
    key: str


def _check_kind(kind: str) -> List[int]:
    try:
        return SYM_SOURCE[kind]
    except KeyError:
        raise ValueError(f"Unknown transformation: {kind}") from None


def transform_board(board: Board, kind: str) -> Board:
    src = _check_kind(kind)
    flat = serialize(board)
    return deserialize(''.join(flat[i] for i in src))


def transform_position(position: Position, kind: str) -> Position:
    """Where the cell at `position` lands after applying `kind` to the board."""
    src = _check_kind(kind)
    k = src.index(position.row * 3 + position.col)
    return ALL_POSITIONS[k]


@lru_cache(maxsize=None)
def canonical_form(board: Board) -> CanonicalForm:
    best = board
    best_key = serialize(board)
    for image in symmetries(board):
        key = serialize(image)
        if key < best_key:
            best, best_key = image, key
    return CanonicalForm(best, best_key)


def canonical_key(board: Board) -> str:
    return canonical_form(board).key


@lru_cache(maxsize=None)
def symmetry_info(board: Board) -> Dict:
    images = [(serialize(image), kind) for image, kind in zip(symmetries(board), ALL_SYMS)]
    canonical_str, canonical_op = min(images, key=lambda x: x[0])
    unique_set = sorted(set(s for s, _ in images))

    board_str = serialize(board)
    same = {kind: s == board_str for s, kind in images}
    horizontal_symmetric = same['vflip']
    vertical_symmetric = same['hflip']
    diagonal_symmetric = same['d1'] or same['d2']
    rotational_symmetric = same['rot180']

    return {
        'canonical_form': canonical_str,
        'canonical_op': canonical_op,
        'orbit_size': len(unique_set),
        'orbit_index': unique_set.index(board_str),
        'horizontal_symmetric': horizontal_symmetric,
        'vertical_symmetric': vertical_symmetric,
        'diagonal_symmetric': diagonal_symmetric,
        'rotational_symmetric': rotational_symmetric,
        'any_symmetric': any([
            horizontal_symmetric, vertical_symmetric,
            diagonal_symmetric, rotational_symmetric,
        ]),
    }
