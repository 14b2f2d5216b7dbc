"""
Board geometry: cells, positions, construction, symmetries and serialization.
Notes:
- A board is a tuple of 3 rows, each a tuple of 3 cells. Boards are values;
  every operation here returns a fresh board.
- Cells are 0=empty, 1=X, 2=O. X always starts.
- The serialized form is one digit per cell in row-major order, e.g. "100020000".
"""
from enum import IntEnum
from typing import List, NamedTuple, Tuple

SIZE = 3


class Cell(IntEnum):
    EMPTY = 0
    X = 1
    O = 2

    @property
    def opponent(self) -> "Cell":
        if self is Cell.EMPTY:
            raise ValueError("Empty cell has no opponent")
        return Cell.O if self is Cell.X else Cell.X

    @property
    def symbol(self) -> str:
        return ".XO"[self]


class Position(NamedTuple):
    row: int
    col: int

    def in_bounds(self) -> bool:
        return 0 <= self.row < SIZE and 0 <= self.col < SIZE


Row = Tuple[Cell, Cell, Cell]
Board = Tuple[Row, Row, Row]

ALL_POSITIONS: Tuple[Position, ...] = tuple(
    Position(r, c) for r in range(SIZE) for c in range(SIZE)
)


def make_board(rows) -> Board:
    """Build a board from any 3x3 nested iterable of 0/1/2 (or Cell) values."""
    grid = tuple(tuple(Cell(v) for v in row) for row in rows)
    if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
        raise ValueError(f"Board must be {SIZE}x{SIZE}, got {[len(r) for r in grid]}")
    return grid  # type: ignore[return-value]


def empty_board() -> Board:
    return make_board([[0] * SIZE for _ in range(SIZE)])


def copy_board(board: Board) -> Board:
    return make_board(board)


def rotate90(board: Board) -> Board:
    # cell (i, j) moves to (j, 2 - i)
    rotated = [[Cell.EMPTY] * SIZE for _ in range(SIZE)]
    for i in range(SIZE):
        for j in range(SIZE):
            rotated[j][SIZE - 1 - i] = board[i][j]
    return make_board(rotated)


def flip_horizontal(board: Board) -> Board:
    return make_board([list(reversed(row)) for row in board])


def symmetries(board: Board) -> List[Board]:
    """The 8 images of `board`: 4 rotations, then 4 rotations of its mirror."""
    images: List[Board] = []
    for start in (board, flip_horizontal(board)):
        current = start
        for _ in range(4):
            images.append(current)
            current = rotate90(current)
    return images


def serialize(board: Board) -> str:
    return ''.join(str(int(cell)) for row in board for cell in row)


def deserialize(board_str: str) -> Board:
    if len(board_str) != SIZE * SIZE or any(c not in "012" for c in board_str):
        raise ValueError(f"Invalid board string {board_str!r}: must be 9 chars of 0/1/2")
    cells = [int(c) for c in board_str]
    return make_board([cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)])


def place(board: Board, position: Position, player: Cell) -> Board:
    """Return a copy of `board` with `player` at `position` (no legality checks)."""
    grid = [list(row) for row in board]
    grid[position.row][position.col] = player
    return make_board(grid)


def cell_at(board: Board, position: Position) -> Cell:
    return board[position.row][position.col]


def empty_positions(board: Board) -> List[Position]:
    return [p for p in ALL_POSITIONS if board[p.row][p.col] == Cell.EMPTY]


def piece_counts(board: Board) -> Tuple[int, int]:
    flat = [cell for row in board for cell in row]
    return flat.count(Cell.X), flat.count(Cell.O)


def render(board: Board) -> str:
    return '\n'.join(''.join(cell.symbol for cell in row) for row in board)
