"""
Rules engine: game state, legal moves, transitions, status and scoring.
Notes:
- GameState is an immutable value. `apply_move` returns a new state and never
  touches the one it was given.
- `check_status` is the only place a winner or a draw is decided.
- A "ply" is a half-move (one player's turn); ply depth equals the length of
  the move history and the number of occupied cells.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

from .board import (
    ALL_POSITIONS,
    Board,
    Cell,
    Position,
    cell_at,
    empty_board,
    empty_positions,
    piece_counts,
    place,
)
from .errors import IllegalMove

WIN_LINES: Tuple[Tuple[Position, Position, Position], ...] = (
    # rows
    (Position(0, 0), Position(0, 1), Position(0, 2)),
    (Position(1, 0), Position(1, 1), Position(1, 2)),
    (Position(2, 0), Position(2, 1), Position(2, 2)),
    # columns
    (Position(0, 0), Position(1, 0), Position(2, 0)),
    (Position(0, 1), Position(1, 1), Position(2, 1)),
    (Position(0, 2), Position(1, 2), Position(2, 2)),
    # diagonals
    (Position(0, 0), Position(1, 1), Position(2, 2)),
    (Position(0, 2), Position(1, 1), Position(2, 0)),
)

CENTER = Position(1, 1)
CORNERS = (Position(0, 0), Position(0, 2), Position(2, 0), Position(2, 2))


class GameStatus(IntEnum):
    ONGOING = 0
    X_WINS = 1
    O_WINS = 2
    DRAW = 3


WIN_STATUS = {Cell.X: GameStatus.X_WINS, Cell.O: GameStatus.O_WINS}


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=empty_board)
    current_player: Cell = Cell.X
    status: GameStatus = GameStatus.ONGOING
    move_history: Tuple[Position, ...] = ()

    @property
    def ply_depth(self) -> int:
        return len(self.move_history)


def initial_state() -> GameState:
    return GameState()


def _winning_line(board: Board):
    for line in WIN_LINES:
        first = cell_at(board, line[0])
        if first != Cell.EMPTY and all(cell_at(board, p) == first for p in line[1:]):
            return first, line
    return Cell.EMPTY, ()


def check_status(board: Board) -> GameStatus:
    winner, _ = _winning_line(board)
    if winner != Cell.EMPTY:
        return WIN_STATUS[winner]
    if not empty_positions(board):
        return GameStatus.DRAW
    return GameStatus.ONGOING


def winning_line(state: GameState) -> Tuple[Position, ...]:
    """Cells of the three-in-a-row that decided the game, or () if none."""
    _, line = _winning_line(state.board)
    return tuple(line)


def is_terminal(state: GameState) -> bool:
    return state.status != GameStatus.ONGOING


def legal_moves(state: GameState) -> List[Position]:
    return empty_positions(state.board)


def cell_priority(position: Position) -> int:
    """Static move-ordering priority: center 3, corners 2, edges 1."""
    if position == CENTER:
        return 3
    if position in CORNERS:
        return 2
    return 1


def ordered_legal_moves(state: GameState) -> List[Position]:
    # sorted() is stable, so row-major order survives among equal priorities
    return sorted(legal_moves(state), key=cell_priority, reverse=True)


def apply_move(state: GameState, position: Position) -> GameState:
    position = Position(*position)
    if is_terminal(state):
        raise IllegalMove(position, f"game is already over ({state.status.name})")
    if not position.in_bounds():
        raise IllegalMove(position, "position out of range")
    if cell_at(state.board, position) != Cell.EMPTY:
        raise IllegalMove(position, "cell is not empty")
    board = place(state.board, position, state.current_player)
    return GameState(
        board=board,
        current_player=state.current_player.opponent,
        status=check_status(board),
        move_history=state.move_history + (position,),
    )


def terminal_value(state: GameState, perspective: Cell) -> int:
    if not is_terminal(state):
        raise ValueError("terminal_value called on a non-terminal state")
    if state.status == GameStatus.DRAW:
        return 0
    return 1 if state.status == WIN_STATUS.get(perspective) else -1


def heuristic_value(state: GameState) -> int:
    """X-perspective score: +1 X has won, -1 O has won, 0 otherwise."""
    status = check_status(state.board)
    if status == GameStatus.X_WINS:
        return 1
    if status == GameStatus.O_WINS:
        return -1
    return 0


def move_difference(before: Board, after: Board) -> Position:
    diff = [p for p in ALL_POSITIONS if cell_at(before, p) != cell_at(after, p)]
    if len(diff) != 1:
        raise ValueError(f"Boards differ in {len(diff)} cells, expected exactly one")
    return diff[0]


def current_player_for(board: Board) -> Cell:
    x, o = piece_counts(board)
    return Cell.X if x == o else Cell.O


def is_valid_state(board: Board) -> bool:
    """True if `board` can arise from legal play starting with X."""
    x_count, o_count = piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False

    def count_wins(p: Cell) -> int:
        return sum(1 for line in WIN_LINES if all(cell_at(board, q) == p for q in line))

    x_wins, o_wins = count_wins(Cell.X), count_wins(Cell.O)
    if x_wins and o_wins:
        return False
    if x_wins and x_count != o_count + 1:
        return False
    if o_wins and x_count != o_count:
        return False
    return True


def state_from_board(board: Board) -> GameState:
    """Rebuild a GameState for a literal board.

    The move history is reconstructed by alternating X and O cells in
    row-major order; it is a plausible history, not necessarily the real one.
    """
    if not is_valid_state(board):
        raise ValueError("Board is not a valid reachable state")
    xs = [p for p in ALL_POSITIONS if cell_at(board, p) == Cell.X]
    os_ = [p for p in ALL_POSITIONS if cell_at(board, p) == Cell.O]
    history: List[Position] = []
    for i, x in enumerate(xs):
        history.append(x)
        if i < len(os_):
            history.append(os_[i])
    return GameState(
        board=board,
        current_player=current_player_for(board),
        status=check_status(board),
        move_history=tuple(history),
    )
