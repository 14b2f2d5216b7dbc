"""ttt_engine package.

Rules, symmetry canonicalization and alpha-beta search for 3x3 tic-tac-toe,
plus a strategy-table exporter and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Cell, Position, empty_board
from .errors import IllegalMove, NoLegalMoves
from .policy import Difficulty, best_move
from .rules import (
    GameState,
    GameStatus,
    apply_move,
    initial_state,
    is_terminal,
    legal_moves,
    winning_line,
)
from .search import build_game_tree, search_to_depth
from .strategy import calculate_optimal_strategy, extract_strategy
from .symmetry import canonical_form


def status(state: GameState) -> GameStatus:
    return state.status


__all__ = [
    "Cell",
    "Position",
    "GameState",
    "GameStatus",
    "Difficulty",
    "IllegalMove",
    "NoLegalMoves",
    "empty_board",
    "initial_state",
    "apply_move",
    "legal_moves",
    "is_terminal",
    "status",
    "winning_line",
    "best_move",
    "build_game_tree",
    "search_to_depth",
    "canonical_form",
    "extract_strategy",
    "calculate_optimal_strategy",
]
