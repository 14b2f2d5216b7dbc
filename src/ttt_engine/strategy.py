"""
Strategy extraction from an exhaustively built game tree.

For every non-terminal node the child with the best value for the side to
move is chosen (first visited wins ties) and the move leading to it is
recorded under the node's "<canonical key>_<player>" key. The resulting table
can stand in for live search.

Moves are stored in the frame of the canonical board, so an entry reads the
same for every orientation of a position; `lookup_move` maps it back onto the
literal board.

A node whose value lies strictly inside its search window is exact and its
best child is optimal. Nodes that failed high or low only carry a bound; their
entries fill keys that no exact node reached and never replace an exact entry.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .board import Cell, Position
from .rules import GameState, initial_state, is_terminal, move_difference
from .search import SearchNode, build_game_tree
from .symmetry import INVERSE_SYM, symmetry_info, transform_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyEntry:
    move: Position
    exact: bool


def strategy_key(state: GameState) -> str:
    return f"{symmetry_info(state.board)['canonical_form']}_{int(state.current_player)}"


def is_exact(node: SearchNode) -> bool:
    return node.alpha < node.value < node.beta


def best_child(node: SearchNode) -> Optional[SearchNode]:
    maximizing = node.state.current_player == Cell.X
    chosen: Optional[SearchNode] = None
    for child in node.children:
        if chosen is None:
            chosen = child
        elif maximizing and child.value > chosen.value:
            chosen = child
        elif not maximizing and child.value < chosen.value:
            chosen = child
    return chosen


def extract_strategy_entries(root: SearchNode) -> Dict[str, StrategyEntry]:
    table: Dict[str, StrategyEntry] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        if is_terminal(node.state):
            continue
        child = best_child(node)
        if child is not None:
            key = strategy_key(node.state)
            current = table.get(key)
            exact = is_exact(node)
            if current is None or exact or not current.exact:
                move = move_difference(node.state.board, child.state.board)
                op = symmetry_info(node.state.board)['canonical_op']
                table[key] = StrategyEntry(transform_position(move, op), exact)
        # reversed keeps the walk in depth-first visitation order
        stack.extend(reversed(node.children))
    logger.debug("extract_strategy: %d positions, %d exact",
                 len(table), sum(e.exact for e in table.values()))
    return table


def extract_strategy(root: SearchNode) -> Dict[str, Position]:
    return {k: e.move for k, e in extract_strategy_entries(root).items()}


def lookup_move(table: Dict[str, Position], state: GameState) -> Optional[Position]:
    """Recorded move for `state` on its literal board, or None if absent."""
    move = table.get(strategy_key(state))
    if move is None:
        return None
    op = symmetry_info(state.board)['canonical_op']
    return transform_position(move, INVERSE_SYM[op])


def calculate_optimal_strategy(state: Optional[GameState] = None,
                               key_depth: bool = True) -> Dict[str, Position]:
    return extract_strategy(build_game_tree(state or initial_state(), key_depth=key_depth))
