"""
Alpha-beta search over the game tree.
Notes:
- Values are from X's perspective: +1 X wins, 0 draw, -1 O wins. X maximizes,
  O minimizes.
- Two modes share the same recursion:
  * exhaustive (`build_game_tree`): leaves are terminal states only, and the
    visited tree is kept for strategy extraction;
  * depth-limited (`search_to_depth`): leaves are terminal states or nodes with
    no budget left, scored by `heuristic_value`.
- Each top-level call owns its transposition table. Entries carry bound flags,
  so pruned (bounded) results are only reused where the bound is conclusive and
  the root value always equals plain minimax.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Set

from .board import Board, Cell
from .rules import (
    GameState,
    apply_move,
    initial_state,
    is_terminal,
    heuristic_value,
    ordered_legal_moves,
    state_from_board,
    terminal_value,
)
from .symmetry import canonical_key
from .transposition import TranspositionTable

logger = logging.getLogger(__name__)

INF = math.inf


@dataclass(eq=False)
class SearchNode:
    state: GameState
    children: List["SearchNode"] = field(default_factory=list)
    value: float = 0
    alpha: float = -INF
    beta: float = INF
    # back-reference for upward traversal only; parents own their children
    parent: Optional["SearchNode"] = field(default=None, repr=False)

    def iter_nodes(self) -> Iterator["SearchNode"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def _exhaustive_key(state: GameState, with_depth: bool):
    key = (canonical_key(state.board), state.current_player)
    return key + (state.ply_depth,) if with_depth else key


def _expand(node: SearchNode, alpha: float, beta: float,
            table: TranspositionTable, with_depth: bool) -> float:
    state = node.state
    node.alpha, node.beta = alpha, beta
    key = _exhaustive_key(state, with_depth)

    cached = table.probe(key, alpha, beta)
    if cached is not None:
        node.value = cached
        return cached

    if is_terminal(state):
        node.value = terminal_value(state, Cell.X)
        table.store(key, node.value, -INF, INF)
        return node.value

    maximizing = state.current_player == Cell.X
    best = -INF if maximizing else INF
    window = (alpha, beta)
    for move in ordered_legal_moves(state):
        child = SearchNode(apply_move(state, move), parent=node)
        value = _expand(child, alpha, beta, table, with_depth)
        node.children.append(child)
        if maximizing:
            best = max(best, value)
            alpha = max(alpha, value)
        else:
            best = min(best, value)
            beta = min(beta, value)
        if beta <= alpha:
            break

    node.value = best
    table.store(key, best, *window)
    return best


def build_game_tree(state: Optional[GameState] = None,
                    key_depth: bool = True,
                    table: Optional[TranspositionTable] = None) -> SearchNode:
    """Exhaustively search from `state` (default: the initial state).

    Returns the root of the visited tree. Children appear in visitation order;
    branches cut off by pruning or answered from the table have no nodes.
    """
    if state is None:
        state = initial_state()
    if table is None:
        table = TranspositionTable()
    root = SearchNode(state)
    _expand(root, -INF, INF, table, key_depth)
    logger.debug("build_game_tree: value=%s table=%d stores=%d hits=%d",
                 root.value, len(table), table.stores, table.hits)
    return root


def search_to_depth(state: GameState, depth: int,
                    alpha: float = -INF, beta: float = INF,
                    table: Optional[TranspositionTable] = None) -> float:
    """Depth-limited alpha-beta value of `state` with `depth` plies of budget."""
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    if table is None:
        table = TranspositionTable()
    if depth == 0 or is_terminal(state):
        return heuristic_value(state)

    key = (canonical_key(state.board), depth)
    cached = table.probe(key, alpha, beta)
    if cached is not None:
        return cached

    maximizing = state.current_player == Cell.X
    best = -INF if maximizing else INF
    window = (alpha, beta)
    for move in ordered_legal_moves(state):
        value = search_to_depth(apply_move(state, move), depth - 1, alpha, beta, table)
        if maximizing:
            best = max(best, value)
            alpha = max(alpha, value)
        else:
            best = min(best, value)
            beta = min(beta, value)
        if beta <= alpha:
            break

    table.store(key, best, *window)
    return best


@lru_cache(maxsize=None)
def _subtree_size(board: Board) -> int:
    state = state_from_board(board)
    if is_terminal(state):
        return 1
    return 1 + sum(_subtree_size(apply_move(state, m).board) for m in ordered_legal_moves(state))


def count_game_tree_nodes(state: Optional[GameState] = None) -> int:
    """Number of nodes in the full, unpruned game tree rooted at `state`."""
    if state is None:
        state = initial_state()
    return _subtree_size(state.board)


@dataclass
class TreeAnalysis:
    total_nodes: int
    unique_positions: int
    max_depth: int
    leaf_nodes: int
    pruning_efficiency: float


def analyze_tree(root: SearchNode) -> TreeAnalysis:
    total = 0
    leaves = 0
    max_depth = 0
    unique: Set[str] = set()
    root_ply = root.state.ply_depth
    for node in root.iter_nodes():
        total += 1
        if not node.children:
            leaves += 1
        max_depth = max(max_depth, node.state.ply_depth - root_ply)
        unique.add(canonical_key(node.state.board))
    full = count_game_tree_nodes(root.state)
    return TreeAnalysis(
        total_nodes=total,
        unique_positions=len(unique),
        max_depth=max_depth,
        leaf_nodes=leaves,
        pruning_efficiency=1.0 - total / full if full else 0.0,
    )


def tree_summary(analysis: TreeAnalysis) -> Dict[str, float]:
    return {
        "total_nodes": analysis.total_nodes,
        "unique_positions": analysis.unique_positions,
        "max_depth": analysis.max_depth,
        "leaf_nodes": analysis.leaf_nodes,
        "pruning_efficiency": round(analysis.pruning_efficiency, 6),
    }
