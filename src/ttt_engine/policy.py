"""
Move selection by difficulty.
- EASY: weighted random choice over the legal moves (center 3, corner 2,
  edge 1); no search.
- MEDIUM: depth-limited search, `medium_depth` plies beyond each root move.
- HARD: depth-limited search covering the rest of the game (optimal play).
Ties between equally scored root moves go to the first in move order.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .board import Cell, Position
from .config import EngineConfig
from .errors import NoLegalMoves
from .rules import CENTER, CORNERS, GameState, apply_move, is_terminal, ordered_legal_moves
from .search import search_to_depth
from .transposition import TranspositionTable

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def easy_weight(position: Position, config: EngineConfig) -> int:
    if position == CENTER:
        return config.easy_weights["center"]
    if position in CORNERS:
        return config.easy_weights["corner"]
    return config.easy_weights["edge"]


def easy_distribution(state: GameState, config: Optional[EngineConfig] = None) -> List[Tuple[Position, float]]:
    config = config or EngineConfig()
    moves = ordered_legal_moves(state)
    weights = np.array([easy_weight(m, config) for m in moves], dtype=float)
    probs = weights / weights.sum()
    return list(zip(moves, probs.tolist()))


def score_moves(state: GameState, depth: int,
                table: Optional[TranspositionTable] = None) -> List[Tuple[Position, float]]:
    """Depth-limited value of every root move, in move order.

    One table is shared across the root moves; keys include the remaining
    budget, which is the same for every sibling.
    """
    if table is None:
        table = TranspositionTable()
    return [
        (move, search_to_depth(apply_move(state, move), depth, table=table))
        for move in ordered_legal_moves(state)
    ]


def best_move(state: GameState, difficulty: Difficulty = Difficulty.HARD,
              rng: Optional[np.random.Generator] = None,
              config: Optional[EngineConfig] = None) -> Position:
    config = config or EngineConfig()
    difficulty = Difficulty(difficulty)
    if is_terminal(state) or not ordered_legal_moves(state):
        raise NoLegalMoves(state)

    if difficulty is Difficulty.EASY:
        if rng is None:
            rng = np.random.default_rng(config.seed)
        dist = easy_distribution(state, config)
        idx = int(rng.choice(len(dist), p=[p for _, p in dist]))
        move = dist[idx][0]
        logger.debug("easy move=%s", move)
        return move

    depth = config.medium_depth if difficulty is Difficulty.MEDIUM else config.hard_depth
    scored = score_moves(state, depth)
    maximizing = state.current_player == Cell.X
    move, value = scored[0]
    for candidate, v in scored[1:]:
        if (maximizing and v > value) or (not maximizing and v < value):
            move, value = candidate, v
    logger.debug("%s move=%s value=%s depth=%d", difficulty.value, move, value, depth)
    return move
