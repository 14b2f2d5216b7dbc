"""
Exact game-theoretic solver: plain minimax with memoization, no pruning.
Values are from X's perspective (+1 X wins, 0 draw, -1 O wins).
Serves as the reference the alpha-beta search must agree with.
"""
from collections import deque
from functools import lru_cache
from typing import Dict

from .board import Board, Cell, empty_board, serialize
from .rules import (
    apply_move,
    is_terminal,
    legal_moves,
    state_from_board,
    terminal_value,
)


@lru_cache(maxsize=None)
def solve_board(board: Board) -> Dict:
    state = state_from_board(board)
    if is_terminal(state):
        return {
            'value': terminal_value(state, Cell.X),
            'to_move': state.current_player,
            'optimal_moves': tuple(),
            'move_values': tuple(),
        }
    maximizing = state.current_player == Cell.X
    move_values = []
    for mv in legal_moves(state):
        child = apply_move(state, mv)
        move_values.append((mv, solve_board(child.board)['value']))
    pick = max if maximizing else min
    best = pick(v for _, v in move_values)
    return {
        'value': best,
        'to_move': state.current_player,
        'optimal_moves': tuple(mv for mv, v in move_values if v == best),
        'move_values': tuple(move_values),
    }


def minimax_value(state) -> int:
    return solve_board(state.board)['value']


def solve_all_reachable() -> Dict[str, Dict]:
    """Enumerate and solve all boards reachable from the empty board."""
    start = empty_board()
    q = deque([start])
    seen = {start}
    order = []
    while q:
        board = q.popleft()
        order.append(board)
        state = state_from_board(board)
        if is_terminal(state):
            continue
        for mv in legal_moves(state):
            child = apply_move(state, mv).board
            if child not in seen:
                seen.add(child)
                q.append(child)
    return {serialize(b): solve_board(b) for b in order}
