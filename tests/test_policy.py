from collections import Counter

import numpy as np
import pytest

from ttt_engine.board import Cell, Position, deserialize, make_board
from ttt_engine.config import EngineConfig
from ttt_engine.errors import NoLegalMoves
from ttt_engine.policy import Difficulty, best_move, easy_distribution, score_moves
from ttt_engine.rules import (
    CORNERS,
    WIN_STATUS,
    apply_move,
    initial_state,
    is_terminal,
    legal_moves,
    state_from_board,
)


def test_hard_answers_center_with_corner():
    s = state_from_board(make_board([[1, 0, 0], [0, 2, 0], [0, 0, 0]]))
    assert s.current_player is Cell.X
    move = best_move(s, Difficulty.HARD)
    assert move in {Position(0, 2), Position(2, 0), Position(2, 2)}


@pytest.mark.parametrize("difficulty", [Difficulty.MEDIUM, Difficulty.HARD])
def test_takes_immediate_win(difficulty):
    s = state_from_board(make_board([[1, 1, 0], [2, 2, 0], [0, 0, 0]]))
    assert best_move(s, difficulty) == Position(0, 2)


@pytest.mark.parametrize("difficulty", ["medium", "hard"])
def test_o_takes_immediate_win(difficulty):
    s = state_from_board(deserialize("110220100"))
    assert s.current_player is Cell.O
    assert best_move(s, difficulty) == Position(1, 2)


def test_hard_blocks_threat():
    # O to move, X threatens the top row
    s = state_from_board(deserialize("110020000"))
    assert best_move(s, Difficulty.HARD) == Position(0, 2)


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_no_legal_moves_on_terminal_state(difficulty):
    won = state_from_board(deserialize("111220000"))
    with pytest.raises(NoLegalMoves):
        best_move(won, difficulty)
    full = state_from_board(deserialize("121121212"))
    with pytest.raises(NoLegalMoves):
        best_move(full, difficulty)


def test_easy_distribution_weights():
    dist = dict(easy_distribution(initial_state()))
    assert dist[Position(1, 1)] == pytest.approx(3 / 15)
    for c in CORNERS:
        assert dist[c] == pytest.approx(2 / 15)
    assert dist[Position(0, 1)] == pytest.approx(1 / 15)
    assert sum(dist.values()) == pytest.approx(1.0)


def test_easy_is_seeded_and_legal():
    s = state_from_board(deserialize("100020000"))
    m1 = best_move(s, Difficulty.EASY, rng=np.random.default_rng(3))
    m2 = best_move(s, Difficulty.EASY, rng=np.random.default_rng(3))
    assert m1 == m2
    assert m1 in legal_moves(s)


def test_easy_sampling_frequencies():
    rng = np.random.default_rng(42)
    counts = Counter(best_move(initial_state(), Difficulty.EASY, rng=rng) for _ in range(3000))
    assert set(counts) <= set(legal_moves(initial_state()))
    center = counts[Position(1, 1)] / 3000
    edge = counts[Position(0, 1)] / 3000
    assert 0.15 < center < 0.25
    assert 0.03 < edge < 0.10


def test_config_depth_is_used():
    # with no look-ahead only the immediately winning move scores above 0
    s = state_from_board(deserialize("110220000"))
    cfg = EngineConfig(medium_depth=0)
    assert best_move(s, Difficulty.MEDIUM, config=cfg) == Position(0, 2)
    scored = score_moves(s, 0)
    assert scored[0] == (Position(0, 2), 1)


def _never_loses(state, hard_player, memo):
    """True if `hard_player` playing Hard cannot lose against any replies."""
    if is_terminal(state):
        return state.status != WIN_STATUS[hard_player.opponent]
    if state.board in memo:
        return memo[state.board]
    if state.current_player == hard_player:
        ok = _never_loses(apply_move(state, best_move(state, Difficulty.HARD)), hard_player, memo)
    else:
        ok = all(_never_loses(apply_move(state, m), hard_player, memo) for m in legal_moves(state))
    memo[state.board] = ok
    return ok


@pytest.mark.parametrize("hard_player", [Cell.X, Cell.O])
def test_hard_never_loses_against_any_replies(hard_player):
    # every Easy/Medium/Hard opponent line is among "any replies"
    assert _never_loses(initial_state(), hard_player, {})


def test_hard_self_play_is_draw():
    s = initial_state()
    while not is_terminal(s):
        s = apply_move(s, best_move(s, Difficulty.HARD))
    assert s.status.name == "DRAW"


@pytest.mark.parametrize("opponent", [Difficulty.EASY, Difficulty.MEDIUM])
@pytest.mark.parametrize("hard_player", [Cell.X, Cell.O])
def test_hard_vs_weaker_tiers(opponent, hard_player):
    rng = np.random.default_rng(5)
    for _ in range(5):
        s = initial_state()
        while not is_terminal(s):
            tier = Difficulty.HARD if s.current_player == hard_player else opponent
            s = apply_move(s, best_move(s, tier, rng=rng))
        assert s.status != WIN_STATUS[hard_player.opponent]
