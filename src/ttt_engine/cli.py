from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np

from .board import deserialize, render, serialize
from .config import load_config
from .errors import NoLegalMoves
from .export import ExportArgs, run_export
from .paths import strategy_out
from .policy import Difficulty, best_move, score_moves
from .rules import is_valid_state, state_from_board, winning_line
from .search import analyze_tree, build_game_tree, tree_summary
from .solver import solve_board
from .symmetry import symmetry_info
from .tracking import maybe_mlflow_run


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-engine", description="Tic-tac-toe search engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for Easy-mode sampling")

    board_help = "Board string, 9 digits row-major (0=empty,1=X,2=O), e.g. 100020000"

    p_status = sub.add_parser("status", help="Show status and winning line of a board")
    p_status.add_argument("--board", required=True, help=board_help)

    p_sym = sub.add_parser("symmetry", help="Show symmetry info for a board")
    p_sym.add_argument("--board", help=board_help + " (omit with --stdin)")
    p_sym.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_sol = sub.add_parser("solve", help="Solve a board with plain minimax (X-perspective value)")
    p_sol.add_argument("--board", required=True, help=board_help)

    p_move = sub.add_parser("move", help="Recommend a move for the side to move")
    p_move.add_argument("--board", required=True, help=board_help)
    p_move.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.HARD.value,
        help="Search strength (default: hard)",
    )
    p_move.add_argument("--scores", action="store_true", help="Also log per-move search values")

    p_tree = sub.add_parser("tree", help="Build the full game tree and print its analysis")
    p_tree.add_argument("--board", default="000000000", help=board_help)
    p_tree.add_argument(
        "--no-key-depth",
        dest="key_depth",
        action="store_false",
        help="Drop depth-from-root from transposition keys",
    )

    p_st = sub.add_parser("strategy", help="Strategy table utilities")
    g = p_st.add_subparsers(dest="subcmd")
    p_export = g.add_parser("export", help="Export the optimal-move table (csv|parquet|both)")
    p_export.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output directory (default: $TTT_ENGINE_OUT or <repo>/strategy_out)",
    )
    p_export.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Export format: csv (default), parquet, both",
    )
    p_export.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_export.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )
    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            print(f"{pkg}={getattr(mod, '__version__', '?')}")


def _load_board(raw: Optional[str]):
    """Parse and validate a board string; log and return None when invalid."""
    raw = (raw or "").strip()
    try:
        board = deserialize(raw)
    except ValueError:
        logging.error("Invalid board string. Must be 9 chars of 0/1/2.")
        return None
    if not is_valid_state(board):
        logging.error("Board is not a valid reachable state.")
        return None
    return board


def _symmetry_stdin() -> int:
    import csv as _csv

    w = _csv.writer(sys.stdout)
    w.writerow(["board", "canonical_form", "orbit_size", "canonical_op"])
    for line in sys.stdin:
        raw = line.strip()
        if not raw:
            continue
        try:
            board = deserialize(raw)
        except ValueError:
            continue
        if not is_valid_state(board):
            continue
        info = symmetry_info(board)
        w.writerow([raw, info['canonical_form'], info['orbit_size'], info['canonical_op']])
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if ns.version:
        try:
            from importlib.metadata import version as _ver

            print(_ver("ttt-engine"))
        except Exception:
            print("unknown")
        return 0
    if ns.info:
        _print_info()
        return 0

    try:
        config = load_config()
    except ValueError as e:
        logging.error("%s", e)
        return 2

    if ns.cmd == "symmetry" and ns.stdin:
        return _symmetry_stdin()

    if ns.cmd in {"status", "symmetry", "solve", "move", "tree"}:
        board = _load_board(ns.board)
        if board is None:
            return 2
        state = state_from_board(board)
        logging.debug("board:\n%s", render(board))

    if ns.cmd == "status":
        line = winning_line(state)
        logging.info(
            "status=%s to_move=%s ply=%d line=%s",
            state.status.name,
            state.current_player.name,
            state.ply_depth,
            [tuple(p) for p in line],
        )
        return 0

    if ns.cmd == "symmetry":
        info = symmetry_info(board)
        logging.info(
            "canonical_form=%s orbit_size=%d op=%s",
            info['canonical_form'],
            info['orbit_size'],
            info['canonical_op'],
        )
        return 0

    if ns.cmd == "solve":
        res = solve_board(board)
        logging.info(
            "value=%s to_move=%s optimal=%s",
            res['value'],
            res['to_move'].name,
            [tuple(m) for m in res['optimal_moves']],
        )
        return 0

    if ns.cmd == "move":
        seed = ns.seed if ns.seed is not None else config.seed
        difficulty = Difficulty(ns.difficulty)
        try:
            move = best_move(state, difficulty, rng=np.random.default_rng(seed), config=config)
        except NoLegalMoves as e:
            logging.error("%s", e)
            return 2
        if ns.scores and difficulty is not Difficulty.EASY:
            depth = config.medium_depth if difficulty is Difficulty.MEDIUM else config.hard_depth
            for m, v in score_moves(state, depth):
                logging.info("score move=%s value=%s", tuple(m), v)
        logging.info("move=%s difficulty=%s", tuple(move), difficulty.value)
        return 0

    if ns.cmd == "tree":
        root = build_game_tree(state, key_depth=ns.key_depth and config.key_depth_in_exhaustive)
        summary = tree_summary(analyze_tree(root))
        logging.info(
            "board=%s value=%s %s",
            serialize(board),
            root.value,
            " ".join(f"{k}={v}" for k, v in summary.items()),
        )
        return 0

    if ns.cmd == "strategy" and ns.subcmd == "export":
        with maybe_mlflow_run(ns.tracking == "mlflow", run_name="strategy_export", log_dir=ns.log_dir):
            try:
                out = run_export(ExportArgs(
                    out=ns.out if ns.out is not None else strategy_out(),
                    format=ns.format,
                    key_depth=config.key_depth_in_exhaustive,
                    cli_argv=list(argv) if argv is not None else None,
                ))
            except RuntimeError as e:
                logging.error("%s", e)
                return 2
        logging.info("Exported strategy table to: %s", out)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
