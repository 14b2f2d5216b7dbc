#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from ttt_engine.policy import Difficulty, best_move
from ttt_engine.rules import initial_state
from ttt_engine.search import analyze_tree, build_game_tree, tree_summary
from ttt_engine.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 10
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def _time(fn: Callable[[], object], repeats: int) -> List[float]:
    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    return times


def main() -> int:
    p = argparse.ArgumentParser(description="Time tree building and move selection")
    p.add_argument("--repeats", type=int, default=Config.repeats)
    p.add_argument("--tracking", choices=["none", "mlflow"], default="none")
    ns = p.parse_args()
    cfg = Config(repeats=ns.repeats, tracking=ns.tracking)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"repeats": cfg.repeats})
        metrics: Dict[str, float] = {}
        timings = {"build_game_tree": _time(build_game_tree, cfg.repeats)}
        for d in Difficulty:
            timings[f"best_move_{d.value}"] = _time(
                lambda d=d: best_move(initial_state(), d), cfg.repeats
            )
        for name, values in timings.items():
            m, h = ci95(values)
            metrics[f"{name}_mean_s"] = m
            metrics[f"{name}_ci95_half_s"] = h
            logging.info("%s: mean=%.4fs ± %.4fs (95%% CI, N=%d)", name, m, h, cfg.repeats)
        summary = tree_summary(analyze_tree(build_game_tree()))
        logging.info("tree: %s", summary)
        metrics.update({f"tree_{k}": float(v) for k, v in summary.items()})
        log_metrics(metrics)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
