"""
Strategy-table export.

Builds the full game tree, extracts the optimal move per canonical position
and writes it as CSV (and optionally Parquet) next to a manifest describing
the run.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .board import deserialize
from .paths import get_git_commit, get_git_is_dirty
from .search import analyze_tree, build_game_tree, tree_summary
from .solver import solve_board
from .strategy import extract_strategy_entries
from .symmetry import symmetry_info
from .tracking import log_artifact, log_metrics, log_params

EXPORT_VERSION = "1.1.0"
STRATEGY_CSV = "strategy.csv"
STRATEGY_PARQUET = "strategy.parquet"
FIELDNAMES = ["key", "canonical_form", "to_move", "row", "col", "value", "exact", "orbit_size"]


@dataclass
class ExportArgs:
    out: Path
    format: str = "csv"  # one of: "csv", "parquet", "both"
    key_depth: bool = True
    cli_argv: List[str] | None = None


def _schema_hash(fieldnames: List[str]) -> str:
    payload = "\n".join(sorted(fieldnames)).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def strategy_rows(entries) -> List[Dict[str, Any]]:
    """One row per entry; (row, col) are in the frame of `canonical_form`."""
    rows = []
    for key, entry in entries.items():
        move = entry.move
        canonical, to_move = key.split("_")
        board = deserialize(canonical)
        rows.append({
            "key": key,
            "canonical_form": canonical,
            "to_move": int(to_move),
            "row": move.row,
            "col": move.col,
            "value": solve_board(board)['value'],
            "exact": entry.exact,
            "orbit_size": symmetry_info(board)['orbit_size'],
        })
    rows.sort(key=lambda r: r["key"])
    return rows


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        w.writerows(rows)


def _write_parquet(path: Path, rows: List[Dict[str, Any]]) -> None:
    import pandas as pd  # type: ignore

    pd.DataFrame(rows, columns=FIELDNAMES).to_parquet(path)


def run_export(args: ExportArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in {"csv", "parquet", "both"}:
        raise ValueError(f"Unknown export format: {args.format}")
    have_parquet = all(importlib.util.find_spec(m) is not None for m in ("pandas", "pyarrow"))
    if fmt == "parquet" and not have_parquet:
        # user asked only for parquet; fail before writing anything
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )
    args.out.mkdir(parents=True, exist_ok=True)

    logging.info("Building full game tree…")
    root = build_game_tree(key_depth=args.key_depth)
    analysis = tree_summary(analyze_tree(root))
    logging.info("Root value=%s nodes=%d unique=%d",
                 root.value, analysis["total_nodes"], analysis["unique_positions"])
    rows = strategy_rows(extract_strategy_entries(root))

    files: Dict[str, Any] = {"strategy_csv": None, "strategy_parquet": None}
    if fmt in {"csv", "both"}:
        csv_path = args.out / STRATEGY_CSV
        _write_csv(csv_path, rows)
        files["strategy_csv"] = csv_path
        logging.info("Wrote CSV: %s (%d rows)", csv_path, len(rows))
    if fmt in {"parquet", "both"}:
        if have_parquet:
            parquet_path = args.out / STRATEGY_PARQUET
            _write_parquet(parquet_path, rows)
            files["strategy_parquet"] = parquet_path
            logging.info("Wrote Parquet: %s", parquet_path)
        else:
            logging.warning(
                "Parquet dependencies not available; proceeding with CSV only, "
                "manifest will record parquet_written=false."
            )

    packages: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is not None:
            ver = getattr(__import__(pkg), "__version__", None)
            if ver:
                packages[pkg] = ver

    manifest = {
        "export_version": EXPORT_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {"format": fmt, "key_depth": args.key_depth},
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {"python_version": sys.version.split(" ")[0], "packages": packages},
        "cli_argv": args.cli_argv,
        "root_value": root.value,
        "row_count": len(rows),
        "exact_row_count": sum(1 for r in rows if r["exact"]),
        "tree": analysis,
        "schema_hash": _schema_hash(FIELDNAMES),
        "files": {k: str(v) if v is not None else None for k, v in files.items()},
        "checksums": {k: sha256_file(v) for k, v in files.items() if v is not None},
        "parquet_written": files["strategy_parquet"] is not None,
    }
    manifest_path = args.out / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json")

    log_params({"format": fmt, "key_depth": args.key_depth, "rows": len(rows)})
    log_metrics({k: float(v) for k, v in analysis.items()})
    log_artifact(manifest_path)
    for path in files.values():
        if path is not None:
            log_artifact(path)
    return args.out
