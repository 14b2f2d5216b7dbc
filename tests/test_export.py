import csv
import json
from pathlib import Path

import pytest

import ttt_engine.export as export_mod
from ttt_engine.board import Position, deserialize
from ttt_engine.export import ExportArgs, run_export
from ttt_engine.solver import solve_board


def test_run_export_csv_and_manifest(tmp_path: Path):
    out = run_export(ExportArgs(out=tmp_path / "exp"))
    manifest = json.loads((out / "manifest.json").read_text())
    with (out / "strategy.csv").open() as f:
        rows = list(csv.DictReader(f))
    assert manifest["row_count"] == len(rows) > 0
    assert manifest["root_value"] == 0
    assert manifest["parquet_written"] is False
    assert manifest["tree"]["total_nodes"] > manifest["tree"]["unique_positions"] > 0
    assert set(manifest["checksums"]) == {"strategy_csv"}
    opening = next(r for r in rows if r["key"] == "000000000_1")
    assert (opening["row"], opening["col"]) == ("1", "1")
    assert opening["value"] == "0"
    assert [r["key"] for r in rows] == sorted(r["key"] for r in rows)


def test_run_export_reproducible(tmp_path: Path):
    run_export(ExportArgs(out=tmp_path / "a"))
    run_export(ExportArgs(out=tmp_path / "b"))
    assert (tmp_path / "a" / "strategy.csv").read_bytes() == (tmp_path / "b" / "strategy.csv").read_bytes()
    m1 = json.loads((tmp_path / "a" / "manifest.json").read_text())
    m2 = json.loads((tmp_path / "b" / "manifest.json").read_text())
    assert m1["schema_hash"] == m2["schema_hash"]
    assert m1["checksums"] == m2["checksums"]


def test_unknown_format_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        run_export(ExportArgs(out=tmp_path / "x", format="xlsx"))


def test_parquet_only_without_dependencies_fails_early(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(export_mod.importlib.util, "find_spec", lambda name: None)
    with pytest.raises(RuntimeError):
        run_export(ExportArgs(out=tmp_path / "pq", format="parquet"))
    assert not (tmp_path / "pq").exists()


def test_both_without_parquet_degrades_to_csv(tmp_path: Path, monkeypatch):
    real = export_mod.importlib.util.find_spec
    monkeypatch.setattr(
        export_mod.importlib.util,
        "find_spec",
        lambda name: None if name in {"pandas", "pyarrow"} else real(name),
    )
    out = run_export(ExportArgs(out=tmp_path / "both", format="both"))
    manifest = json.loads((out / "manifest.json").read_text())
    assert manifest["parquet_written"] is False
    assert (out / "strategy.csv").exists()
    assert not (out / "strategy.parquet").exists()


def test_exported_moves_read_in_canonical_frame(tmp_path: Path):
    out = run_export(ExportArgs(out=tmp_path / "frame"))
    manifest = json.loads((out / "manifest.json").read_text())
    with (out / "strategy.csv").open() as f:
        rows = list(csv.DictReader(f))
    exact_rows = [r for r in rows if r["exact"] == "True"]
    assert manifest["exact_row_count"] == len(exact_rows) > 0
    for r in rows:
        assert r["canonical_form"][int(r["row"]) * 3 + int(r["col"])] == "0", r["key"]
    for r in exact_rows:
        move = Position(int(r["row"]), int(r["col"]))
        assert move in solve_board(deserialize(r["canonical_form"]))['optimal_moves'], r["key"]
