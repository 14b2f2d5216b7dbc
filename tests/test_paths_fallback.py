from pathlib import Path

from ttt_engine.paths import get_git_commit, repo_root, strategy_out


def test_repo_root_prefers_cwd_when_no_git_and_no_env(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("TTT_ENGINE_REPO_ROOT", raising=False)
    monkeypatch.delenv("TTT_ENGINE_OUT", raising=False)
    monkeypatch.chdir(tmp_path)
    import ttt_engine.paths as P

    monkeypatch.setattr(P, "_find_git_root", lambda start: None)

    assert repo_root() == tmp_path
    assert strategy_out() == tmp_path / "strategy_out"


def test_env_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TTT_ENGINE_REPO_ROOT", str(tmp_path))
    monkeypatch.setenv("TTT_ENGINE_OUT", str(tmp_path / "elsewhere"))
    assert repo_root() == tmp_path
    assert strategy_out() == tmp_path / "elsewhere"


def test_git_commit_outside_repo_is_none(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TTT_ENGINE_REPO_ROOT", str(tmp_path))
    assert get_git_commit() is None
