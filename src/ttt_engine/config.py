"""Engine configuration.

Defaults match the difficulty tiers; each can be overridden from the
environment, e.g. ``TTT_ENGINE_MEDIUM_DEPTH=2 ttt-engine move --board ...``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

# Easy-mode sampling weights per cell class
EASY_WEIGHTS = {
    "center": 3,
    "corner": 2,
    "edge": 1,
}

MAX_PLIES = 9


@dataclass
class EngineConfig:
    # remaining-depth budget after the root move being scored
    medium_depth: int = 4
    hard_depth: int = MAX_PLIES - 1
    easy_weights: Dict[str, int] = field(default_factory=lambda: EASY_WEIGHTS.copy())
    # include depth-from-root in exhaustive-mode transposition keys
    key_depth_in_exhaustive: bool = True
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("medium_depth", "hard_depth"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_PLIES - 1:
                raise ValueError(f"{name} must be in [0, {MAX_PLIES - 1}], got {value}")
        missing = set(EASY_WEIGHTS) - set(self.easy_weights)
        if missing:
            raise ValueError(f"easy_weights missing keys: {sorted(missing)}")
        if any(w <= 0 for w in self.easy_weights.values()):
            raise ValueError("easy_weights must be positive")


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config() -> EngineConfig:
    """Defaults, overridden by TTT_ENGINE_MEDIUM_DEPTH / _HARD_DEPTH / _SEED / _KEY_DEPTH."""
    kwargs: Dict[str, object] = {}
    key_depth = _env_int("TTT_ENGINE_KEY_DEPTH")
    if key_depth is not None:
        if key_depth not in (0, 1):
            raise ValueError(f"TTT_ENGINE_KEY_DEPTH must be 0 or 1, got {key_depth}")
        kwargs["key_depth_in_exhaustive"] = bool(key_depth)
    for env, attr in (
        ("TTT_ENGINE_MEDIUM_DEPTH", "medium_depth"),
        ("TTT_ENGINE_HARD_DEPTH", "hard_depth"),
        ("TTT_ENGINE_SEED", "seed"),
    ):
        value = _env_int(env)
        if value is not None:
            kwargs[attr] = value
    return EngineConfig(**kwargs)  # type: ignore[arg-type]
