"""Transposition table for alpha-beta search.

A table maps a position key to the value found for it and a bound flag:

- EXACT: the value is the true minimax value of the position.
- LOWER: the search failed high (value >= beta); the true value is at least this.
- UPPER: the search failed low (value <= alpha); the true value is at most this.

A table belongs to exactly one top-level search call. Callers create a fresh
one per call (or let the search create it) and never share it between calls
that build keys differently.

Usage (example):

    tt = TranspositionTable()
    hit = tt.probe(key, alpha, beta)
    if hit is None:
        value = ...search...
        tt.store(key, value, alpha, beta)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Optional


class Bound(Enum):
    EXACT = 0
    LOWER = 1
    UPPER = 2


@dataclass(frozen=True)
class TTEntry:
    value: float
    bound: Bound


def classify(value: float, alpha: float, beta: float) -> Bound:
    """Bound type of a fail-soft result searched with window (alpha, beta)."""
    if value <= alpha:
        return Bound.UPPER
    if value >= beta:
        return Bound.LOWER
    return Bound.EXACT


class TranspositionTable:
    def __init__(self) -> None:
        self._table: Dict[Hashable, TTEntry] = {}
        self.hits = 0
        self.stores = 0

    def __len__(self) -> int:
        return len(self._table)

    def probe(self, key: Hashable, alpha: float, beta: float) -> Optional[float]:
        """Return a stored value usable inside window (alpha, beta), else None."""
        entry = self._table.get(key)
        if entry is None:
            return None
        if (
            entry.bound is Bound.EXACT
            or (entry.bound is Bound.LOWER and entry.value >= beta)
            or (entry.bound is Bound.UPPER and entry.value <= alpha)
        ):
            self.hits += 1
            return entry.value
        return None

    def store(self, key: Hashable, value: float, alpha: float, beta: float) -> TTEntry:
        """Record `value` for `key`; an exact entry is never replaced."""
        current = self._table.get(key)
        if current is not None and current.bound is Bound.EXACT:
            return current
        entry = TTEntry(value, classify(value, alpha, beta))
        self._table[key] = entry
        self.stores += 1
        return entry

    def clear(self) -> None:
        self._table.clear()
        self.hits = 0
        self.stores = 0
