"""Shared protocols and enums for ranking views and persistence."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from domain.ratings.common import RosterSnapshot


class RankingView(str, Enum):
    """Which slice of history a ranking is computed from."""

    ALL_TIME = "all_time"
    MONTHLY_ACCUMULATED = "monthly_accumulated"
    MONTHLY_INDEPENDENT = "monthly_independent"


class DeltaPolicy(str, Enum):
    """How replay obtains each game's rating changes."""

    RECOMPUTE = "recompute"
    TRUST_STORED = "trust_stored"


class StartPolicy(str, Enum):
    """Where each player's rating starts when a window is replayed."""

    BASELINE = "baseline"
    ACCUMULATED = "accumulated"


@runtime_checkable
class SnapshotStore(Protocol):
    """Persistence capability injected into the ranking service."""

    def load(self, scope: str) -> RosterSnapshot: ...

    def save(self, scope: str, snapshot: RosterSnapshot) -> None: ...


__all__ = [
    "DeltaPolicy",
    "RankingView",
    "SnapshotStore",
    "StartPolicy",
]
