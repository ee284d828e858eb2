"""Rating-system domain modules."""

from domain.ratings.common import (
    STARTING_RATING,
    Game,
    Player,
    PlayerLookup,
    RatingHistoryEntry,
    RosterSnapshot,
)
from domain.ratings.protocol import DeltaPolicy, RankingView, SnapshotStore, StartPolicy

__all__ = [
    "STARTING_RATING",
    "DeltaPolicy",
    "Game",
    "Player",
    "PlayerLookup",
    "RankingView",
    "RatingHistoryEntry",
    "RosterSnapshot",
    "SnapshotStore",
    "StartPolicy",
]
