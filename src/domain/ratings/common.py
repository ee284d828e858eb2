"""Shared types for the board-game rating engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

STARTING_RATING = 1500


@dataclass(frozen=True)
class RatingHistoryEntry:
    """One rating change applied to a player by one game."""

    game_id: str
    rating: int
    change: int
    date: datetime


@dataclass(frozen=True)
class Player:
    """Identity plus rating state for one roster member."""

    id: str
    name: str
    current_rating: int = STARTING_RATING
    peak_rating: int | None = None
    games_played: int = 0
    wins: int = 0
    rating_history: tuple[RatingHistoryEntry, ...] = ()
    created_at: datetime | None = None

    @property
    def last_played_at(self) -> datetime | None:
        if not self.rating_history:
            return None
        return self.rating_history[-1].date


@dataclass(frozen=True)
class Game:
    """One completed match; placements[0] finished first."""

    id: str
    date: datetime
    placements: tuple[str, ...]
    rating_changes: Mapping[str, int] = field(default_factory=dict)
    expansions: tuple[str, ...] | None = None
    generations: int | None = None

    @property
    def is_two_player_game(self) -> bool:
        return len(self.placements) == 2


@dataclass(frozen=True)
class RosterSnapshot:
    """Everything a store persists for one scope."""

    players: Mapping[str, Player] = field(default_factory=dict)
    games: tuple[Game, ...] = ()


PlayerLookup = Mapping[str, Player]


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC; naive inputs are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


__all__ = [
    "STARTING_RATING",
    "Game",
    "Player",
    "PlayerLookup",
    "RatingHistoryEntry",
    "RosterSnapshot",
    "to_utc_naive",
    "utc_now",
]
