"""UTC date windows over game history."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from domain.ratings.common import Game, to_utc_naive


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` of a calendar month as naive UTC datetimes."""
    if month < 1 or month > 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def games_in_window(games: Iterable[Game], start: datetime, end: datetime) -> list[Game]:
    return [game for game in games if start <= to_utc_naive(game.date) < end]


def window_participants(games: Iterable[Game]) -> set[str]:
    return {player_id for game in games for player_id in game.placements}


__all__ = ["games_in_window", "month_bounds", "window_participants"]
