"""Tests for UTC month windows."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from domain.ratings.common import Game
from domain.ratings.windows import games_in_window, month_bounds, window_participants


def test_month_bounds_regular_month() -> None:
    assert month_bounds(2026, 2) == (datetime(2026, 2, 1), datetime(2026, 3, 1))


def test_month_bounds_december_rolls_over_year() -> None:
    assert month_bounds(2025, 12) == (datetime(2025, 12, 1), datetime(2026, 1, 1))


@pytest.mark.parametrize("month", [0, 13])
def test_month_bounds_rejects_invalid_month(month: int) -> None:
    with pytest.raises(ValueError, match="month must be between 1 and 12"):
        month_bounds(2026, month)


def test_games_in_window_includes_start_and_excludes_end() -> None:
    start, end = month_bounds(2026, 1)
    at_start = Game(id="start", date=start, placements=("a", "b", "c"))
    last_second = Game(id="last", date=end - timedelta(seconds=1), placements=("a", "b", "c"))
    at_end = Game(id="end", date=end, placements=("a", "b", "c"))

    selected = games_in_window([at_start, last_second, at_end], start, end)

    assert [game.id for game in selected] == ["start", "last"]


def test_games_in_window_normalizes_aware_dates_to_utc() -> None:
    start, end = month_bounds(2026, 1)
    # 00:30 on Feb 1 in UTC+1 is still January in UTC.
    late_january = Game(
        id="g1",
        date=datetime(2026, 2, 1, 0, 30, tzinfo=timezone(timedelta(hours=1))),
        placements=("a", "b", "c"),
    )
    assert games_in_window([late_january], start, end) == [late_january]


def test_window_participants() -> None:
    games = [
        Game(id="g1", date=datetime(2026, 1, 3), placements=("a", "b", "c")),
        Game(id="g2", date=datetime(2026, 1, 9), placements=("d", "a")),
    ]
    assert window_participants(games) == {"a", "b", "c", "d"}
