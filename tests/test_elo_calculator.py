"""Unit tests for multiplayer Elo calculations."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.ratings.common import Game, Player
from domain.ratings.elo.calculator import (
    EloParameters,
    apply_rating_changes,
    calculate_actual_score,
    calculate_expected_score,
    calculate_raw_rating_changes,
    calculate_rating_changes,
    has_low_confidence,
    rating_changes_for_game,
    round_rating_change,
)


def _players(**ratings: int) -> dict[str, Player]:
    return {
        player_id: Player(id=player_id, name=player_id.upper(), current_rating=rating)
        for player_id, rating in ratings.items()
    }


def test_elo_parameters_defaults_are_expected_constants() -> None:
    params = EloParameters()
    assert params.starting_rating == 1500
    assert params.k_factor == pytest.approx(40.0)
    assert params.scale_factor == pytest.approx(400.0)


def test_expected_score_equal_ratings_is_half() -> None:
    assert calculate_expected_score(1500, 1500) == pytest.approx(0.5)


def test_expected_scores_sum_to_one() -> None:
    expected_a = calculate_expected_score(1620, 1480)
    expected_b = calculate_expected_score(1480, 1620)
    assert expected_a + expected_b == pytest.approx(1.0)


def test_expected_score_four_hundred_points_apart() -> None:
    assert calculate_expected_score(1500, 1900) == pytest.approx(1.0 / 11.0)


def test_expected_score_increases_with_rating() -> None:
    scores = [calculate_expected_score(rating, 1500) for rating in (1300, 1400, 1500, 1600, 1700)]
    assert scores == sorted(scores)
    assert len(set(scores)) == len(scores)


def test_actual_score_by_placement_order() -> None:
    assert calculate_actual_score(0, 2) == 1.0
    assert calculate_actual_score(1, 1) == 0.5
    assert calculate_actual_score(3, 1) == 0.0


def test_three_player_game_from_equal_ratings() -> None:
    players = _players(a=1500, b=1500, c=1500)
    changes = calculate_rating_changes(["a", "b", "c"], players, 40)
    assert changes == {"a": 40, "b": 0, "c": -40}


def test_raw_changes_are_zero_sum() -> None:
    players = _players(a=1612, b=1488, c=1530, d=1399)
    raw = calculate_raw_rating_changes(["d", "a", "c", "b"], players, 40)
    assert sum(raw.values()) == pytest.approx(0.0)
    assert raw["d"] > 0
    assert raw["b"] < 0


def test_round_rating_change_rounds_half_away_from_zero() -> None:
    assert round_rating_change(12.5) == 13
    assert round_rating_change(-12.5) == -13
    assert round_rating_change(2.5) == 3
    assert round_rating_change(2.4) == 2
    assert round_rating_change(-0.4) == 0


def test_unknown_players_are_skipped() -> None:
    players = _players(a=1500, b=1500)
    changes = calculate_rating_changes(["a", "ghost", "b"], players, 40)
    assert changes == {"a": 20, "b": -20}


def test_single_known_player_gets_zero() -> None:
    players = _players(a=1500)
    assert calculate_rating_changes(["a"], players, 40) == {"a": 0}


def test_two_player_game_never_moves_ratings() -> None:
    players = _players(a=1500, b=1500)
    assert calculate_rating_changes(["a", "b"], players, 40) == {"a": 20, "b": -20}
    assert rating_changes_for_game(["a", "b"], players, 40) == {"a": 0, "b": 0}


def test_rating_changes_for_game_uses_k_factor() -> None:
    players = _players(a=1500, b=1500, c=1500)
    assert rating_changes_for_game(["a", "b", "c"], players, 32) == {"a": 32, "b": 0, "c": -32}


def test_apply_rating_changes_does_not_mutate_input() -> None:
    players = _players(a=1500, b=1500, c=1500)
    game = Game(
        id="g1",
        date=datetime(2026, 3, 1, 20, 0, 0),
        placements=("a", "b", "c"),
        rating_changes={"a": 40, "b": 0, "c": -40},
    )

    updated = apply_rating_changes(players, game)

    assert updated is not players
    assert players["a"].current_rating == 1500
    assert players["a"].games_played == 0
    assert updated["a"].current_rating == 1540
    assert updated["a"].wins == 1
    assert updated["b"].wins == 0
    assert updated["c"].current_rating == 1460
    assert [player.games_played for player in updated.values()] == [1, 1, 1]


def test_apply_rating_changes_appends_history_entry() -> None:
    players = _players(a=1500, b=1500, c=1500)
    game_date = datetime(2026, 3, 1, 20, 0, 0)
    game = Game(id="g1", date=game_date, placements=("c", "a", "b"), rating_changes={"c": 40, "a": 0, "b": -40})

    updated = apply_rating_changes(players, game)

    entry = updated["b"].rating_history[-1]
    assert entry.game_id == "g1"
    assert entry.rating == 1460
    assert entry.change == -40
    assert entry.date == game_date
    assert updated["b"].last_played_at == game_date


def test_apply_rating_changes_tracks_peak_rating() -> None:
    players = {
        "a": Player(id="a", name="A", current_rating=1500, peak_rating=1520),
        "b": Player(id="b", name="B", current_rating=1500),
        "c": Player(id="c", name="C", current_rating=1500),
    }
    game = Game(
        id="g1",
        date=datetime(2026, 3, 1),
        placements=("b", "a", "c"),
        rating_changes={"b": 13, "a": -10, "c": -3},
    )

    updated = apply_rating_changes(players, game)

    assert updated["a"].current_rating == 1490
    assert updated["a"].peak_rating == 1520
    assert updated["b"].peak_rating == 1513
    assert updated["c"].peak_rating == 1500


def test_apply_rating_changes_skips_unknown_players() -> None:
    players = _players(a=1500, b=1500)
    game = Game(
        id="g1",
        date=datetime(2026, 3, 1),
        placements=("ghost", "a", "b"),
        rating_changes={"ghost": 40, "a": 0, "b": -40},
    )

    updated = apply_rating_changes(players, game)

    assert set(updated) == {"a", "b"}
    assert updated["a"].wins == 0


def test_low_confidence_boundary() -> None:
    assert has_low_confidence(Player(id="a", name="A", games_played=9), 10)
    assert not has_low_confidence(Player(id="a", name="A", games_played=10), 10)
    assert has_low_confidence(Player(id="a", name="A", games_played=4), 5)
