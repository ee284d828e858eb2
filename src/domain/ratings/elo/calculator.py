"""Multiplayer Elo logic for placement-ordered games."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal

from domain.ratings.common import (
    STARTING_RATING,
    Game,
    Player,
    PlayerLookup,
    RatingHistoryEntry,
)

DEFAULT_K_FACTOR = 40.0
MONTHLY_K_FACTOR = 32.0
DEFAULT_SCALE_FACTOR = 400.0
DEFAULT_LOW_CONFIDENCE_THRESHOLD = 10
MONTHLY_LOW_CONFIDENCE_THRESHOLD = 5


@dataclass(frozen=True)
class EloParameters:
    """Starting rating, K-factor and logistic scale for one rating view."""

    starting_rating: int = STARTING_RATING
    k_factor: float = DEFAULT_K_FACTOR
    scale_factor: float = DEFAULT_SCALE_FACTOR


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_actual_score(placement: int, opponent_placement: int) -> float:
    """Score one pairing by finishing order only: better, tied or worse."""
    if placement < opponent_placement:
        return 1.0
    if placement == opponent_placement:
        return 0.5
    return 0.0


def round_rating_change(value: float) -> int:
    """Round a raw delta half away from zero (12.5 -> 13, -12.5 -> -13)."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_raw_rating_changes(
    placements: Sequence[str],
    players: PlayerLookup,
    k_factor: float = DEFAULT_K_FACTOR,
    *,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> dict[str, float]:
    """Unrounded round-robin totals; ids missing from ``players`` are skipped entirely."""
    totals: dict[str, float] = {}
    for player_index, player_id in enumerate(placements):
        player = players.get(player_id)
        if player is None:
            continue

        total = 0.0
        for opponent_index, opponent_id in enumerate(placements):
            if opponent_id == player_id:
                continue
            opponent = players.get(opponent_id)
            if opponent is None:
                continue

            expected = calculate_expected_score(
                player.current_rating,
                opponent.current_rating,
                scale_factor,
            )
            actual = calculate_actual_score(player_index, opponent_index)
            total += k_factor * (actual - expected)

        totals[player_id] = total
    return totals


def calculate_rating_changes(
    placements: Sequence[str],
    players: PlayerLookup,
    k_factor: float = DEFAULT_K_FACTOR,
    *,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> dict[str, int]:
    """Compute integer rating deltas for every known participant of one game."""
    raw = calculate_raw_rating_changes(placements, players, k_factor, scale_factor=scale_factor)
    return {player_id: round_rating_change(total) for player_id, total in raw.items()}


def zero_rating_changes(placements: Sequence[str]) -> dict[str, int]:
    return {player_id: 0 for player_id in placements}


def rating_changes_for_game(
    placements: Sequence[str],
    players: PlayerLookup,
    k_factor: float = DEFAULT_K_FACTOR,
    *,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> dict[str, int]:
    """Deltas for a game about to be applied; two-player games never move ratings."""
    if len(placements) == 2:
        return zero_rating_changes(placements)
    return calculate_rating_changes(placements, players, k_factor, scale_factor=scale_factor)


def apply_rating_changes(players: PlayerLookup, game: Game) -> dict[str, Player]:
    """Return a new lookup with ``game`` applied; the input lookup is left untouched."""
    updated = dict(players)
    for index, player_id in enumerate(game.placements):
        player = updated.get(player_id)
        if player is None:
            continue

        change = game.rating_changes.get(player_id, 0)
        new_rating = player.current_rating + change
        is_win = index == 0
        previous_peak = player.peak_rating if player.peak_rating is not None else player.current_rating

        updated[player_id] = replace(
            player,
            current_rating=new_rating,
            peak_rating=max(previous_peak, new_rating),
            games_played=player.games_played + 1,
            wins=player.wins + (1 if is_win else 0),
            rating_history=player.rating_history
            + (
                RatingHistoryEntry(
                    game_id=game.id,
                    rating=new_rating,
                    change=change,
                    date=game.date,
                ),
            ),
        )
    return updated


def has_low_confidence(
    player: Player,
    threshold: int = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
) -> bool:
    return player.games_played < threshold


__all__ = [
    "DEFAULT_K_FACTOR",
    "DEFAULT_LOW_CONFIDENCE_THRESHOLD",
    "DEFAULT_SCALE_FACTOR",
    "MONTHLY_K_FACTOR",
    "MONTHLY_LOW_CONFIDENCE_THRESHOLD",
    "EloParameters",
    "apply_rating_changes",
    "calculate_actual_score",
    "calculate_expected_score",
    "calculate_raw_rating_changes",
    "calculate_rating_changes",
    "has_low_confidence",
    "rating_changes_for_game",
    "round_rating_change",
    "zero_rating_changes",
]
