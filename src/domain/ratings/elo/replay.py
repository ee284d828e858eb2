"""Chronological replay of game history over a reset roster."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime

from domain.ratings.common import STARTING_RATING, Game, Player, PlayerLookup, to_utc_naive
from domain.ratings.elo.calculator import (
    DEFAULT_K_FACTOR,
    DEFAULT_SCALE_FACTOR,
    apply_rating_changes,
    rating_changes_for_game,
)
from domain.ratings.protocol import DeltaPolicy


@dataclass(frozen=True)
class ReplayResult:
    """Players after replay plus the games carrying the deltas actually applied."""

    players: dict[str, Player]
    games: tuple[Game, ...]


def reset_player(player: Player, starting_rating: int = STARTING_RATING) -> Player:
    return replace(
        player,
        current_rating=starting_rating,
        peak_rating=starting_rating,
        games_played=0,
        wins=0,
        rating_history=(),
    )


def reset_players(
    players: PlayerLookup,
    *,
    starting_rating: int = STARTING_RATING,
    starting_ratings: Mapping[str, int] | None = None,
) -> dict[str, Player]:
    overrides = starting_ratings or {}
    return {
        player_id: reset_player(player, overrides.get(player_id, starting_rating))
        for player_id, player in players.items()
    }


def sort_games(games: Iterable[Game]) -> list[Game]:
    """Order games by UTC date; ties keep their input order."""
    return sorted(games, key=lambda game: to_utc_naive(game.date))


def accumulated_starting_rating(
    player: Player,
    window_start: datetime,
    window_end: datetime,
    *,
    starting_rating: int = STARTING_RATING,
) -> int:
    """Rating a player carried into ``[window_start, window_end)``.

    Uses the last history entry before the window. A player whose first game
    falls inside the window is back-computed from that entry; anyone else
    starts at the baseline.
    """
    history = sorted(player.rating_history, key=lambda entry: to_utc_naive(entry.date))

    before = [entry for entry in history if to_utc_naive(entry.date) < window_start]
    if before:
        return before[-1].rating

    for entry in history:
        if window_start <= to_utc_naive(entry.date) < window_end:
            return entry.rating - entry.change
    return starting_rating


def replay_history(
    players: PlayerLookup,
    games: Iterable[Game],
    *,
    k_factor: float = DEFAULT_K_FACTOR,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
    delta_policy: DeltaPolicy = DeltaPolicy.RECOMPUTE,
    starting_rating: int = STARTING_RATING,
    starting_ratings: Mapping[str, int] | None = None,
    echo: Callable[[str], None] | None = None,
) -> ReplayResult:
    """Reset every player in ``players`` and replay ``games`` in date order."""
    current = reset_players(
        players,
        starting_rating=starting_rating,
        starting_ratings=starting_ratings,
    )
    ordered = sort_games(games)

    replayed: list[Game] = []
    for game in ordered:
        if delta_policy is DeltaPolicy.TRUST_STORED and game.rating_changes:
            changes = dict(game.rating_changes)
        else:
            changes = rating_changes_for_game(
                game.placements,
                current,
                k_factor,
                scale_factor=scale_factor,
            )
        applied = replace(game, rating_changes=changes)
        current = apply_rating_changes(current, applied)
        replayed.append(applied)

    if echo is not None:
        echo(
            f"replayed_games={len(replayed)} "
            f"tracked_players={len(current)} "
            f"k_factor={k_factor} "
            f"delta_policy={delta_policy.value}"
        )
    return ReplayResult(players=current, games=tuple(replayed))


def replay_games(
    players: PlayerLookup,
    games: Iterable[Game],
    k_factor: float = DEFAULT_K_FACTOR,
    *,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
    delta_policy: DeltaPolicy = DeltaPolicy.RECOMPUTE,
    starting_rating: int = STARTING_RATING,
    starting_ratings: Mapping[str, int] | None = None,
) -> dict[str, Player]:
    """Replay and return only the resulting player lookup."""
    return replay_history(
        players,
        games,
        k_factor=k_factor,
        scale_factor=scale_factor,
        delta_policy=delta_policy,
        starting_rating=starting_rating,
        starting_ratings=starting_ratings,
    ).players


__all__ = [
    "ReplayResult",
    "accumulated_starting_rating",
    "replay_games",
    "replay_history",
    "reset_player",
    "reset_players",
    "sort_games",
]
