"""Ranking views and per-player statistics derived from the roster and history."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from domain.errors import PlayerNotFoundError
from domain.ratings.common import STARTING_RATING, Game, Player, PlayerLookup, to_utc_naive, utc_now
from domain.ratings.elo.calculator import DEFAULT_LOW_CONFIDENCE_THRESHOLD, has_low_confidence
from domain.ratings.elo.config import DEFAULT_ACTIVE_WINDOW_DAYS, ViewConfig, default_view_configs
from domain.ratings.elo.replay import accumulated_starting_rating, replay_history, sort_games
from domain.ratings.protocol import RankingView, StartPolicy
from domain.ratings.windows import games_in_window, month_bounds, window_participants

UNKNOWN_PLAYER_NAME = "Unknown"
RECENT_GAMES_LIMIT = 10


@dataclass(frozen=True)
class RankingEntry:
    rank: int
    player: Player
    low_confidence: bool


@dataclass(frozen=True)
class MonthlyRankings:
    year: int
    month: int
    view: RankingView
    games_count: int
    rankings: tuple[RankingEntry, ...]


@dataclass(frozen=True)
class HeadToHeadRecord:
    opponent_id: str
    opponent_name: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0


@dataclass(frozen=True)
class PlayerStats:
    player: Player
    win_rate: float
    average_placement: float
    last_game_date: datetime | None
    recent_games: tuple[Game, ...]
    head_to_head: tuple[HeadToHeadRecord, ...]


def rank_players(
    players: Iterable[Player],
    *,
    low_confidence_threshold: int = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
) -> tuple[RankingEntry, ...]:
    """Sort by rating, highest first; equal ratings fall back to name order."""
    ordered = sorted(players, key=lambda player: (-player.current_rating, player.name.lower()))
    return tuple(
        RankingEntry(
            rank=index,
            player=player,
            low_confidence=has_low_confidence(player, low_confidence_threshold),
        )
        for index, player in enumerate(ordered, start=1)
    )


def is_active(
    player: Player,
    *,
    now: datetime,
    active_window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
) -> bool:
    last_played_at = player.last_played_at
    if last_played_at is None:
        return False
    return to_utc_naive(now) - to_utc_naive(last_played_at) <= timedelta(days=active_window_days)


def all_time_rankings(
    players: PlayerLookup,
    *,
    active_only: bool = False,
    now: datetime | None = None,
    active_window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
    low_confidence_threshold: int = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
) -> tuple[RankingEntry, ...]:
    """Rank every player with at least one game; optionally only recently active ones."""
    candidates = [player for player in players.values() if player.games_played > 0]
    if active_only and active_window_days > 0:
        reference = now or utc_now()
        candidates = [
            player
            for player in candidates
            if is_active(player, now=reference, active_window_days=active_window_days)
        ]
    return rank_players(candidates, low_confidence_threshold=low_confidence_threshold)


def monthly_rankings(
    players: PlayerLookup,
    games: Sequence[Game],
    year: int,
    month: int,
    config: ViewConfig,
) -> MonthlyRankings:
    """Replay one UTC calendar month under ``config`` without touching the inputs."""
    if config.view is RankingView.ALL_TIME:
        raise ValueError("monthly rankings need a monthly view, got 'all_time'")

    start, end = month_bounds(year, month)
    monthly_games = sort_games(games_in_window(games, start, end))
    if not monthly_games:
        return MonthlyRankings(year=year, month=month, view=config.view, games_count=0, rankings=())

    parameters = config.parameters
    participants = window_participants(monthly_games)
    roster = {
        player_id: player for player_id, player in players.items() if player_id in participants
    }

    starting_ratings: dict[str, int] | None = None
    if parameters.start_policy is StartPolicy.ACCUMULATED:
        starting_ratings = {
            player_id: accumulated_starting_rating(
                player,
                start,
                end,
                starting_rating=parameters.elo.starting_rating,
            )
            for player_id, player in roster.items()
        }

    result = replay_history(
        roster,
        monthly_games,
        k_factor=parameters.elo.k_factor,
        scale_factor=parameters.elo.scale_factor,
        delta_policy=parameters.delta_policy,
        starting_rating=parameters.elo.starting_rating,
        starting_ratings=starting_ratings,
    )
    return MonthlyRankings(
        year=year,
        month=month,
        view=config.view,
        games_count=len(monthly_games),
        rankings=rank_players(
            result.players.values(),
            low_confidence_threshold=parameters.low_confidence_threshold,
        ),
    )


def monthly_independent_rankings(
    players: PlayerLookup,
    games: Sequence[Game],
    year: int,
    month: int,
    config: ViewConfig | None = None,
) -> MonthlyRankings:
    """Everyone starts the month at the baseline; only that month's games count."""
    view_config = config or default_view_configs()[RankingView.MONTHLY_INDEPENDENT]
    return monthly_rankings(players, games, year, month, view_config)


def monthly_accumulated_rankings(
    players: PlayerLookup,
    games: Sequence[Game],
    year: int,
    month: int,
    config: ViewConfig | None = None,
) -> MonthlyRankings:
    """Players enter the month with the rating they had accumulated before it."""
    view_config = config or default_view_configs()[RankingView.MONTHLY_ACCUMULATED]
    return monthly_rankings(players, games, year, month, view_config)


def player_stats(
    player_id: str,
    players: PlayerLookup,
    games: Iterable[Game],
    *,
    recent_limit: int = RECENT_GAMES_LIMIT,
) -> PlayerStats:
    player = players.get(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)

    player_games = [game for game in sort_games(games) if player_id in game.placements]
    player_games.reverse()

    total_placement = sum(game.placements.index(player_id) + 1 for game in player_games)
    average_placement = total_placement / len(player_games) if player_games else 0.0
    win_rate = (player.wins / player.games_played) * 100 if player.games_played > 0 else 0.0

    records: dict[str, dict[str, int]] = {}
    for game in player_games:
        player_index = game.placements.index(player_id)
        for opponent_index, opponent_id in enumerate(game.placements):
            if opponent_id == player_id:
                continue
            record = records.setdefault(
                opponent_id,
                {"wins": 0, "losses": 0, "ties": 0, "games_played": 0},
            )
            if player_index < opponent_index:
                record["wins"] += 1
            elif player_index > opponent_index:
                record["losses"] += 1
            else:
                record["ties"] += 1
            record["games_played"] += 1

    head_to_head = tuple(
        HeadToHeadRecord(
            opponent_id=opponent_id,
            opponent_name=_player_name(players, opponent_id),
            **record,
        )
        for opponent_id, record in records.items()
    )

    return PlayerStats(
        player=player,
        win_rate=win_rate,
        average_placement=average_placement,
        last_game_date=player_games[0].date if player_games else None,
        recent_games=tuple(player_games[:recent_limit]),
        head_to_head=head_to_head,
    )


def recompute_peak_rating(player: Player, starting_rating: int = STARTING_RATING) -> int:
    """Highest rating visible in a player's record, never below the starting rating."""
    ratings = [player.current_rating, starting_rating]
    ratings.extend(entry.rating for entry in player.rating_history)
    return max(ratings)


def _player_name(players: PlayerLookup, player_id: str) -> str:
    player = players.get(player_id)
    return player.name if player is not None else UNKNOWN_PLAYER_NAME


__all__ = [
    "HeadToHeadRecord",
    "MonthlyRankings",
    "PlayerStats",
    "RankingEntry",
    "all_time_rankings",
    "is_active",
    "monthly_accumulated_rankings",
    "monthly_independent_rankings",
    "monthly_rankings",
    "player_stats",
    "rank_players",
    "recompute_peak_rating",
]
