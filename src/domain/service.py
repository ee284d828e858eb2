"""Ranking service: validation and persistence around the rating engine."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from domain.errors import (
    DuplicatePlacementError,
    DuplicatePlayerNameError,
    GameNotFoundError,
    NotEnoughPlayersError,
    PlayerNotFoundError,
)
from domain.ratings.common import Game, Player, RosterSnapshot, to_utc_naive, utc_now
from domain.ratings.elo.calculator import apply_rating_changes, rating_changes_for_game
from domain.ratings.elo.config import ViewConfig, default_view_configs
from domain.ratings.elo.replay import replay_history, sort_games
from domain.ratings.protocol import RankingView, SnapshotStore
from domain.ratings.rankings import (
    MonthlyRankings,
    PlayerStats,
    RankingEntry,
    all_time_rankings,
    monthly_rankings,
    player_stats,
)

DEFAULT_SCOPE = "default"
MIN_PLAYERS_PER_GAME = 2

Echo = Callable[[str], None]


class RankingService:
    """Loads one scope's snapshot, runs the engine, and saves the result."""

    def __init__(
        self,
        store: SnapshotStore,
        *,
        scope: str = DEFAULT_SCOPE,
        views: Mapping[RankingView, ViewConfig] | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.scope = scope
        self.views = dict(views) if views is not None else default_view_configs()
        self.id_factory = id_factory or (lambda: str(uuid4()))
        self.clock = clock or utc_now

    @property
    def all_time(self) -> ViewConfig:
        return self.views[RankingView.ALL_TIME]

    def _load(self) -> RosterSnapshot:
        return self.store.load(self.scope)

    def _save(self, players: Mapping[str, Player], games: Iterable[Game]) -> None:
        self.store.save(self.scope, RosterSnapshot(players=dict(players), games=tuple(games)))

    # Roster

    def list_players(self) -> list[Player]:
        return sorted(self._load().players.values(), key=lambda player: player.name.lower())

    def get_player(self, player_id: str) -> Player:
        player = self._load().players.get(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    def add_player(self, name: str) -> Player:
        snapshot = self._load()
        clean_name = _clean_name(name)
        _ensure_unique_name(snapshot.players.values(), clean_name)

        starting_rating = self.all_time.parameters.elo.starting_rating
        player = Player(
            id=self.id_factory(),
            name=clean_name,
            current_rating=starting_rating,
            peak_rating=starting_rating,
            created_at=self.clock(),
        )
        players = dict(snapshot.players)
        players[player.id] = player
        self._save(players, snapshot.games)
        return player

    def rename_player(self, player_id: str, name: str) -> Player:
        snapshot = self._load()
        player = snapshot.players.get(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)

        clean_name = _clean_name(name)
        others = (other for other in snapshot.players.values() if other.id != player_id)
        _ensure_unique_name(others, clean_name)

        renamed = replace(player, name=clean_name)
        players = dict(snapshot.players)
        players[player_id] = renamed
        self._save(players, snapshot.games)
        return renamed

    # Games

    def list_games(self) -> list[Game]:
        """All games, newest first."""
        games = sort_games(self._load().games)
        games.reverse()
        return games

    def get_game(self, game_id: str) -> Game:
        for game in self._load().games:
            if game.id == game_id:
                return game
        raise GameNotFoundError(game_id)

    def record_game(
        self,
        placements: Sequence[str],
        *,
        expansions: Sequence[str] | None = None,
        generations: int | None = None,
        date: datetime | None = None,
        echo: Echo | None = None,
    ) -> tuple[Game, dict[str, Player]]:
        """Validate and record one finished game; returns the game and the updated roster."""
        snapshot = self._load()
        ordered = tuple(placements)
        _validate_placements(ordered, snapshot.players)

        parameters = self.all_time.parameters
        game_date = to_utc_naive(date) if date is not None else self.clock()
        game = Game(
            id=self.id_factory(),
            date=game_date,
            placements=ordered,
            rating_changes=rating_changes_for_game(
                ordered,
                snapshot.players,
                parameters.elo.k_factor,
                scale_factor=parameters.elo.scale_factor,
            ),
            expansions=tuple(expansions) if expansions is not None else None,
            generations=generations,
        )

        latest = max((to_utc_naive(existing.date) for existing in snapshot.games), default=None)
        if latest is not None and game.date < latest:
            # Backdated: later games depend on the ratings this one changes.
            players, games = self._replay(snapshot.players, (*snapshot.games, game), echo=echo)
            recorded = next(replayed for replayed in games if replayed.id == game.id)
            self._save(players, games)
            return recorded, players

        players = apply_rating_changes(snapshot.players, game)
        self._save(players, (*snapshot.games, game))
        return game, players

    def update_game_metadata(
        self,
        game_id: str,
        *,
        expansions: Sequence[str] | None = None,
        generations: int | None = None,
    ) -> Game:
        snapshot = self._load()
        games = list(snapshot.games)
        for index, game in enumerate(games):
            if game.id == game_id:
                updated = replace(
                    game,
                    expansions=tuple(expansions) if expansions is not None else None,
                    generations=generations,
                )
                games[index] = updated
                self._save(snapshot.players, games)
                return updated
        raise GameNotFoundError(game_id)

    def delete_game(self, game_id: str, *, echo: Echo | None = None) -> dict[str, Player]:
        """Remove one game and rebuild every rating from the remaining history."""
        snapshot = self._load()
        remaining = [game for game in snapshot.games if game.id != game_id]
        if len(remaining) == len(snapshot.games):
            raise GameNotFoundError(game_id)

        players, games = self._replay(snapshot.players, remaining, echo=echo)
        self._save(players, games)
        return players

    def delete_last_game(self, *, echo: Echo | None = None) -> tuple[Game, dict[str, Player]]:
        snapshot = self._load()
        if not snapshot.games:
            raise GameNotFoundError()

        last_game = sort_games(snapshot.games)[-1]
        players = self.delete_game(last_game.id, echo=echo)
        return last_game, players

    def recalculate_all(self, *, echo: Echo | None = None) -> dict[str, Player]:
        """Replay the whole stored history and persist the result."""
        snapshot = self._load()
        players, games = self._replay(snapshot.players, snapshot.games, echo=echo)
        self._save(players, games)
        return players

    def _replay(
        self,
        players: Mapping[str, Player],
        games: Iterable[Game],
        *,
        echo: Echo | None,
    ) -> tuple[dict[str, Player], tuple[Game, ...]]:
        parameters = self.all_time.parameters
        result = replay_history(
            players,
            games,
            k_factor=parameters.elo.k_factor,
            scale_factor=parameters.elo.scale_factor,
            delta_policy=parameters.delta_policy,
            starting_rating=parameters.elo.starting_rating,
            echo=echo,
        )
        return result.players, result.games

    # Read-only views

    def rankings(
        self,
        *,
        active_only: bool = False,
        now: datetime | None = None,
    ) -> tuple[RankingEntry, ...]:
        parameters = self.all_time.parameters
        return all_time_rankings(
            self._load().players,
            active_only=active_only,
            now=now or self.clock(),
            active_window_days=parameters.active_window_days,
            low_confidence_threshold=parameters.low_confidence_threshold,
        )

    def monthly_rankings(
        self,
        year: int,
        month: int,
        view: RankingView = RankingView.MONTHLY_INDEPENDENT,
    ) -> MonthlyRankings:
        snapshot = self._load()
        return monthly_rankings(snapshot.players, snapshot.games, year, month, self.views[view])

    def player_stats(self, player_id: str) -> PlayerStats:
        snapshot = self._load()
        return player_stats(player_id, snapshot.players, snapshot.games)


def _clean_name(name: str) -> str:
    clean_name = name.strip()
    if not clean_name:
        raise ValueError("player name cannot be empty")
    return clean_name


def _ensure_unique_name(players: Iterable[Player], name: str) -> None:
    lowered = name.lower()
    if any(player.name.lower() == lowered for player in players):
        raise DuplicatePlayerNameError(name)


def _validate_placements(placements: Sequence[str], players: Mapping[str, Player]) -> None:
    if len(placements) < MIN_PLAYERS_PER_GAME:
        raise NotEnoughPlayersError(len(placements), MIN_PLAYERS_PER_GAME)

    duplicates = sorted(player_id for player_id, count in Counter(placements).items() if count > 1)
    if duplicates:
        raise DuplicatePlacementError(duplicates)

    for player_id in placements:
        if player_id not in players:
            raise PlayerNotFoundError(player_id)


__all__ = ["DEFAULT_SCOPE", "MIN_PLAYERS_PER_GAME", "RankingService"]
