"""SQLAlchemy persistence for roster snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from domain.ratings.common import Game, Player, RatingHistoryEntry, RosterSnapshot
from models import Base, GameRow, PlayerRow


def ensure_snapshot_schema(engine: Engine) -> None:
    """Create the players and games tables if they do not exist."""
    Base.metadata.create_all(bind=engine, tables=[PlayerRow.__table__, GameRow.__table__])


def _history_to_json(entry: RatingHistoryEntry) -> dict[str, Any]:
    return {
        "game_id": entry.game_id,
        "rating": entry.rating,
        "change": entry.change,
        "date": entry.date.isoformat(),
    }


def _history_from_json(payload: dict[str, Any]) -> RatingHistoryEntry:
    return RatingHistoryEntry(
        game_id=str(payload["game_id"]),
        rating=int(payload["rating"]),
        change=int(payload["change"]),
        date=datetime.fromisoformat(payload["date"]),
    )


def _player_to_row(scope: str, player: Player) -> dict[str, Any]:
    return {
        "scope": scope,
        "id": player.id,
        "name": player.name,
        "current_rating": player.current_rating,
        "peak_rating": player.peak_rating,
        "games_played": player.games_played,
        "wins": player.wins,
        "rating_history": [_history_to_json(entry) for entry in player.rating_history],
        "created_at": player.created_at,
    }


def _player_from_row(row: PlayerRow) -> Player:
    return Player(
        id=row.id,
        name=row.name,
        current_rating=row.current_rating,
        peak_rating=row.peak_rating,
        games_played=row.games_played,
        wins=row.wins,
        rating_history=tuple(_history_from_json(entry) for entry in row.rating_history),
        created_at=row.created_at,
    )


def _game_to_row(scope: str, sequence: int, game: Game) -> dict[str, Any]:
    return {
        "scope": scope,
        "id": game.id,
        "sequence": sequence,
        "date": game.date,
        "placements": list(game.placements),
        "rating_changes": dict(game.rating_changes),
        "expansions": list(game.expansions) if game.expansions is not None else None,
        "generations": game.generations,
    }


def _game_from_row(row: GameRow) -> Game:
    return Game(
        id=row.id,
        date=row.date,
        placements=tuple(row.placements),
        rating_changes={str(key): int(value) for key, value in row.rating_changes.items()},
        expansions=tuple(row.expansions) if row.expansions is not None else None,
        generations=row.generations,
    )


class SqlAlchemySnapshotStore:
    """Snapshot store backed by the players/games tables."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def load(self, scope: str) -> RosterSnapshot:
        with self.session_factory() as session:
            player_rows = session.execute(
                select(PlayerRow).where(PlayerRow.scope == scope).order_by(PlayerRow.id)
            ).scalars()
            players = {row.id: _player_from_row(row) for row in player_rows}

            game_rows = session.execute(
                select(GameRow).where(GameRow.scope == scope).order_by(GameRow.sequence)
            ).scalars()
            games = tuple(_game_from_row(row) for row in game_rows)

        return RosterSnapshot(players=players, games=games)

    def save(self, scope: str, snapshot: RosterSnapshot) -> None:
        """Replace everything stored for ``scope`` in one transaction."""
        player_rows = [_player_to_row(scope, player) for player in snapshot.players.values()]
        game_rows = [
            _game_to_row(scope, sequence, game)
            for sequence, game in enumerate(snapshot.games)
        ]

        with self.session_factory() as session:
            try:
                session.execute(delete(GameRow).where(GameRow.scope == scope))
                session.execute(delete(PlayerRow).where(PlayerRow.scope == scope))
                if player_rows:
                    session.execute(insert(PlayerRow), player_rows)
                if game_rows:
                    session.execute(insert(GameRow), game_rows)
                session.commit()
            except Exception:
                session.rollback()
                raise

    def scopes(self) -> list[str]:
        with self.session_factory() as session:
            player_scopes = session.execute(select(PlayerRow.scope).distinct()).scalars().all()
            game_scopes = session.execute(select(GameRow.scope).distinct()).scalars().all()
        return sorted(set(player_scopes) | set(game_scopes))


__all__ = ["SqlAlchemySnapshotStore", "ensure_snapshot_schema"]
