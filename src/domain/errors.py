"""Validation errors raised by the ranking service."""

from __future__ import annotations


class RankingError(Exception):
    """Base class for ranking-service failures."""


class PlayerNotFoundError(RankingError, LookupError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"player not found: {player_id}")
        self.player_id = player_id


class GameNotFoundError(RankingError, LookupError):
    def __init__(self, game_id: str | None = None) -> None:
        message = "no games recorded" if game_id is None else f"game not found: {game_id}"
        super().__init__(message)
        self.game_id = game_id


class NotEnoughPlayersError(RankingError, ValueError):
    def __init__(self, count: int, minimum: int = 2) -> None:
        super().__init__(f"a game needs at least {minimum} players, got {count}")
        self.count = count
        self.minimum = minimum


class DuplicatePlacementError(RankingError, ValueError):
    def __init__(self, player_ids: list[str]) -> None:
        super().__init__(f"players listed more than once: {', '.join(player_ids)}")
        self.player_ids = player_ids


class DuplicatePlayerNameError(RankingError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"a player named '{name}' already exists")
        self.name = name


__all__ = [
    "DuplicatePlacementError",
    "DuplicatePlayerNameError",
    "GameNotFoundError",
    "NotEnoughPlayersError",
    "PlayerNotFoundError",
    "RankingError",
]
