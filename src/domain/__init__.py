"""Board-game ranking domain modules."""

from domain.errors import (
    DuplicatePlacementError,
    DuplicatePlayerNameError,
    GameNotFoundError,
    NotEnoughPlayersError,
    PlayerNotFoundError,
    RankingError,
)

__all__ = [
    "DuplicatePlacementError",
    "DuplicatePlayerNameError",
    "GameNotFoundError",
    "NotEnoughPlayersError",
    "PlayerNotFoundError",
    "RankingError",
]
