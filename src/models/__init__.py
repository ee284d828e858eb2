"""ORM models."""

from models.base import Base
from models.game import GameRow
from models.player import PlayerRow

__all__ = ["Base", "GameRow", "PlayerRow"]
