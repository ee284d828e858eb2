"""players table model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class PlayerRow(Base):
    """Current rating state of one roster member within a scope."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("games_played >= 0", name="ck_players_games_played"),
        CheckConstraint("wins >= 0 AND wins <= games_played", name="ck_players_wins"),
        Index("idx_players_scope_rating", "scope", "current_rating"),
    )

    scope: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    current_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    peak_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
