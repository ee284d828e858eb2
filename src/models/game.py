"""games table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class GameRow(Base):
    """One recorded game within a scope; sequence preserves insertion order for equal dates."""

    __tablename__ = "games"
    __table_args__ = (Index("idx_games_scope_date", "scope", "date", "sequence"),)

    scope: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    placements: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    rating_changes: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False)
    expansions: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    generations: Mapped[int | None] = mapped_column(Integer, nullable=True)
