"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    DEFAULT_K_FACTOR,
    DEFAULT_LOW_CONFIDENCE_THRESHOLD,
    MONTHLY_K_FACTOR,
    MONTHLY_LOW_CONFIDENCE_THRESHOLD,
    EloParameters,
    apply_rating_changes,
    calculate_actual_score,
    calculate_expected_score,
    calculate_rating_changes,
    has_low_confidence,
    rating_changes_for_game,
    round_rating_change,
)
from domain.ratings.elo.config import ViewConfig, ViewParameters, load_view_configs
from domain.ratings.elo.replay import (
    ReplayResult,
    accumulated_starting_rating,
    replay_games,
    replay_history,
)

__all__ = [
    "DEFAULT_K_FACTOR",
    "DEFAULT_LOW_CONFIDENCE_THRESHOLD",
    "MONTHLY_K_FACTOR",
    "MONTHLY_LOW_CONFIDENCE_THRESHOLD",
    "EloParameters",
    "ReplayResult",
    "ViewConfig",
    "ViewParameters",
    "accumulated_starting_rating",
    "apply_rating_changes",
    "calculate_actual_score",
    "calculate_expected_score",
    "calculate_rating_changes",
    "has_low_confidence",
    "load_view_configs",
    "rating_changes_for_game",
    "replay_games",
    "replay_history",
    "round_rating_change",
]
