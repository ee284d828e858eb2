"""Load ranking-view definitions from TOML files."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.elo.calculator import (
    DEFAULT_K_FACTOR,
    DEFAULT_LOW_CONFIDENCE_THRESHOLD,
    MONTHLY_K_FACTOR,
    MONTHLY_LOW_CONFIDENCE_THRESHOLD,
    EloParameters,
)
from domain.ratings.protocol import DeltaPolicy, RankingView, StartPolicy

ROOT_DIR = Path(__file__).resolve().parents[4]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "views"
DEFAULT_ACTIVE_WINDOW_DAYS = 45


@dataclass(frozen=True)
class ViewParameters:
    elo: EloParameters
    low_confidence_threshold: int = DEFAULT_LOW_CONFIDENCE_THRESHOLD
    delta_policy: DeltaPolicy = DeltaPolicy.RECOMPUTE
    start_policy: StartPolicy = StartPolicy.BASELINE
    active_window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS


@dataclass(frozen=True)
class ViewConfig:
    """Configuration for one ranking view; file_path is None for built-ins."""

    name: str
    description: str | None
    file_path: Path | None
    view: RankingView
    parameters: ViewParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "view": self.view.value,
            "starting_rating": self.parameters.elo.starting_rating,
            "k_factor": self.parameters.elo.k_factor,
            "scale_factor": self.parameters.elo.scale_factor,
            "low_confidence_threshold": self.parameters.low_confidence_threshold,
            "delta_policy": self.parameters.delta_policy.value,
            "start_policy": self.parameters.start_policy.value,
            "active_window_days": self.parameters.active_window_days,
        }


_VIEW_DEFAULTS: dict[RankingView, ViewParameters] = {
    RankingView.ALL_TIME: ViewParameters(
        elo=EloParameters(k_factor=DEFAULT_K_FACTOR),
        low_confidence_threshold=DEFAULT_LOW_CONFIDENCE_THRESHOLD,
        delta_policy=DeltaPolicy.RECOMPUTE,
        start_policy=StartPolicy.BASELINE,
    ),
    RankingView.MONTHLY_ACCUMULATED: ViewParameters(
        elo=EloParameters(k_factor=DEFAULT_K_FACTOR),
        low_confidence_threshold=DEFAULT_LOW_CONFIDENCE_THRESHOLD,
        delta_policy=DeltaPolicy.TRUST_STORED,
        start_policy=StartPolicy.ACCUMULATED,
    ),
    RankingView.MONTHLY_INDEPENDENT: ViewParameters(
        elo=EloParameters(k_factor=MONTHLY_K_FACTOR),
        low_confidence_threshold=MONTHLY_LOW_CONFIDENCE_THRESHOLD,
        delta_policy=DeltaPolicy.RECOMPUTE,
        start_policy=StartPolicy.BASELINE,
    ),
}


def default_view_configs() -> dict[RankingView, ViewConfig]:
    """Built-in view definitions, used when no config directory is supplied."""
    return {
        view: ViewConfig(
            name=view.value,
            description=None,
            file_path=None,
            view=view,
            parameters=parameters,
        )
        for view, parameters in _VIEW_DEFAULTS.items()
    }


def load_view_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[ViewConfig]:
    """Load and validate all ranking-view TOML config files in a directory."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs: list[ViewConfig] = []
    for file_path in config_files:
        with file_path.open("rb") as file:
            configs.append(_parse_view_config(tomllib.load(file), file_path))

    names = [config.name for config in configs]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate ranking view names found in {config_dir}: {names}")
    return configs


def index_view_configs(configs: Iterable[ViewConfig]) -> dict[RankingView, ViewConfig]:
    """Key configs by view, falling back to built-ins for views with no file."""
    indexed = default_view_configs()
    seen: set[RankingView] = set()
    for config in configs:
        if config.view in seen:
            raise ValueError(f"{config.file_path}: view '{config.view.value}' is configured twice")
        seen.add(config.view)
        indexed[config.view] = config
    return indexed


def _parse_view_config(raw: dict[str, Any], file_path: Path) -> ViewConfig:
    view_raw = raw.get("view", {})
    elo_raw = raw.get("elo", {})

    name = str(view_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [view].name is required")

    kind_value = str(view_raw.get("kind", name)).strip()
    try:
        view = RankingView(kind_value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in RankingView)
        raise ValueError(f"{file_path}: [view].kind must be one of: {allowed}") from exc

    description_value = view_raw.get("description")
    description = None if description_value is None else str(description_value)

    defaults = _VIEW_DEFAULTS[view]
    parameters = ViewParameters(
        elo=EloParameters(
            starting_rating=int(elo_raw.get("starting_rating", defaults.elo.starting_rating)),
            k_factor=float(elo_raw.get("k_factor", defaults.elo.k_factor)),
            scale_factor=float(elo_raw.get("scale_factor", defaults.elo.scale_factor)),
        ),
        low_confidence_threshold=int(
            elo_raw.get("low_confidence_threshold", defaults.low_confidence_threshold)
        ),
        delta_policy=_parse_enum(
            DeltaPolicy,
            elo_raw.get("delta_policy", defaults.delta_policy.value),
            file_path=file_path,
            key="delta_policy",
        ),
        start_policy=_parse_enum(
            StartPolicy,
            elo_raw.get("start_policy", defaults.start_policy.value),
            file_path=file_path,
            key="start_policy",
        ),
        active_window_days=int(elo_raw.get("active_window_days", defaults.active_window_days)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return ViewConfig(
        name=name,
        description=description,
        file_path=file_path,
        view=view,
        parameters=parameters,
    )


def _parse_enum(enum_type: Any, value: Any, *, file_path: Path, key: str) -> Any:
    try:
        return enum_type(str(value).strip())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_type)
        raise ValueError(f"{file_path}: [elo].{key} must be one of: {allowed}") from exc


def _validate_parameters(*, file_path: Path, parameters: ViewParameters) -> None:
    if parameters.elo.starting_rating <= 0:
        raise ValueError(f"{file_path}: [elo].starting_rating must be > 0")
    if parameters.elo.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.elo.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.low_confidence_threshold < 0:
        raise ValueError(f"{file_path}: [elo].low_confidence_threshold must be >= 0")
    if parameters.active_window_days < 0:
        raise ValueError(f"{file_path}: [elo].active_window_days must be >= 0")


__all__ = [
    "DEFAULT_ACTIVE_WINDOW_DAYS",
    "DEFAULT_CONFIG_DIR",
    "ViewConfig",
    "ViewParameters",
    "default_view_configs",
    "index_view_configs",
    "load_view_configs",
]
