#!/usr/bin/env python3
"""Command-line front end for recording games and reading rankings."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.errors import RankingError
from domain.ratings.common import Player
from domain.ratings.elo.config import (
    DEFAULT_CONFIG_DIR,
    ViewConfig,
    default_view_configs,
    index_view_configs,
    load_view_configs,
)
from domain.ratings.protocol import RankingView
from domain.ratings.rankings import RankingEntry
from domain.service import DEFAULT_SCOPE, RankingService
from repositories import SqlAlchemySnapshotStore, ensure_snapshot_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Board-game Elo ranking commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
]
ScopeOption = Annotated[
    str,
    typer.Option("--scope", help="League/scope key the roster is stored under."),
]
ConfigDirOption = Annotated[
    Path | None,
    typer.Option(
        "--config-dir",
        help="Directory of ranking-view TOML files. Defaults to configs/views when present.",
    ),
]


def load_views(config_dir: Path | None) -> dict[RankingView, ViewConfig] | None:
    """Load view configs; without --config-dir, a missing default directory means built-ins."""
    if config_dir is None:
        if not DEFAULT_CONFIG_DIR.is_dir():
            return None
        config_dir = DEFAULT_CONFIG_DIR
    try:
        return index_view_configs(load_view_configs(config_dir))
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-dir") from exc


def build_service(db_url: str, scope: str, config_dir: Path | None = None) -> RankingService:
    """Wire a ranking service to a SQLAlchemy-backed store."""
    views = load_views(config_dir)
    engine = create_db_engine(db_url)
    ensure_snapshot_schema(engine)
    store = SqlAlchemySnapshotStore(create_session_factory(engine))
    return RankingService(store, scope=scope, views=views)


def _echo_player(player: Player) -> None:
    typer.echo(
        f"id={player.id} name={player.name} rating={player.current_rating} "
        f"peak={player.peak_rating} games={player.games_played} wins={player.wins}"
    )


def _echo_rankings(entries: tuple[RankingEntry, ...]) -> None:
    if not entries:
        typer.echo("no ranked players")
        return
    for entry in entries:
        marker = " (?)" if entry.low_confidence else ""
        typer.echo(
            f"{entry.rank:>3}. {entry.player.name:<20} {entry.player.current_rating:>5}{marker} "
            f"games={entry.player.games_played} wins={entry.player.wins}"
        )


def _fail(exc: RankingError) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1) from exc


@app.command()
def add_player(
    name: Annotated[str, typer.Argument(help="Display name (unique, case-insensitive).")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Register a new player at the starting rating."""
    try:
        player = build_service(db_url, scope, config_dir).add_player(name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAME") from exc
    _echo_player(player)


@app.command()
def record_game(
    placements: Annotated[
        list[str],
        typer.Argument(help="Player ids in finishing order, winner first."),
    ],
    date: Annotated[
        datetime | None,
        typer.Option(
            "--date",
            formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"],
            help="UTC date the game was played. Defaults to now.",
        ),
    ] = None,
    expansions: Annotated[
        list[str] | None,
        typer.Option("--expansion", help="Expansion used; repeat for several."),
    ] = None,
    generations: Annotated[
        int | None,
        typer.Option("--generations", help="Number of generations played."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Record a finished game and update ratings."""
    service = build_service(db_url, scope, config_dir)
    try:
        game, players = service.record_game(
            placements,
            expansions=expansions,
            generations=generations,
            date=date,
            echo=typer.echo,
        )
    except RankingError as exc:
        _fail(exc)
        return

    typer.echo(f"recorded game_id={game.id} date={game.date.isoformat()}")
    for player_id in game.placements:
        change = game.rating_changes.get(player_id, 0)
        player = players[player_id]
        typer.echo(f"  {player.name:<20} {change:+d} -> {player.current_rating}")


@app.command()
def delete_game(
    game_id: Annotated[str, typer.Argument(help="Id of the game to delete.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Delete one game and recalculate every rating."""
    try:
        build_service(db_url, scope, config_dir).delete_game(game_id, echo=typer.echo)
    except RankingError as exc:
        _fail(exc)
        return
    typer.echo(f"deleted game_id={game_id}")


@app.command()
def delete_last_game(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Delete the most recent game and recalculate every rating."""
    try:
        game, _ = build_service(db_url, scope, config_dir).delete_last_game(echo=typer.echo)
    except RankingError as exc:
        _fail(exc)
        return
    typer.echo(f"deleted game_id={game.id} date={game.date.isoformat()}")


@app.command()
def rebuild(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Replay the full history and store the recalculated ratings."""
    players = build_service(db_url, scope, config_dir).recalculate_all(echo=typer.echo)
    typer.echo(f"completed scope={scope} tracked_players={len(players)}")


@app.command()
def show(
    active_only: Annotated[
        bool,
        typer.Option("--active-only", help="Only players seen within the active window."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Print the all-time rankings."""
    _echo_rankings(build_service(db_url, scope, config_dir).rankings(active_only=active_only))


@app.command()
def monthly(
    year: Annotated[int, typer.Argument(help="Calendar year.")],
    month: Annotated[int, typer.Argument(min=1, max=12, help="Calendar month (1-12).")],
    view: Annotated[
        RankingView,
        typer.Option("--view", help="monthly_independent or monthly_accumulated."),
    ] = RankingView.MONTHLY_INDEPENDENT,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Print rankings for one UTC calendar month."""
    if view is RankingView.ALL_TIME:
        raise typer.BadParameter("use `show` for all-time rankings", param_hint="--view")

    result = build_service(db_url, scope, config_dir).monthly_rankings(year, month, view)
    typer.echo(f"view={result.view.value} year={result.year} month={result.month} games={result.games_count}")
    _echo_rankings(result.rankings)


@app.command()
def stats(
    player_id: Annotated[str, typer.Argument(help="Player id.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    scope: ScopeOption = DEFAULT_SCOPE,
    config_dir: ConfigDirOption = None,
) -> None:
    """Print win rate, average placement and head-to-head records for one player."""
    try:
        result = build_service(db_url, scope, config_dir).player_stats(player_id)
    except RankingError as exc:
        _fail(exc)
        return

    _echo_player(result.player)
    last_game = result.last_game_date.isoformat() if result.last_game_date else "never"
    typer.echo(
        f"win_rate={result.win_rate:.1f}% average_placement={result.average_placement:.2f} "
        f"last_game={last_game}"
    )
    for record in result.head_to_head:
        typer.echo(
            f"  vs {record.opponent_name:<20} W{record.wins} L{record.losses} "
            f"T{record.ties} ({record.games_played} games)"
        )


@app.command()
def list_views(config_dir: ConfigDirOption = None) -> None:
    """Print the configured ranking views."""
    configs = load_views(config_dir) or default_view_configs()
    for view, config in configs.items():
        source = config.file_path if config.file_path is not None else "built-in"
        typer.echo(f"{view.value} name={config.name} source={source} {config.as_config_json()}")


if __name__ == "__main__":
    app()
