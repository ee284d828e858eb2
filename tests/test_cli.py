"""Tests for the rankings command-line app."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
from typer.testing import CliRunner

from db import create_db_engine, create_session_factory
from domain.service import RankingService
from repositories import SqlAlchemySnapshotStore, ensure_snapshot_schema

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "rankings.py"

runner = CliRunner()


def _load_cli():
    module_spec = importlib.util.spec_from_file_location("rankings_cli", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


cli = _load_cli()


def _service(db_url: str) -> RankingService:
    engine = create_db_engine(db_url)
    ensure_snapshot_schema(engine)
    ids = iter(["a", "b", "c"])
    return RankingService(
        SqlAlchemySnapshotStore(create_session_factory(engine)),
        id_factory=lambda: next(ids),
    )


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    url = f"sqlite:///{tmp_path / 'rankings.db'}"
    service = _service(url)
    for name in ("Alice", "Bob", "Carol"):
        service.add_player(name)
    return url


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "views"
    directory.mkdir()
    (directory / "all_time.toml").write_text('[view]\nname = "all_time"\n\n[elo]\nk_factor = 10.0\n')
    return directory


def _ratings(db_url: str) -> dict[str, int]:
    return {player.id: player.current_rating for player in _service(db_url).list_players()}


def test_record_game_uses_config_dir(db_url: str, config_dir: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["record-game", "a", "b", "c", "--db-url", db_url, "--config-dir", str(config_dir)],
    )

    assert result.exit_code == 0, result.output
    assert _ratings(db_url) == {"a": 1510, "b": 1500, "c": 1490}


def test_rebuild_agrees_with_recorded_ratings(db_url: str, config_dir: Path) -> None:
    for placements in (["a", "b", "c"], ["c", "a", "b"]):
        result = runner.invoke(
            cli.app,
            ["record-game", *placements, "--db-url", db_url, "--config-dir", str(config_dir)],
        )
        assert result.exit_code == 0, result.output
    recorded = _ratings(db_url)

    result = runner.invoke(cli.app, ["rebuild", "--db-url", db_url, "--config-dir", str(config_dir)])

    assert result.exit_code == 0, result.output
    assert "replayed_games=2" in result.output
    assert _ratings(db_url) == recorded


def test_record_game_defaults_to_shipped_configs(db_url: str) -> None:
    result = runner.invoke(cli.app, ["record-game", "a", "b", "c", "--db-url", db_url])

    assert result.exit_code == 0, result.output
    assert _ratings(db_url) == {"a": 1540, "b": 1500, "c": 1460}


def test_missing_config_dir_is_rejected(db_url: str, tmp_path: Path) -> None:
    missing = str(tmp_path / "missing")

    show = runner.invoke(cli.app, ["show", "--db-url", db_url, "--config-dir", missing])
    record = runner.invoke(
        cli.app,
        ["record-game", "a", "b", "c", "--db-url", db_url, "--config-dir", missing],
    )

    assert show.exit_code == 2
    assert record.exit_code == 2
    assert _service(db_url).list_games() == []


def test_record_game_reports_validation_errors(db_url: str) -> None:
    result = runner.invoke(cli.app, ["record-game", "a", "a", "b", "--db-url", db_url])
    assert result.exit_code == 1
    assert _service(db_url).list_games() == []


def test_list_views_reads_config_dir(config_dir: Path) -> None:
    result = runner.invoke(cli.app, ["list-views", "--config-dir", str(config_dir)])

    assert result.exit_code == 0, result.output
    assert "'k_factor': 10.0" in result.output
    assert "built-in" in result.output
