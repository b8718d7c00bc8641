"""Command line entry point for the avalon tracker."""

import json
from pathlib import Path
from typing import Optional

import typer

from avalon_tracker.application.services.game_loader import load_games_file
from avalon_tracker.application.services.game_record_store import GameRecordStore
from avalon_tracker.infrastructure.database.session import Database
from avalon_tracker.utils.exceptions import AppException
from avalon_tracker.utils.logger import logger

app = typer.Typer(help="Tracks Avalon games through a SQL database")


def _database_url_option():
    return typer.Option(
        None, "--database-url", envvar="DATABASE_URL", help="SQLAlchemy database URL"
    )


def _open_database(database_url: Optional[str]) -> Database:
    database = Database(database_url)
    database.create_schema()
    return database


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command("init-db")
def init_db(database_url: Optional[str] = _database_url_option()) -> None:
    """Create the tables if they do not exist yet."""
    with _open_database(database_url):
        typer.echo("Database ready")


@app.command("import")
def import_games(
    file: Path = typer.Argument(..., help="YAML file with a list of games"),
    database_url: Optional[str] = _database_url_option(),
) -> None:
    """Record every game in FILE; each game is written atomically."""
    try:
        games = load_games_file(file)
    except (FileNotFoundError, ValueError, AppException) as e:
        _fail(f"Cannot read {file}: {e}")

    with _open_database(database_url) as database:
        store = GameRecordStore(database)
        for game in games:
            try:
                game_id = store.record_game(game)
            except AppException as e:
                logger.error(f"Import stopped: {e}")
                _fail(f"Import failed: {e}")
            typer.echo(game_id)


@app.command("load")
def load_game(
    game_id: str = typer.Argument(..., help="Game identifier"),
    database_url: Optional[str] = _database_url_option(),
) -> None:
    """Print a recorded game as JSON."""
    with _open_database(database_url) as database:
        try:
            game = GameRecordStore(database).load_game(game_id)
        except AppException as e:
            _fail(str(e))
        typer.echo(json.dumps(game.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))


@app.command("games")
def list_games(database_url: Optional[str] = _database_url_option()) -> None:
    """List recorded game ids."""
    with _open_database(database_url) as database:
        ids = GameRecordStore(database).list_game_ids()
    if not ids:
        typer.echo("No games recorded")
        raise typer.Exit(code=0)
    for game_id in ids:
        typer.echo(game_id)


def main() -> None:  # pragma: no cover - CLI entry
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
