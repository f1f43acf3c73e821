import logging
from datetime import date, datetime, timedelta
from functools import partial
from typing import Optional

import typer
from rich.console import Console

from brack.bracket_city import FetchError, load_puzzle
from brack.calendar_view import Calendar
from brack.clues import MalformedDocumentError
from brack.db import LOG_FILE_NAME, Settings, get_config_dir, get_settings
from brack.game import open_game
from brack.store import PuzzleStore, StorageError
from brack.ui import MODE_CALENDAR, MODE_GAME, TerminalApp

VERSION = "0.0.3"

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Play Bracket City on the command line.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def parse_date_arg(value: str | None, today: date | None = None) -> date:
    """Parse the DATE argument.

    Accepts YYYY-MM-DD, or a negative number of days before today. No value
    means today.
    """
    today = today or date.today()
    if not value:
        return today

    try:
        offset = int(value)
    except ValueError:
        offset = None
    if offset is not None and offset < 0:
        return today + timedelta(days=offset)

    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(
            f"{value!r} is not a date (YYYY-MM-DD) or a negative day offset", param_hint="DATE"
        )


def configure_logging(settings: Settings) -> None:
    # Logs go to a file so they never draw over the game
    logging.basicConfig(
        filename=get_config_dir(settings) / LOG_FILE_NAME,
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"brack {VERSION}")
        raise typer.Exit()


@app.command(context_settings={"ignore_unknown_options": True})
def main(
    puzzle_date: Optional[str] = typer.Argument(
        None,
        metavar="[DATE]",
        help="Puzzle date as YYYY-MM-DD, or -N for N days ago. Defaults to today.",
        show_default=False,
    ),
    calendar: bool = typer.Option(False, "--calendar", "-c", help="Open the calendar view"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Play Bracket City, by The Atlantic.

    Bracket City is a daily puzzle game published by The Atlantic:
    https://theatlantic.com/games/bracket-city
    """
    day = parse_date_arg(puzzle_date)

    settings = get_settings()
    configure_logging(settings)

    try:
        store = PuzzleStore.open(settings)
    except StorageError as e:
        err_console.print(f"Failed to initialize storage: {e}", markup=False)
        raise typer.Exit(1)

    try:
        load = partial(load_puzzle, store)
        try:
            document = load(day)
        except (FetchError, MalformedDocumentError) as e:
            logger.error(f"Could not load puzzle for {day.isoformat()}: {e}")
            err_console.print(str(e), markup=False)
            raise typer.Exit(1)

        terminal = TerminalApp(
            console,
            open_game(document, store),
            store,
            load,
            calendar=Calendar(),
            mode=MODE_CALENDAR if calendar else MODE_GAME,
        )
        terminal.run()
    finally:
        store.close()


if __name__ == "__main__":
    app()
