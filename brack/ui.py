"""Terminal presentation for the game and calendar views."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from rich.console import Console, Group, RenderableType
from rich.text import Text

from brack.bracket_city import FetchError
from brack.calendar_view import Calendar, DayStatus
from brack.clues import PLACEHOLDER_RE, MalformedDocumentError
from brack.game import Outcome, PuzzleGame, open_game
from brack.schemas import ProgressSnapshot, PuzzleDocument
from brack.store import PuzzleStore, StorageError

logger = logging.getLogger(__name__)

MODE_GAME = "game"
MODE_CALENDAR = "calendar"

TOGGLE_COMMANDS = {"/c", "/calendar"}
QUIT_COMMANDS = {"/q", "/quit"}
SELECT_KEYS = {"", "enter"}

MAX_WIDTH = 100


@dataclass(frozen=True)
class Theme:
    """Styles used by the terminal views."""

    header: str = "bold"
    active: str = "#0f0f0f on #e8c566"
    muted: str = "#888888"
    title: str = "bold"
    today: str = "on #555555"
    selected: str = "underline"
    completed: str = "#00aa00"
    in_progress: str = "#aaaa00"
    future: str = "#555555"
    unplayed: str = ""
    error: str = "bold red"

    def day_style(self, status: DayStatus) -> str:
        return {
            DayStatus.FUTURE: self.future,
            DayStatus.COMPLETED: self.completed,
            DayStatus.IN_PROGRESS: self.in_progress,
            DayStatus.UNPLAYED: self.unplayed,
        }[status]


def render_puzzle_text(state: str, theme: Theme) -> Text:
    """Highlight the clues that can currently be answered."""
    text = Text()
    pos = 0
    for match in PLACEHOLDER_RE.finditer(state):
        text.append(state[pos:match.start()])
        text.append(match.group(0), style=theme.active)
        pos = match.end()
    text.append(state[pos:])
    return text


def render_score(game: PuzzleGame) -> Text:
    return Text(f"✅ {game.correct} ❌ {game.incorrect} ⌨️ {game.chars}")


def render_game(game: PuzzleGame, theme: Theme) -> RenderableType:
    parts: list[RenderableType] = [
        Text(f"[ Bracket City | {game.puzzle_date} ]", style=theme.header),
        render_score(game),
        Text("---"),
        render_puzzle_text(game.state, theme),
        Text("---"),
    ]
    if game.done:
        parts.append(Text("🎉 You win! 🎉"))
        if game.document.completion_text:
            parts.append(Text(game.document.completion_text))
        parts.append(Text(f"URL: {game.document.completion_url}"))
    return Group(*parts)


def render_calendar(cal: Calendar, states: dict[str, ProgressSnapshot], theme: Theme) -> RenderableType:
    title = Text(cal.view_month.strftime("%B %Y"), style=theme.title, justify="center")
    header = Text("Su Mo Tu We Th Fr Sa", style=theme.muted)

    rows = []
    for week in cal.weeks():
        row = Text()
        for i, day in enumerate(week):
            if i:
                row.append(" ")
            if day is None:
                row.append("  ")
                continue

            style = theme.day_style(cal.day_status(day, states))
            if day == cal.cursor:
                style = theme.selected
            if day == cal.today:
                style = theme.today
            row.append(f"{day.day:2d}", style=style)
        rows.append(row)

    return Group(title, header, *rows)


class TerminalApp:
    """Line-based game loop switching between the puzzle and the calendar."""

    def __init__(
        self,
        console: Console,
        game: PuzzleGame,
        store: PuzzleStore | None,
        load: Callable[[date], PuzzleDocument],
        calendar: Calendar | None = None,
        theme: Theme | None = None,
        mode: str = MODE_GAME,
    ) -> None:
        self.console = console
        self.game = game
        self.store = store
        self.load = load
        self.calendar = calendar or Calendar()
        self.theme = theme or Theme()
        self.mode = mode
        self.message: Text | None = None

    def toggle_mode(self) -> None:
        self.mode = MODE_CALENDAR if self.mode == MODE_GAME else MODE_GAME

    def month_states(self) -> dict[str, ProgressSnapshot]:
        if self.store is None:
            return {}
        first, last = self.calendar.month_range()
        try:
            return self.store.game_states_between(first, last)
        except StorageError as e:
            logger.warning(f"Failed to load game states for {first:%Y-%m}: {e}")
            return {}

    def view(self) -> RenderableType:
        if self.mode == MODE_CALENDAR:
            body = render_calendar(self.calendar, self.month_states(), self.theme)
            help_text = "h/j/k/l to move, enter to play, /c for the game, /q to quit"
        else:
            body = render_game(self.game, self.theme)
            help_text = "/c for the calendar, /q to quit"

        parts = [body]
        if self.message is not None:
            parts.append(self.message)
        parts.append(Text(help_text, style=self.theme.muted))
        return Group(*parts)

    def draw(self) -> None:
        self.console.clear()
        self.console.print(self.view(), width=min(self.console.width, MAX_WIDTH))

    def handle(self, line: str) -> bool:
        """Process one line of input. Returns False when the app should exit."""
        command = line.strip().lower()
        self.message = None

        if command in QUIT_COMMANDS:
            return False
        if command in TOGGLE_COMMANDS:
            self.toggle_mode()
            return True

        if self.mode == MODE_CALENDAR:
            self.handle_calendar(command)
        else:
            self.handle_guess(line)
        return True

    def handle_guess(self, line: str) -> None:
        for ch in line:
            self.game.observe_letter(ch)

        result = self.game.submit_guess(line)
        if result.outcome is Outcome.INCORRECT:
            self.message = Text(f"Not quite: {line.strip()}", style=self.theme.muted)

    def handle_calendar(self, command: str) -> None:
        if command not in SELECT_KEYS:
            self.calendar.handle_key(command)
            return

        day = self.calendar.selected_date
        try:
            document = self.load(day)
        except (FetchError, MalformedDocumentError) as e:
            logger.error(f"Could not open puzzle for {day.isoformat()}: {e}")
            self.message = Text(str(e), style=self.theme.error)
            return

        self.game = open_game(document, self.store)
        self.mode = MODE_GAME

    def run(self) -> None:
        while True:
            self.draw()
            try:
                line = self.console.input("> ")
            except (EOFError, KeyboardInterrupt):
                break
            if not self.handle(line):
                break
