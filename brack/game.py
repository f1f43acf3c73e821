"""Core game logic and state management for Bracket City."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from brack.clues import active_clues, bracket, unsolvable_placeholders
from brack.schemas import ProgressSnapshot, PuzzleDocument
from brack.store import NotFoundError, StorageError

if TYPE_CHECKING:
    from brack.store import PuzzleStore

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    IGNORED = "ignored"


@dataclass(frozen=True)
class GuessResult:
    outcome: Outcome
    done: bool
    clue_id: str | None = None
    snapshot: ProgressSnapshot | None = None


class PuzzleGame:
    """A single play-through of one puzzle.

    ``state`` starts as the puzzle's initial text. Each correct guess replaces
    one placeholder with its answer; the game is done once every solution has
    been answered. When a store is given, progress is saved after every change.
    """

    def __init__(self, document: PuzzleDocument, store: PuzzleStore | None = None) -> None:
        self.document = document
        self.store = store
        self.state = document.initial_puzzle
        self.correct = 0
        self.incorrect = 0
        self.chars = 0
        self.done = False

    @property
    def puzzle_date(self) -> str:
        return self.document.puzzle_date

    @property
    def total(self) -> int:
        return len(self.document.solutions)

    def active_clues(self) -> dict[str, str]:
        return active_clues(self.state, self.document.solutions)

    def match(self, guess: str) -> str | None:
        """Find the active clue answered by ``guess``, if any.

        Active clues are tried in clue id order, so when a guess answers more
        than one clue only the first is applied.
        """
        guess = guess.strip().lower()
        for clue_id, answer in self.active_clues().items():
            if guess == answer.lower():
                return clue_id
        return None

    def submit_guess(self, guess: str) -> GuessResult:
        """Apply a guess and save the resulting progress.

        Blank guesses, and any guess after the puzzle is complete, are ignored.
        """
        if not guess.strip() or self.done:
            return GuessResult(Outcome.IGNORED, self.done)

        clue_id = self.match(guess)
        if clue_id is None:
            self.incorrect += 1
            snapshot = self._save()
            return GuessResult(Outcome.INCORRECT, self.done, snapshot=snapshot)

        self.correct += 1
        self.state = self.state.replace(bracket(clue_id), self.document.solutions[clue_id], 1)
        self.done = self.correct == self.total
        if self.done:
            logger.info(f"Puzzle {self.puzzle_date} solved ({self.correct} correct, {self.incorrect} incorrect)")

        snapshot = self._save()
        return GuessResult(Outcome.CORRECT, self.done, clue_id=clue_id, snapshot=snapshot)

    def observe_letter(self, ch: str) -> bool:
        """Count a typed letter.

        Returns False if ``ch`` is not a single letter or the puzzle is done.
        """
        if self.done or len(ch) != 1 or not ch.isalpha():
            return False

        self.chars += 1
        self._save()
        return True

    def _save(self) -> ProgressSnapshot:
        snapshot = capture_snapshot(self)
        if self.store is None:
            return snapshot

        # A failed save must never end the game
        try:
            self.store.save_game_state(snapshot)
        except StorageError as e:
            logger.warning(f"Failed to save game state for {self.puzzle_date}: {e}")
        return snapshot


def capture_snapshot(game: PuzzleGame, now: datetime | None = None) -> ProgressSnapshot:
    return ProgressSnapshot(
        puzzle_date=game.puzzle_date,
        state=game.state,
        correct=game.correct,
        incorrect=game.incorrect,
        chars=game.chars,
        last_played=now or datetime.now(),
        completed=game.done,
    )


def restore_game(
    document: PuzzleDocument,
    snapshot: ProgressSnapshot,
    store: PuzzleStore | None = None,
) -> PuzzleGame:
    """Rebuild a game from a saved snapshot. The snapshot is trusted as is."""
    game = PuzzleGame(document, store)
    game.state = snapshot.state
    game.correct = snapshot.correct
    game.incorrect = snapshot.incorrect
    game.chars = snapshot.chars
    game.done = snapshot.completed or snapshot.correct == game.total
    return game


def snapshot_problems(document: PuzzleDocument, snapshot: ProgressSnapshot) -> list[str]:
    """Describe the ways a snapshot disagrees with its puzzle document."""
    problems = []
    if snapshot.puzzle_date != document.puzzle_date:
        problems.append(f"snapshot is for {snapshot.puzzle_date}")
    if not 0 <= snapshot.correct <= len(document.solutions):
        problems.append(f"{snapshot.correct} correct answers for {len(document.solutions)} clues")
    missing = unsolvable_placeholders(snapshot.state, document.solutions)
    if missing:
        problems.append(f"unknown clues {', '.join(missing)}")
    return problems


def open_game(document: PuzzleDocument, store: PuzzleStore | None) -> PuzzleGame:
    """Resume the saved game for ``document`` or start a fresh one.

    A missing or unreadable snapshot, or one that no longer fits the puzzle,
    starts a fresh game.
    """
    if store is None:
        return PuzzleGame(document)

    try:
        snapshot = store.get_game_state(document.puzzle_date)
    except NotFoundError:
        return PuzzleGame(document, store)
    except StorageError as e:
        logger.warning(f"Failed to load game state for {document.puzzle_date}: {e}")
        return PuzzleGame(document, store)

    problems = snapshot_problems(document, snapshot)
    if problems:
        logger.warning(
            f"Discarding saved game for {document.puzzle_date}: {'; '.join(problems)}"
        )
        return PuzzleGame(document, store)

    logger.info(f"Resuming puzzle {document.puzzle_date} ({snapshot.correct}/{len(document.solutions)} solved)")
    return restore_game(document, snapshot, store)
