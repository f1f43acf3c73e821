"""Clue extraction for bracketed puzzle text."""
import logging
import re

from brack.schemas import PuzzleDocument

logger = logging.getLogger(__name__)

# Innermost placeholder: brackets with no brackets inside
PLACEHOLDER_RE = re.compile(r"\[([^\[\]]+)\]")


class MalformedDocumentError(ValueError):
    """A placeholder in the puzzle text has no matching solution."""

    def __init__(self, puzzle_date: str, missing: list[str]):
        self.puzzle_date = puzzle_date
        self.missing = missing
        super().__init__(
            f"Puzzle {puzzle_date} has clues without solutions: {', '.join(missing)}"
        )


def bracket(clue_id: str) -> str:
    """Wrap a clue id in placeholder brackets."""
    return f"[{clue_id}]"


def active_clues(state: str, solutions: dict[str, str]) -> dict[str, str]:
    """Return the clues whose placeholder currently appears in the text.

    A clue is active when its literal ``[clue-id]`` is a substring of ``state``.
    The result is ordered by clue id so guess matching is deterministic.
    """
    return {
        clue_id: solutions[clue_id]
        for clue_id in sorted(solutions)
        if bracket(clue_id) in state
    }


def placeholders(text: str) -> list[str]:
    """List the innermost placeholder ids in text order."""
    return PLACEHOLDER_RE.findall(text)


def _resolve(text: str, solutions: dict[str, str]) -> tuple[list[str], list[str]]:
    """Answer ``text`` innermost clue first, as a player would.

    Returns the clue ids answered, in order, and the placeholders met along the
    way that have no solution. Stops after ``len(solutions)`` answers, which is
    when a game is complete.
    """
    answered: list[str] = []
    missing: list[str] = []
    while len(answered) < len(solutions):
        pending = placeholders(text)
        for clue_id in pending:
            if clue_id not in solutions and clue_id not in missing:
                missing.append(clue_id)

        answerable = [clue_id for clue_id in pending if clue_id in solutions]
        if not answerable:
            break

        clue_id = answerable[0]
        answered.append(clue_id)
        text = text.replace(bracket(clue_id), solutions[clue_id], 1)

    for clue_id in placeholders(text):
        if clue_id not in solutions and clue_id not in missing:
            missing.append(clue_id)

    return answered, missing


def unsolvable_placeholders(text: str, solutions: dict[str, str]) -> list[str]:
    """Collect placeholders in ``text`` that can never be answered."""
    return _resolve(text, solutions)[1]


def validate_document(document: PuzzleDocument) -> PuzzleDocument:
    """Check that every clue in the puzzle can be answered.

    Raises MalformedDocumentError if a placeholder has no solution.
    """
    answered, missing = _resolve(document.initial_puzzle, document.solutions)
    if missing:
        raise MalformedDocumentError(document.puzzle_date, missing)

    unused = sorted(set(document.solutions) - set(answered))
    if unused:
        logger.warning(
            f"Puzzle {document.puzzle_date} has solutions that never appear: {', '.join(unused)}"
        )

    return document
