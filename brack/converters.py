"""Converters between API documents, progress snapshots and database rows."""
from brack.models import GameState, PuzzleData
from brack.schemas import ProgressSnapshot, PuzzleDocument


def puzzle_to_record(document: PuzzleDocument) -> PuzzleData:
    """Convert a puzzle document to a ``puzzle_data`` row.

    ``created_at`` is left unset so that replacing a cached puzzle keeps the
    time it was first stored.
    """
    return PuzzleData(
        puzzle_date=document.puzzle_date,
        completion_text=document.completion_text,
        completion_url=document.completion_url,
        solutions=dict(document.solutions),
        initial_puzzle=document.initial_puzzle,
        puzzle_solution=document.puzzle_solution,
    )


def record_to_puzzle(record: PuzzleData) -> PuzzleDocument:
    return PuzzleDocument(
        puzzle_date=record.puzzle_date,
        completion_text=record.completion_text,
        completion_url=record.completion_url,
        solutions=record.solutions,
        initial_puzzle=record.initial_puzzle,
        puzzle_solution=record.puzzle_solution,
    )


def snapshot_to_record(snapshot: ProgressSnapshot) -> GameState:
    return GameState(
        puzzle_date=snapshot.puzzle_date,
        state=snapshot.state,
        correct=snapshot.correct,
        incorrect=snapshot.incorrect,
        chars=snapshot.chars,
        last_played=snapshot.last_played,
        completed=snapshot.completed,
    )


def record_to_snapshot(record: GameState) -> ProgressSnapshot:
    return ProgressSnapshot.model_validate(record)
