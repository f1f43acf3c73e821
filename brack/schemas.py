from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


# Puzzles
class PuzzleDocument(BaseModel):
    """One day's puzzle as served by the Bracket City API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    puzzle_date: str = Field(alias="puzzleDate")  # YYYY-MM-DD
    initial_puzzle: str = Field(alias="initialPuzzle")
    solutions: dict[str, str]  # {"clue-id": "answer", ...}
    completion_text: str = Field(default="", alias="completionText")
    completion_url: str = Field(default="", alias="completionURL")
    puzzle_solution: str = Field(default="", alias="puzzleSolution")


# Progress
class ProgressSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    puzzle_date: str
    state: str
    correct: int
    incorrect: int
    chars: int
    last_played: datetime
    completed: bool
