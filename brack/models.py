from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from brack.db import Base


class SchemaMetadata(Base):
    __tablename__ = "metadata"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class PuzzleData(Base):
    __tablename__ = "puzzle_data"

    puzzle_date: Mapped[str] = mapped_column(String(10), primary_key=True)  # YYYY-MM-DD
    completion_text: Mapped[str] = mapped_column(Text, nullable=False)
    completion_url: Mapped[str] = mapped_column(Text, nullable=False)
    solutions: Mapped[dict] = mapped_column(JSON, nullable=False)  # {"clue-id": "answer", ...}
    initial_puzzle: Mapped[str] = mapped_column(Text, nullable=False)
    puzzle_solution: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    game_state: Mapped[Optional["GameState"]] = relationship(back_populates="puzzle")


class GameState(Base):
    __tablename__ = "game_state"

    puzzle_date: Mapped[str] = mapped_column(
        String(10), ForeignKey("puzzle_data.puzzle_date"), primary_key=True
    )
    state: Mapped[str] = mapped_column(Text, nullable=False)
    correct: Mapped[int] = mapped_column(Integer, nullable=False)
    incorrect: Mapped[int] = mapped_column(Integer, nullable=False)
    chars: Mapped[int] = mapped_column(Integer, nullable=False)
    last_played: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False)

    puzzle: Mapped["PuzzleData"] = relationship(back_populates="game_state")
