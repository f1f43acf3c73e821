"""Local SQLite storage for puzzles and game progress."""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterator

from sqlalchemy import Engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brack.converters import (
    puzzle_to_record,
    record_to_puzzle,
    record_to_snapshot,
    snapshot_to_record,
)
from brack.db import Settings, create_db_engine, create_session_factory, get_database_url, init_db
from brack.models import GameState, PuzzleData, SchemaMetadata
from brack.schemas import ProgressSnapshot, PuzzleDocument

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schema_version"


class StorageError(Exception):
    """The underlying database failed."""


class NotFoundError(LookupError):
    """No record is stored under the requested puzzle date."""


class PuzzleStore:
    """Puzzle documents and progress snapshots keyed by puzzle date.

    Writes are upserts: saving a record for a date that already has one
    replaces it in full.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._initialize()

    @classmethod
    def open(cls, settings: Settings) -> "PuzzleStore":
        """Open (creating if needed) the store described by ``settings``."""
        try:
            engine = create_db_engine(get_database_url(settings))
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to open database: {e}") from e
        return cls(engine)

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except (SQLAlchemyError, ValueError) as e:
            # ValueError covers stored columns that no longer decode
            raise StorageError(f"Failed to {action}: {e}") from e

    def _initialize(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to initialize database: {e}") from e

        with self._session("initialize schema version") as session:
            row = session.get(SchemaMetadata, SCHEMA_VERSION_KEY)
            if row is None:
                session.add(SchemaMetadata(key=SCHEMA_VERSION_KEY, value=str(SCHEMA_VERSION)))
                session.commit()
                logger.info(f"Initialized database schema version {SCHEMA_VERSION}")
                return

        version = int(row.value)
        if version > SCHEMA_VERSION:
            raise StorageError(
                f"Database schema version {version} is newer than supported version {SCHEMA_VERSION}"
            )
        # No migrations exist yet; version 1 is the only schema

    def schema_version(self) -> int:
        with self._session("read schema version") as session:
            row = session.get(SchemaMetadata, SCHEMA_VERSION_KEY)
            if row is None:
                raise NotFoundError("No schema version recorded")
            return int(row.value)

    # Puzzles
    def save_puzzle(self, document: PuzzleDocument) -> None:
        with self._session("save puzzle data") as session:
            session.merge(puzzle_to_record(document))
            session.commit()
        logger.debug(f"Saved puzzle {document.puzzle_date}")

    def get_puzzle(self, puzzle_date: str) -> PuzzleDocument:
        with self._session("get puzzle data") as session:
            record = session.get(PuzzleData, puzzle_date)
            if record is None:
                raise NotFoundError(f"No puzzle data found for date {puzzle_date}")
            return record_to_puzzle(record)

    def has_puzzle(self, puzzle_date: str) -> bool:
        with self._session("check for puzzle data") as session:
            count = session.scalar(
                select(func.count()).select_from(PuzzleData).where(PuzzleData.puzzle_date == puzzle_date)
            )
            return bool(count)

    # Progress
    def save_game_state(self, snapshot: ProgressSnapshot) -> None:
        with self._session("save game state") as session:
            session.merge(snapshot_to_record(snapshot))
            session.commit()

    def get_game_state(self, puzzle_date: str) -> ProgressSnapshot:
        with self._session("get game state") as session:
            record = session.get(GameState, puzzle_date)
            if record is None:
                raise NotFoundError(f"No game state found for date {puzzle_date}")
            return record_to_snapshot(record)

    def has_game_state(self, puzzle_date: str) -> bool:
        with self._session("check for game state") as session:
            count = session.scalar(
                select(func.count()).select_from(GameState).where(GameState.puzzle_date == puzzle_date)
            )
            return bool(count)

    def game_states_between(self, first: date, last: date) -> dict[str, ProgressSnapshot]:
        """Get every stored game state with a puzzle date in [first, last]."""
        with self._session("list game states") as session:
            result = session.scalars(
                select(GameState)
                .where(GameState.puzzle_date.between(first.isoformat(), last.isoformat()))
                .order_by(GameState.puzzle_date.asc())
            )
            return {record.puzzle_date: record_to_snapshot(record) for record in result}
