import pytest

from brack.db import create_db_engine, get_settings
from brack.schemas import PuzzleDocument
from brack.store import PuzzleStore


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep config, logs and the database out of the real home directory."""
    monkeypatch.setenv("BRACK_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("BRACK_DATABASE_URL", raising=False)
    monkeypatch.delenv("BRACK_API_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store(tmp_path):
    puzzle_store = PuzzleStore(create_db_engine(f"sqlite:///{tmp_path / 'test.db'}"))
    yield puzzle_store
    puzzle_store.close()


@pytest.fixture
def paris_doc():
    return PuzzleDocument(
        puzzle_date="2025-01-15",
        initial_puzzle="The [capital] of France",
        solutions={"capital": "Paris"},
        completion_text="Bonjour!",
        completion_url="https://example.com/done",
        puzzle_solution="The Paris of France",
    )


@pytest.fixture
def two_clue_doc():
    return PuzzleDocument(
        puzzle_date="2025-01-16",
        initial_puzzle="[a] and [b]",
        solutions={"a": "X", "b": "Y"},
        puzzle_solution="X and Y",
    )


@pytest.fixture
def nested_doc():
    return PuzzleDocument(
        puzzle_date="2025-01-17",
        initial_puzzle="Visit [capital of [country]] today",
        solutions={"country": "France", "capital of France": "Paris"},
        puzzle_solution="Visit Paris today",
    )
