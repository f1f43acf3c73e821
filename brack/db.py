import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

DB_FILE_NAME = "brack.db"
LOG_FILE_NAME = "brack.log"


class Settings(BaseSettings):
    api_url: str = "https://8huadblp0h.execute-api.us-east-2.amazonaws.com/puzzles"
    config_dir: Path | None = None  # Defaults to $XDG_CONFIG_HOME/brack or ~/.brack
    database_url: str | None = None  # Defaults to sqlite in config_dir
    log_level: str = "INFO"
    http_timeout: float = 30.0

    class Config:
        env_prefix = "BRACK_"
        env_file = ".env.local"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_config_dir(settings: Settings) -> Path:
    """Resolve the per-user configuration directory, creating it if needed."""
    if settings.config_dir is not None:
        config_dir = settings.config_dir
    elif xdg_config_home := os.getenv("XDG_CONFIG_HOME"):
        config_dir = Path(xdg_config_home) / "brack"
    else:
        config_dir = Path.home() / ".brack"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_database_url(settings: Settings) -> str:
    if settings.database_url:
        return settings.database_url
    return f"sqlite:///{get_config_dir(settings) / DB_FILE_NAME}"


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    engine = create_engine(database_url, echo=False)

    # SQLite ignores REFERENCES clauses unless asked per connection
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # Registers the mapped tables on Base.metadata
    from brack import models  # noqa: F401

    with engine.begin() as conn:
        Base.metadata.create_all(conn)
