from typing import Iterator, Optional
import logging

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def build_engine(config: Settings) -> Engine:
    """Create the engine with bounded waits on every store call."""
    db_url = config.DATABASE_URL
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # SQLite specific connect args; `timeout` bounds waits on the file lock
        engine_kwargs.update({
            "connect_args": {"check_same_thread": False, "timeout": config.DB_TIMEOUT_SECONDS}
        })
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every thread sees its own empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        # Better resiliency for managed Postgres
        statement_timeout_ms = int(config.DB_TIMEOUT_SECONDS * 1000)
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": config.DB_POOL_SIZE,
            "max_overflow": config.DB_MAX_OVERFLOW,
            "pool_timeout": config.DB_TIMEOUT_SECONDS,
            "connect_args": {
                "connect_timeout": int(config.DB_TIMEOUT_SECONDS),
                "options": f"-c statement_timeout={statement_timeout_ms}",
            },
        })

    engine = create_engine(db_url, echo=config.DEBUG, **engine_kwargs)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine (and its connection pool) for the lifetime of the app.

    Opened in the application lifespan, closed on shutdown and handed to the
    request handlers through ``app.state.db``.
    """

    def __init__(self, config: Optional[Settings] = None, engine: Optional[Engine] = None):
        self.config = config or default_settings
        self.engine = engine if engine is not None else build_engine(self.config)

    def create_db_and_tables(self) -> None:
        # Register the table models on SQLModel.metadata before create_all
        from .db import models  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request) -> Iterator[Session]:
    with get_database(request).session() as session:
        yield session
