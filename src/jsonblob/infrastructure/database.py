"""SQLite engine setup for stores holding JSONField columns.

SQLAlchemy Core (not ORM): rows are read and written with explicit
statements, so a JSONField changed through its mutable proxy is persisted
by the next UPDATE that binds it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool


def create_db_engine(db_path: Path | None = None) -> Engine:
    """Create a SQLite engine with foreign keys enabled.

    A None *db_path* gives a single shared in-memory database; file
    databases run in WAL mode.
    """
    if db_path is None:
        engine = create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        if db_path is not None:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(metadata: MetaData, db_path: Path | None = None) -> Engine:
    """Create the engine and every table in *metadata*.

    Idempotent: safe to call on an existing database file.
    """
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
