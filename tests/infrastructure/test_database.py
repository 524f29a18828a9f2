"""Tests for SQLite engine setup."""

from pathlib import Path

from sqlalchemy import MetaData, inspect, text

from jsonblob.examples.schema import metadata
from jsonblob.infrastructure.database import create_db_engine, init_database


class TestCreateDbEngine:
    def test_file_engine_uses_wal(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        engine.dispose()

    def test_in_memory_is_shared(self) -> None:
        engine = create_db_engine()
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE t (x INTEGER)"))
        with engine.connect() as conn:
            assert conn.execute(text("SELECT count(*) FROM t")).scalar() == 0
        engine.dispose()


class TestInitDatabase:
    def test_creates_tables(self, tmp_path: Path) -> None:
        engine = init_database(metadata, tmp_path / "nested" / "app.db")
        assert "employees" in set(inspect(engine).get_table_names())
        assert (tmp_path / "nested" / "app.db").exists()
        engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(metadata, tmp_path / "app.db").dispose()
        engine = init_database(metadata, tmp_path / "app.db")
        assert "employees" in set(inspect(engine).get_table_names())
        engine.dispose()

    def test_in_memory(self) -> None:
        engine = init_database(MetaData())
        assert inspect(engine).get_table_names() == []
        engine.dispose()
