"""Tests for the JSONFieldType column type."""

from pathlib import Path

import pytest
from sqlalchemy import Column, Integer, MetaData, Table, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import StatementError

from jsonblob import DecodeError, JSONField
from jsonblob.infrastructure.database import init_database
from jsonblob.infrastructure.sqltypes import JSONFieldType
from tests.models import JobModel, Reading, sample_job

_metadata = MetaData()

jobs = Table(
    "jobs",
    _metadata,
    Column("id", Integer, primary_key=True),
    Column("job", JSONFieldType(JobModel)),
)


@pytest.fixture
def jobs_engine(tmp_path: Path) -> Engine:
    engine = init_database(_metadata, tmp_path / "jobs.db")
    try:
        yield engine
    finally:
        engine.dispose()


def _fetch(engine: Engine, row_id: int = 1) -> JSONField[JobModel] | None:
    with engine.connect() as conn:
        return conn.execute(select(jobs.c.job).where(jobs.c.id == row_id)).scalar_one()


class TestBind:
    def test_field_round_trip(self, jobs_engine: Engine, job_field: JSONField[JobModel]) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=job_field))
        fetched = _fetch(jobs_engine)
        assert isinstance(fetched, JSONField)
        assert fetched == job_field
        assert fetched.value == job_field.value

    def test_stored_as_raw_json_bytes(
        self, jobs_engine: Engine, job_field: JSONField[JobModel]
    ) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=job_field))
            raw = conn.execute(text("SELECT job FROM jobs WHERE id = 1")).scalar_one()
        assert bytes(raw) == job_field.raw_bytes()

    def test_bare_value_encoded(self, jobs_engine: Engine) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=sample_job()))
        fetched = _fetch(jobs_engine)
        assert fetched is not None
        assert fetched.company == "Apple"

    def test_raw_bytes_pass_through(self, jobs_engine: Engine) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=b"not json"))
        fetched = _fetch(jobs_engine)
        assert fetched is not None
        assert fetched.raw_bytes() == b"not json"
        with pytest.raises(DecodeError):
            _ = fetched.value

    def test_null(self, jobs_engine: Engine) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=None))
        assert _fetch(jobs_engine) is None

    def test_unencodable_value(self, tmp_path: Path) -> None:
        metadata = MetaData()
        readings = Table(
            "readings",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("reading", JSONFieldType(Reading)),
        )
        engine = init_database(metadata, tmp_path / "readings.db")
        try:
            with pytest.raises(StatementError), engine.begin() as conn:
                conn.execute(
                    insert(readings).values(
                        id=1, reading=Reading(label="x", values=[float("inf")])
                    )
                )
        finally:
            engine.dispose()


class TestProxyWritesPersist:
    def test_update_after_mutation(
        self, jobs_engine: Engine, job_field: JSONField[JobModel]
    ) -> None:
        with jobs_engine.begin() as conn:
            conn.execute(insert(jobs).values(id=1, job=job_field))

        fetched = _fetch(jobs_engine)
        assert fetched is not None
        fetched.mutable.company = "Swift Corp"
        with jobs_engine.begin() as conn:
            conn.execute(update(jobs).where(jobs.c.id == 1).values(job=fetched))

        again = _fetch(jobs_engine)
        assert again is not None
        assert again.company == "Swift Corp"
        assert again.salary == 120000.0
        assert again.mutable.company == "Swift Corp"


class TestTypeBehaviour:
    def test_python_type(self) -> None:
        assert JSONFieldType(JobModel).python_type is JSONField

    def test_copy_value_is_independent(self, job_field: JSONField[JobModel]) -> None:
        copied = JSONFieldType(JobModel).copy_value(job_field)
        assert copied == job_field
        assert copied is not job_field

    def test_compare_values(self, job_field: JSONField[JobModel]) -> None:
        col_type = JSONFieldType(JobModel)
        assert col_type.compare_values(job_field, job_field.refreshed())
        assert not col_type.compare_values(job_field, job_field.setting("company", "x"))

    def test_repr(self) -> None:
        assert repr(JSONFieldType(JobModel)) == "JSONFieldType(JobModel)"

    def test_strict_passed_to_fields(self) -> None:
        col_type = JSONFieldType(list[int], strict=True)
        field = col_type.process_result_value(b'["1"]', None)  # type: ignore[arg-type]
        assert field is not None
        with pytest.raises(DecodeError):
            _ = field.value
