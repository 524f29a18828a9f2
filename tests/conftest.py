"""Shared pytest fixtures for jsonblob tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from jsonblob.config.settings import set_settings
from jsonblob.examples.schema import metadata
from jsonblob.field import JSONField
from jsonblob.infrastructure.database import init_database
from tests.models import JobModel, PersonWithAddress, sample_job, sample_person


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Drop JSONBLOB_* env vars and cached settings around every test."""
    for name in list(os.environ):
        if name.startswith("JSONBLOB_"):
            monkeypatch.delenv(name)
    set_settings(None)
    yield
    set_settings(None)


@pytest.fixture
def job() -> JobModel:
    return sample_job()


@pytest.fixture
def job_field(job: JobModel) -> JSONField[JobModel]:
    return JSONField(JobModel, job)


@pytest.fixture
def person() -> PersonWithAddress:
    return sample_person()


@pytest.fixture
def person_field(person: PersonWithAddress) -> JSONField[PersonWithAddress]:
    return JSONField(PersonWithAddress, person)


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """SQLite file database with the example tables created."""
    engine = init_database(metadata, tmp_path / "jsonblob.db")
    try:
        yield engine
    finally:
        engine.dispose()
