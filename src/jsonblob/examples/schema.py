"""SQLAlchemy Core table definitions for the employee example.

The three JSON columns are opaque binary blobs to the database; only
``id``, ``name`` and ``created_at`` are queryable.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, MetaData, Table, Text

from jsonblob.examples.models import JobModel, PersonalInfo
from jsonblob.infrastructure.sqltypes import JSONFieldType

metadata = MetaData()

employees = Table(
    "employees",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("job", JSONFieldType(JobModel), nullable=False),
    Column("personal_info", JSONFieldType(PersonalInfo), nullable=False),
    Column("skills", JSONFieldType(list[str]), nullable=False),
    Column("created_at", Text, nullable=False),
)

Index("ix_employees_name", employees.c.name)
