"""Worked example: employee records with JSON-backed columns.

Demonstrates JSONField with nested pydantic models, a dict field, and a
plain ``list[str]`` stored through SQLAlchemy Core.
"""

from jsonblob.examples.models import Address, Department, JobModel, PersonalInfo
from jsonblob.examples.repository import Employee, EmployeeRepository
from jsonblob.examples.schema import employees, metadata

__all__ = [
    "Address",
    "Department",
    "Employee",
    "EmployeeRepository",
    "JobModel",
    "PersonalInfo",
    "employees",
    "metadata",
]
