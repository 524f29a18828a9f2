"""Employee records and their persistence.

:class:`Employee` exposes flat convenience properties (``job_company``,
``city`` ...) that read and write through the JSON fields, the way an
application would hide the blob layout from its callers.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from jsonblob.examples.models import JobModel, PersonalInfo
from jsonblob.examples.schema import employees
from jsonblob.field import JSONField

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine, Row

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class Employee:
    """An employee row with three JSON-backed columns."""

    name: str
    job: JSONField[JobModel]
    personal_info: JSONField[PersonalInfo]
    skills: JSONField[list[str]]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def create(
        cls,
        name: str,
        job: JobModel,
        personal_info: PersonalInfo,
        skills: list[str],
    ) -> Employee:
        return cls(
            name=name,
            job=JSONField(JobModel, job),
            personal_info=JSONField(PersonalInfo, personal_info),
            skills=JSONField(list[str], skills),
        )

    @classmethod
    def from_row(cls, row: Row[Any]) -> Employee:
        return cls(
            id=row.id,
            name=row.name,
            job=row.job,
            personal_info=row.personal_info,
            skills=row.skills,
            created_at=row.created_at,
        )

    # --- Job ---

    @property
    def job_company(self) -> str:
        return self.job.get("company")

    @job_company.setter
    def job_company(self, value: str) -> None:
        self.job.mutable.company = value

    @property
    def job_salary(self) -> float:
        return self.job.get("salary")

    @job_salary.setter
    def job_salary(self, value: float) -> None:
        self.job.mutable.salary = value

    @property
    def is_remote(self) -> bool:
        return self.job.get("remote")

    @is_remote.setter
    def is_remote(self, value: bool) -> None:
        self.job.mutable.remote = value

    @property
    def department(self) -> str:
        return self.job.get("department.name")

    @department.setter
    def department(self, value: str) -> None:
        self.job.mutable["department.name"] = value

    # --- Personal info ---

    @property
    def city(self) -> str:
        return self.personal_info.get("address.city")

    @city.setter
    def city(self, value: str) -> None:
        self.personal_info.mutable["address.city"] = value

    @property
    def email(self) -> str:
        return self.personal_info.get("email")

    @email.setter
    def email(self, value: str) -> None:
        self.personal_info.mutable.email = value

    @property
    def age(self) -> int:
        return self.personal_info.get("age")

    @age.setter
    def age(self, value: int) -> None:
        self.personal_info.mutable.age = value

    # --- Skills ---

    @property
    def skill_list(self) -> list[str]:
        return self.skills.value

    @skill_list.setter
    def skill_list(self, value: list[str]) -> None:
        self.skills.value = value


class EmployeeRepository:
    """Insert, fetch, and save employees through SQLAlchemy Core.

    Each method opens its own transaction via ``engine.begin()``.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(self, employee: Employee) -> Employee:
        with self._engine.begin() as conn:
            conn.execute(
                insert(employees).values(
                    id=employee.id,
                    name=employee.name,
                    job=employee.job,
                    personal_info=employee.personal_info,
                    skills=employee.skills,
                    created_at=employee.created_at,
                )
            )
        logger.debug("Inserted employee %s", employee.id)
        return employee

    def get(self, employee_id: str) -> Employee | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(employees).where(employees.c.id == employee_id)).first()
        return Employee.from_row(row) if row is not None else None

    def list_all(self) -> list[Employee]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(employees).order_by(employees.c.created_at)).all()
        return [Employee.from_row(row) for row in rows]

    def save(self, employee: Employee) -> bool:
        """Write the name and JSON columns back. Returns False if the row is gone."""
        with self._engine.begin() as conn:
            result = conn.execute(
                update(employees)
                .where(employees.c.id == employee.id)
                .values(
                    name=employee.name,
                    job=employee.job,
                    personal_info=employee.personal_info,
                    skills=employee.skills,
                )
            )
        return result.rowcount > 0
