"""Value models stored inside employee JSON columns."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class Department(BaseModel):
    model_config = {"frozen": True}

    name: str
    location: str
    budget: float


class JobModel(BaseModel):
    """Employment details, stored as one JSON blob."""

    model_config = {"frozen": True}

    company: str
    salary: float
    remote: bool
    start_date: date
    benefits: list[str] = Field(default_factory=list)
    department: Department


class Address(BaseModel):
    model_config = {"frozen": True}

    street: str
    city: str
    state: str
    zip_code: str
    country: str


class PersonalInfo(BaseModel):
    """Contact details, stored as one JSON blob."""

    model_config = {"frozen": True}

    age: int
    address: Address
    phone: str
    email: str
    social_profiles: dict[str, str] = Field(default_factory=dict)
