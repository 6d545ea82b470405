from datetime import datetime

from pydantic import Field

from .base import CamelModel


class DepartmentCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class DepartmentUpdateIn(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class DepartmentSummaryOut(CamelModel):
    id: int
    name: str


class DepartmentOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    employee_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
