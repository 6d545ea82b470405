from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator

from .account import AccountSummaryOut
from .base import CamelModel
from .department import DepartmentSummaryOut

EmployeeStatus = Literal["Active", "Inactive"]


def _strip(v):
    # Codes are compared and stored without surrounding whitespace.
    return v.strip() if isinstance(v, str) else v


class EmployeeCreateIn(CamelModel):
    employee_no: str = Field(alias="employeeId", min_length=1, max_length=50)
    account_id: int = Field(alias="userId")
    position: str = Field(min_length=1, max_length=100)
    department_id: int | None = None
    hire_date: date | None = None
    status: EmployeeStatus = "Active"

    @field_validator("employee_no", mode="before")
    @classmethod
    def strip_employee_no(cls, v):
        return _strip(v)


class EmployeeUpdateIn(CamelModel):
    employee_no: str | None = Field(default=None, alias="employeeId", min_length=1, max_length=50)
    account_id: int | None = Field(default=None, alias="userId")
    position: str | None = Field(default=None, min_length=1, max_length=100)
    department_id: int | None = None
    hire_date: date | None = None
    status: EmployeeStatus | None = None

    @field_validator("employee_no", mode="before")
    @classmethod
    def strip_employee_no(cls, v):
        return _strip(v)


class TransferIn(CamelModel):
    department_id: int


class EmployeeSummaryOut(CamelModel):
    id: int
    employee_no: str = Field(alias="employeeId")
    position: str
    account: AccountSummaryOut | None = Field(default=None, alias="user")


class EmployeeOut(CamelModel):
    id: int
    employee_no: str = Field(alias="employeeId")
    position: str
    department_id: int | None = None
    hire_date: date
    status: str
    account_id: int = Field(alias="userId")
    account: AccountSummaryOut | None = Field(default=None, alias="user")
    department: DepartmentSummaryOut | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
