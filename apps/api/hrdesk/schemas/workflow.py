from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from .base import CamelModel

WorkflowStatus = Literal["Pending", "Approved", "Rejected"]


class WorkflowCreateIn(CamelModel):
    employee_id: int
    type: str = Field(min_length=1, max_length=100)
    details: dict[str, Any] | None = None
    status: WorkflowStatus = "Pending"


class WorkflowStatusIn(CamelModel):
    status: WorkflowStatus


class WorkflowOut(CamelModel):
    id: int
    employee_id: int
    type: str
    details: dict[str, Any] | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
