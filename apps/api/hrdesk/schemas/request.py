from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import CamelModel
from .employee import EmployeeSummaryOut

RequestStatus = Literal["Pending", "Approved", "Rejected"]


class RequestItemIn(CamelModel):
    # int ids address stored rows; strings are client-side temporary ids.
    id: int | str | None = None
    name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(default=1, ge=1)


class RequestCreateIn(CamelModel):
    type: str = Field(min_length=1, max_length=100)
    employee_id: int | None = None
    user_id: int | None = None
    status: RequestStatus = "Pending"
    request_items: list[RequestItemIn] = Field(default_factory=list)


class RequestUpdateIn(CamelModel):
    type: str | None = Field(default=None, min_length=1, max_length=100)
    status: RequestStatus | None = None
    employee_id: int | None = None
    request_items: list[RequestItemIn] | None = None


class RequestItemOut(CamelModel):
    id: int
    name: str
    quantity: int
    request_id: int


class RequestOut(CamelModel):
    id: int
    type: str
    status: str
    employee_id: int
    items: list[RequestItemOut] = Field(default_factory=list, serialization_alias="requestItems")
    employee: EmployeeSummaryOut | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RepairIn(CamelModel):
    employee_id: int | None = None
    user_id: int | None = None


class DeduplicateOut(CamelModel):
    success: bool = True
    message: str
    removed_ids: list[int] = Field(default_factory=list)
    total_after: int


class BulkDeleteOut(CamelModel):
    success: bool = True
    message: str
    deleted_count: int
