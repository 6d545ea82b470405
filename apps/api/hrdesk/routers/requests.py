from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..core.current_user import get_current_user, require_admin
from ..core.errors import Forbidden
from ..core.recent_submissions import RecentSubmissions
from ..core.roles import Role
from ..db import get_session
from ..models.account import Account
from ..schemas.base import MessageOut
from ..schemas.request import (
    BulkDeleteOut,
    DeduplicateOut,
    RepairIn,
    RequestCreateIn,
    RequestItemOut,
    RequestOut,
    RequestUpdateIn,
)
from ..services import request_service

router = APIRouter(prefix="/api/requests", tags=["requests"])


def get_recent_submissions(request: Request) -> RecentSubmissions:
    return request.app.state.recent_submissions


@router.get("", response_model=list[RequestOut])
def list_requests(
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
    status: str | None = Query(default=None),
    employee_id: int | None = Query(default=None, alias="employeeId"),
):
    return request_service.get_all(session, status=status, employee_id=employee_id)


@router.post("", response_model=RequestOut, status_code=201)
def create_request(
    payload: RequestCreateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
    guard: RecentSubmissions = Depends(get_recent_submissions),
):
    employee_id = request_service.resolve_employee_id(session, payload.employee_id, payload.user_id)
    update = {"employee_id": employee_id}
    if user.role != Role.Admin:
        if employee_id != user.employee_pk:
            raise Forbidden("You can only submit requests for your own employee record")
        # Only admins decide a request's outcome.
        update["status"] = "Pending"
    return request_service.create(session, payload.model_copy(update=update), guard)


# Fixed paths before "/{request_id}".
@router.post("/deduplicate", response_model=DeduplicateOut)
def deduplicate_requests(session: Session = Depends(get_session), user: Account = Depends(require_admin)):
    removed_ids, total_after = request_service.deduplicate(session)
    return DeduplicateOut(
        message=f"Removed {len(removed_ids)} duplicate request(s)",
        removed_ids=removed_ids,
        total_after=total_after,
    )


@router.delete("/all", response_model=BulkDeleteOut)
def delete_all_requests(session: Session = Depends(get_session), user: Account = Depends(require_admin)):
    count = request_service.delete_all(session)
    return BulkDeleteOut(message=f"Deleted {count} request(s)", deleted_count=count)


@router.get("/employee/{employee_id}", response_model=list[RequestOut])
def list_employee_requests(
    employee_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return request_service.get_by_employee(session, employee_id)


@router.get("/{request_id}", response_model=RequestOut)
def get_request(
    request_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return request_service.get_request(session, request_id)


@router.get("/{request_id}/items", response_model=list[RequestItemOut])
def list_request_items(
    request_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return request_service.get_items(session, request_id)


@router.put("/{request_id}", response_model=RequestOut)
def update_request(
    request_id: int,
    payload: RequestUpdateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return request_service.update(session, request_id, payload)


@router.delete("/{request_id}", response_model=MessageOut)
def delete_request(
    request_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    request_service.delete(session, request_id)
    return MessageOut(message="Request deleted")


@router.post("/{request_id}/repair", response_model=RequestOut)
def repair_request(
    request_id: int,
    payload: RepairIn,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    if user.role != Role.Admin:
        current = request_service.get_request(session, request_id)
        target_id = request_service.resolve_employee_id(session, payload.employee_id, payload.user_id)
        own = user.employee_pk
        if own is None or current.employee_id != own or target_id != own:
            raise Forbidden("Only administrators can move a request to another employee")
    return request_service.repair_association(session, request_id, payload)
