from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.current_user import get_current_user, require_admin
from ..db import get_session
from ..models.account import Account
from ..schemas.base import MessageOut
from ..schemas.workflow import WorkflowCreateIn, WorkflowOut, WorkflowStatusIn
from ..services import workflow_service

router = APIRouter(prefix="/api/workflows", tags=["workflows"])


@router.get("", response_model=list[WorkflowOut])
def list_workflows(session: Session = Depends(get_session), user: Account = Depends(require_admin)):
    return workflow_service.get_all(session)


@router.get("/employee/{employee_id}", response_model=list[WorkflowOut])
def list_employee_workflows(
    employee_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return workflow_service.get_by_employee(session, employee_id)


@router.get("/{workflow_id}", response_model=WorkflowOut)
def get_workflow(
    workflow_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return workflow_service.get_workflow(session, workflow_id)


@router.post("", response_model=WorkflowOut, status_code=201)
def create_workflow(
    payload: WorkflowCreateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return workflow_service.create(session, payload)


@router.put("/{workflow_id}/status", response_model=WorkflowOut)
def update_workflow_status(
    workflow_id: int,
    payload: WorkflowStatusIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return workflow_service.update_status(session, workflow_id, payload.status)


@router.delete("/{workflow_id}", response_model=MessageOut)
def delete_workflow(
    workflow_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    workflow_service.delete(session, workflow_id)
    return MessageOut(message="Workflow deleted")
