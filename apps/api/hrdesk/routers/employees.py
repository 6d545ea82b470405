from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.current_user import get_current_user, require_admin
from ..db import get_session
from ..models.account import Account
from ..schemas.base import MessageOut
from ..schemas.employee import EmployeeCreateIn, EmployeeOut, EmployeeUpdateIn, TransferIn
from ..schemas.workflow import WorkflowOut
from ..services import employee_service

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
    department_id: int | None = Query(default=None, alias="departmentId"),
    status: str | None = Query(default=None),
):
    return employee_service.get_all(session, department_id=department_id, status=status)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return employee_service.get_employee(session, employee_id)


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(
    payload: EmployeeCreateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return employee_service.create(session, payload)


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return employee_service.update(session, employee_id, payload)


@router.delete("/{employee_id}", response_model=MessageOut)
def delete_employee(
    employee_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    employee_service.delete(session, employee_id)
    return MessageOut(message="Employee deleted")


@router.post("/{employee_id}/transfer", response_model=WorkflowOut, status_code=201)
def transfer_employee(
    employee_id: int,
    payload: TransferIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return employee_service.transfer(session, employee_id, payload.department_id)
