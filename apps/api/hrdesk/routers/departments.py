from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.current_user import get_current_user, require_admin
from ..db import get_session
from ..models.account import Account
from ..schemas.base import MessageOut
from ..schemas.department import DepartmentCreateIn, DepartmentOut, DepartmentUpdateIn
from ..services import department_service

router = APIRouter(prefix="/api/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentOut])
def list_departments(session: Session = Depends(get_session), user: Account = Depends(get_current_user)):
    return department_service.get_all(session)


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(
    department_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    return department_service.get_department(session, department_id)


@router.post("", response_model=DepartmentOut, status_code=201)
def create_department(
    payload: DepartmentCreateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return department_service.create(session, payload)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: int,
    payload: DepartmentUpdateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return department_service.update(session, department_id, payload)


@router.delete("/{department_id}", response_model=MessageOut)
def delete_department(
    department_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    department_service.delete(session, department_id)
    return MessageOut(message="Department deleted")
