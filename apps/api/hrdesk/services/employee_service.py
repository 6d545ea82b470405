from __future__ import annotations

from datetime import date
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import Conflict, NotFound, ValidationFailed
from ..models.account import Account
from ..models.department import Department
from ..models.employee import Employee
from ..models.workflow import Workflow
from ..schemas.employee import EmployeeCreateIn, EmployeeUpdateIn

logger = logging.getLogger(__name__)

TRANSFER_WORKFLOW_TYPE = "Department Transfer"
UNKNOWN_DEPARTMENT = "Unknown"


def get_employee(session: Session, employee_id: int) -> Employee:
    employee = session.get(Employee, employee_id)
    if not employee:
        raise NotFound("Employee not found")
    return employee


def _ensure_account(session: Session, account_id: int) -> None:
    if not session.get(Account, account_id):
        raise ValidationFailed(
            "Validation error",
            errors=[{"field": "userId", "message": "The specified user account does not exist"}],
        )


def _ensure_department(session: Session, department_id: int | None) -> None:
    if department_id is not None and not session.get(Department, department_id):
        raise NotFound("Department not found")


def _ensure_unique(session: Session, employee_no: str | None, account_id: int | None, exclude_id: int | None = None) -> None:
    if employee_no is not None:
        stmt = select(Employee.id).where(Employee.employee_no == employee_no)
        if exclude_id is not None:
            stmt = stmt.where(Employee.id != exclude_id)
        if session.scalar(stmt):
            raise Conflict("This Employee ID is already in use")
    if account_id is not None:
        stmt = select(Employee.id).where(Employee.account_id == account_id)
        if exclude_id is not None:
            stmt = stmt.where(Employee.id != exclude_id)
        if session.scalar(stmt):
            raise Conflict("This user account already has an employee record")


def get_all(session: Session, department_id: int | None = None, status: str | None = None) -> list[Employee]:
    stmt = select(Employee)
    if department_id is not None:
        stmt = stmt.where(Employee.department_id == department_id)
    if status:
        stmt = stmt.where(Employee.status == status)
    return list(session.scalars(stmt.order_by(Employee.id.asc())).all())


def create(session: Session, payload: EmployeeCreateIn) -> Employee:
    _ensure_account(session, payload.account_id)
    _ensure_unique(session, payload.employee_no, payload.account_id)
    _ensure_department(session, payload.department_id)

    employee = Employee(
        employee_no=payload.employee_no,
        account_id=payload.account_id,
        position=payload.position,
        department_id=payload.department_id,
        hire_date=payload.hire_date or date.today(),
        status=payload.status,
    )
    session.add(employee)
    session.commit()
    session.refresh(employee)
    logger.info("employee created: id=%s code=%s", employee.id, employee.employee_no)
    return employee


def update(session: Session, employee_id: int, payload: EmployeeUpdateIn) -> Employee:
    employee = get_employee(session, employee_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("account_id") is not None:
        _ensure_account(session, data["account_id"])
    _ensure_unique(session, data.get("employee_no"), data.get("account_id"), exclude_id=employee.id)
    if "department_id" in data:
        _ensure_department(session, data["department_id"])

    for field, value in data.items():
        if value is None and field != "department_id":
            continue
        setattr(employee, field, value)

    session.commit()
    session.refresh(employee)
    return employee


def delete(session: Session, employee_id: int) -> None:
    employee = get_employee(session, employee_id)
    session.delete(employee)
    session.commit()
    logger.info("employee deleted: id=%s", employee_id)


def transfer(session: Session, employee_id: int, department_id: int) -> Workflow:
    """Move an employee and append exactly one "Department Transfer" workflow."""
    employee = get_employee(session, employee_id)
    old_department = session.get(Department, employee.department_id) if employee.department_id else None
    new_department = session.get(Department, department_id)

    if new_department is None:
        logger.warning("transfer target department %s not found (employee_id=%s)", department_id, employee_id)
    employee.department_id = new_department.id if new_department else None

    old_name = old_department.name if old_department else UNKNOWN_DEPARTMENT
    new_name = new_department.name if new_department else UNKNOWN_DEPARTMENT
    workflow = Workflow(
        employee_id=employee.id,
        type=TRANSFER_WORKFLOW_TYPE,
        details={"task": f"Employee transferred from {old_name} to {new_name}."},
        status="Pending",
    )
    session.add(workflow)
    session.commit()
    session.refresh(workflow)
    logger.info("employee transferred: id=%s %s -> %s", employee_id, old_name, new_name)
    return workflow
