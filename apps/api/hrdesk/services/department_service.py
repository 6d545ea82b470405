from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..core.errors import NotFound
from ..models.department import Department
from ..schemas.department import DepartmentCreateIn, DepartmentUpdateIn

logger = logging.getLogger(__name__)


def get_department(session: Session, department_id: int) -> Department:
    department = session.get(Department, department_id)
    if not department:
        raise NotFound("Department not found")
    return department


def get_all(session: Session) -> list[Department]:
    stmt = select(Department).options(selectinload(Department.employees)).order_by(Department.id.asc())
    return list(session.scalars(stmt).all())


def create(session: Session, payload: DepartmentCreateIn) -> Department:
    department = Department(name=payload.name.strip(), description=payload.description)
    session.add(department)
    session.commit()
    session.refresh(department)
    return department


def update(session: Session, department_id: int, payload: DepartmentUpdateIn) -> Department:
    department = get_department(session, department_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        department.name = data["name"].strip()
    if "description" in data:
        department.description = data["description"]
    session.commit()
    session.refresh(department)
    return department


def delete(session: Session, department_id: int) -> None:
    department = get_department(session, department_id)
    # Employees stay, unassigned.
    for employee in department.employees:
        employee.department_id = None
    session.delete(department)
    session.commit()
    logger.info("department deleted: id=%s", department_id)
