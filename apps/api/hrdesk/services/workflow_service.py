from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import NotFound
from ..models.employee import Employee
from ..models.workflow import Workflow
from ..schemas.workflow import WorkflowCreateIn


def get_workflow(session: Session, workflow_id: int) -> Workflow:
    workflow = session.get(Workflow, workflow_id)
    if not workflow:
        raise NotFound("Workflow not found")
    return workflow


def get_all(session: Session) -> list[Workflow]:
    return list(session.scalars(select(Workflow).order_by(Workflow.id.desc())).all())


def get_by_employee(session: Session, employee_id: int) -> list[Workflow]:
    stmt = select(Workflow).where(Workflow.employee_id == employee_id).order_by(Workflow.id.desc())
    return list(session.scalars(stmt).all())


def create(session: Session, payload: WorkflowCreateIn) -> Workflow:
    if not session.get(Employee, payload.employee_id):
        raise NotFound("Employee not found")
    workflow = Workflow(
        employee_id=payload.employee_id,
        type=payload.type,
        details=payload.details,
        status=payload.status,
    )
    session.add(workflow)
    session.commit()
    session.refresh(workflow)
    return workflow


def update_status(session: Session, workflow_id: int, status: str) -> Workflow:
    workflow = get_workflow(session, workflow_id)
    workflow.status = status
    session.commit()
    session.refresh(workflow)
    return workflow


def delete(session: Session, workflow_id: int) -> None:
    workflow = get_workflow(session, workflow_id)
    session.delete(workflow)
    session.commit()
