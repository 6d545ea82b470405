"""Requests and their items.

Item reconciliation on update works from a snapshot of the stored items:
``diff_items`` partitions the submission into inserts, updates and deletes,
and ``update`` applies them in that order inside the request's transaction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Sequence

from sqlalchemy import delete as sa_delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.errors import Conflict, NotFound, ValidationFailed
from ..core.recent_submissions import RecentSubmissions
from ..models.employee import Employee
from ..models.request import Request, RequestItem
from ..schemas.request import RepairIn, RequestCreateIn, RequestItemIn, RequestUpdateIn

logger = logging.getLogger(__name__)


@dataclass
class ItemDiff:
    to_insert: list[RequestItemIn] = field(default_factory=list)
    to_update: list[tuple[RequestItem, RequestItemIn]] = field(default_factory=list)
    to_delete: list[RequestItem] = field(default_factory=list)


def diff_items(existing: Sequence[RequestItem], submitted: Sequence[RequestItemIn]) -> ItemDiff:
    """Compare submitted items against stored ones.

    Integer ids that match a stored row update it in place. Items without an
    id, with a string (client-side temporary) id, or with an id that is not
    one of ``existing`` are inserted. Stored rows not referenced are deleted.
    """
    by_id = {item.id: item for item in existing}
    diff = ItemDiff()
    kept: set[int] = set()

    for incoming in submitted:
        item_id = incoming.id
        if isinstance(item_id, int) and not isinstance(item_id, bool) and item_id in by_id and item_id not in kept:
            kept.add(item_id)
            diff.to_update.append((by_id[item_id], incoming))
        else:
            diff.to_insert.append(incoming)

    diff.to_delete = [item for item in existing if item.id not in kept]
    return diff


def _with_relations(stmt):
    return stmt.options(
        selectinload(Request.items),
        selectinload(Request.employee).selectinload(Employee.account),
    )


def resolve_employee_id(session: Session, employee_id: int | None, account_id: int | None) -> int:
    if employee_id is None and account_id is not None:
        employee_id = session.scalar(select(Employee.id).where(Employee.account_id == account_id))
        if employee_id is None:
            raise NotFound("No employee record is linked to this user")
    if employee_id is None:
        raise ValidationFailed(
            "Validation error",
            errors=[{"field": "employeeId", "message": "employeeId or userId is required"}],
        )
    if not session.get(Employee, employee_id):
        raise NotFound(f"Employee with ID {employee_id} not found")
    return employee_id


def get_request(session: Session, request_id: int) -> Request:
    request = session.scalar(_with_relations(select(Request).where(Request.id == request_id)))
    if not request:
        raise NotFound("Request not found")
    return request


def get_all(session: Session, status: str | None = None, employee_id: int | None = None) -> list[Request]:
    stmt = _with_relations(select(Request))
    if status:
        stmt = stmt.where(Request.status == status)
    if employee_id is not None:
        stmt = stmt.where(Request.employee_id == employee_id)
    return list(session.scalars(stmt.order_by(Request.id.desc())).all())


def get_by_employee(session: Session, employee_id: int) -> list[Request]:
    if not session.get(Employee, employee_id):
        raise NotFound("Employee not found")
    return get_all(session, employee_id=employee_id)


def get_items(session: Session, request_id: int) -> list[RequestItem]:
    return list(get_request(session, request_id).items)


def create(session: Session, payload: RequestCreateIn, guard: RecentSubmissions) -> Request:
    employee_id = resolve_employee_id(session, payload.employee_id, payload.user_id)

    key = (payload.type, employee_id)
    if not guard.claim(key):
        logger.warning("duplicate request suppressed: type=%s employee_id=%s", payload.type, employee_id)
        raise Conflict("A similar request was just submitted. Please wait a moment before trying again.")

    request = Request(type=payload.type, status=payload.status, employee_id=employee_id)
    request.items = [RequestItem(name=i.name, quantity=i.quantity) for i in payload.request_items]
    session.add(request)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        guard.release(key)
        raise

    logger.info("request created: id=%s employee_id=%s items=%s", request.id, employee_id, len(request.items))
    return get_request(session, request.id)


def update(session: Session, request_id: int, payload: RequestUpdateIn) -> Request:
    request = get_request(session, request_id)
    data = payload.model_dump(exclude_unset=True)

    try:
        if data.get("employee_id") is not None:
            request.employee_id = resolve_employee_id(session, data["employee_id"], None)
        if data.get("type") is not None:
            request.type = data["type"]
        if data.get("status") is not None:
            request.status = data["status"]

        if payload.request_items is not None:
            diff = diff_items(list(request.items), payload.request_items)
            for incoming in diff.to_insert:
                request.items.append(RequestItem(name=incoming.name, quantity=incoming.quantity))
            session.flush()
            for item, incoming in diff.to_update:
                item.name = incoming.name
                item.quantity = incoming.quantity
            session.flush()
            for item in diff.to_delete:
                request.items.remove(item)
            logger.info(
                "request items reconciled: id=%s inserted=%s updated=%s deleted=%s",
                request.id, len(diff.to_insert), len(diff.to_update), len(diff.to_delete),
            )

        session.commit()
    except Exception:
        session.rollback()
        raise

    return get_request(session, request_id)


def delete(session: Session, request_id: int) -> None:
    request = get_request(session, request_id)
    session.delete(request)
    session.commit()
    logger.info("request deleted: id=%s", request_id)


def delete_all(session: Session) -> int:
    count = session.scalar(select(func.count(Request.id))) or 0
    session.execute(sa_delete(RequestItem))
    session.execute(sa_delete(Request))
    session.commit()
    logger.info("all requests deleted: count=%s", count)
    return count


# --- maintenance jobs -----------------------------------------------------

def repair_association(session: Session, request_id: int, payload: RepairIn) -> Request:
    """Point a request at an existing employee. Re-running it is a no-op."""
    request = get_request(session, request_id)
    employee_id = resolve_employee_id(session, payload.employee_id, payload.user_id)
    if request.employee_id != employee_id:
        logger.info("request association repaired: id=%s %s -> %s", request.id, request.employee_id, employee_id)
        request.employee_id = employee_id
        session.commit()
    return get_request(session, request_id)


def deduplicate(session: Session) -> tuple[list[int], int]:
    """Keep the newest request per (type, employee, status); delete the rest.

    Returns the removed ids and the number of requests left.
    """
    rows = session.scalars(select(Request).order_by(Request.created_at.desc(), Request.id.desc())).all()
    seen: set[tuple[str, int, str]] = set()
    removed: list[int] = []
    for request in rows:
        key = (request.type, request.employee_id, request.status)
        if key in seen:
            removed.append(request.id)
            session.delete(request)
        else:
            seen.add(key)
    session.commit()

    total_after = len(rows) - len(removed)
    logger.info("deduplicate finished: removed=%s remaining=%s", len(removed), total_after)
    return sorted(removed), total_after
