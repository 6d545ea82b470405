from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Date, DateTime, ForeignKey, func

from ..core.roles import STATUS_ACTIVE
from .account import Base


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    # External employee code, "employeeId" on the wire.
    employee_no: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    position: Mapped[str] = mapped_column(String(100))
    department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id", ondelete="SET NULL"), nullable=True, index=True
    )
    hire_date: Mapped[date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(20), default=STATUS_ACTIVE)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    account = relationship("Account", back_populates="employee")
    department = relationship("Department", back_populates="employees")
    requests = relationship("Request", back_populates="employee", cascade="all, delete-orphan")
    workflows = relationship("Workflow", back_populates="employee", cascade="all, delete-orphan")
