from datetime import datetime

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, func

from ..core.roles import Role, STATUS_ACTIVE


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str | None] = mapped_column(String(50), nullable=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default=Role.User)  # Admin/User
    status: Mapped[str] = mapped_column(String(20), default=STATUS_ACTIVE)  # Active/Inactive

    verification_token: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    verified: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reset_token: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    reset_token_expires: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    password_reset: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship(
        "Employee",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="RefreshToken.id.desc()",
    )

    @property
    def is_verified(self) -> bool:
        return self.verified is not None

    @property
    def employee_pk(self) -> int | None:
        return self.employee.id if self.employee else None

    def active_refresh_token(self, token: str):
        return next((rt for rt in self.refresh_tokens if rt.token == token and rt.is_active), None)
