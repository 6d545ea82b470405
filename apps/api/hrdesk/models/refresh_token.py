from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, func

from ..core.security import as_utc, utcnow
from .account import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(primary_key=True)
    token: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    created_by_ip: Mapped[str | None] = mapped_column(String(100), nullable=True)
    revoked: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_by_ip: Mapped[str | None] = mapped_column(String(100), nullable=True)
    replaced_by_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), index=True)

    account = relationship("Account", back_populates="refresh_tokens")

    @property
    def is_expired(self) -> bool:
        return utcnow() >= as_utc(self.expires)

    @property
    def is_active(self) -> bool:
        return self.revoked is None and not self.is_expired
