from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator, model_validator

from .base import CamelModel, bcrypt_limit

RoleName = Literal["Admin", "User"]
StatusName = Literal["Active", "Inactive"]


class AccountSummaryOut(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str


class AccountOut(CamelModel):
    id: int
    title: str | None = None
    first_name: str
    last_name: str
    email: str
    role: str
    status: str
    is_verified: bool = False
    employee_pk: int | None = Field(default=None, alias="employeeId")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountCreateIn(CamelModel):
    title: str | None = Field(default=None, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str
    role: RoleName = "User"
    status: StatusName | None = None
    verified: bool = False

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str) -> str:
        return bcrypt_limit(v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class AccountUpdateIn(CamelModel):
    title: str | None = Field(default=None, max_length=50)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=72)
    confirm_password: str | None = None
    role: RoleName | None = None
    status: StatusName | None = None

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str | None) -> str | None:
        return bcrypt_limit(v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.password is not None and self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class ToggleStatusOut(CamelModel):
    message: str
    account: AccountOut


class RefreshTokenOut(CamelModel):
    id: int
    token: str
    expires: datetime
    created_at: datetime | None = None
    created_by_ip: str | None = None
    revoked: datetime | None = None
    revoked_by_ip: str | None = None
    replaced_by_token: str | None = None
    is_expired: bool
    is_active: bool
