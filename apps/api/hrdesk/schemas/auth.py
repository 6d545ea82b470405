from pydantic import EmailStr, Field, field_validator, model_validator

from .account import AccountOut
from .base import CamelModel, bcrypt_limit


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def login_password_bytes_le_72(cls, v: str) -> str:
        return bcrypt_limit(v)


class AuthOut(CamelModel):
    user: AccountOut
    token: str
    token_type: str = "bearer"


class RegisterIn(CamelModel):
    title: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str
    accept_terms: bool = False

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str) -> str:
        return bcrypt_limit(v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        if not self.accept_terms:
            raise ValueError("Terms must be accepted")
        return self


class RegisterOut(CamelModel):
    message: str
    user: AccountOut


class TokenIn(CamelModel):
    token: str = Field(min_length=1)


class OptionalTokenIn(CamelModel):
    token: str | None = None


class EmailIn(CamelModel):
    email: EmailStr


class ResetPasswordIn(CamelModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str) -> str:
        return bcrypt_limit(v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class ChangePasswordIn(CamelModel):
    current_password: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str

    @field_validator("password")
    @classmethod
    def password_bytes_le_72(cls, v: str) -> str:
        return bcrypt_limit(v)

    @model_validator(mode="after")
    def check_confirmation(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self
