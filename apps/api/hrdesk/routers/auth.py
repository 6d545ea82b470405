from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.current_user import get_current_user
from ..core.errors import Forbidden, ValidationFailed
from ..core.roles import Role
from ..db import get_session
from ..models.account import Account
from ..schemas.account import AccountOut
from ..schemas.auth import (
    AuthOut,
    EmailIn,
    LoginIn,
    OptionalTokenIn,
    RegisterIn,
    RegisterOut,
    ResetPasswordIn,
    TokenIn,
)
from ..schemas.base import MessageOut
from ..services import account_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

REFRESH_TOKEN_COOKIE = "refreshToken"


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        token,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
        max_age=int(timedelta(days=settings.refresh_token_days).total_seconds()),
    )


def _auth_out(result: account_service.AuthResult) -> AuthOut:
    return AuthOut(user=AccountOut.model_validate(result.account), token=result.access_token)


@router.post("/authenticate", response_model=AuthOut)
@router.post("/login", response_model=AuthOut)
def authenticate(payload: LoginIn, request: Request, response: Response, session: Session = Depends(get_session)):
    result = account_service.authenticate(session, payload.email, payload.password, _client_ip(request))
    _set_refresh_cookie(response, result.refresh_token)
    return _auth_out(result)


@router.post("/refresh-token", response_model=AuthOut)
def refresh_token(
    request: Request,
    response: Response,
    payload: OptionalTokenIn | None = None,
    session: Session = Depends(get_session),
):
    token = (payload.token if payload else None) or request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not token:
        raise ValidationFailed("Token is required")
    result = account_service.refresh_token(session, token, _client_ip(request))
    _set_refresh_cookie(response, result.refresh_token)
    return _auth_out(result)


@router.post("/revoke-token", response_model=MessageOut)
def revoke_token(
    request: Request,
    payload: OptionalTokenIn | None = None,
    session: Session = Depends(get_session),
    account: Account = Depends(get_current_user),
):
    token = (payload.token if payload else None) or request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not token:
        raise ValidationFailed("Token is required")

    rt = account_service.find_refresh_token(session, token)
    if rt.account_id != account.id and account.role != Role.Admin:
        raise Forbidden()
    account_service.revoke_token(session, token, _client_ip(request))
    return MessageOut(message="Token revoked")


@router.post("/logout", response_model=MessageOut)
def logout(
    request: Request,
    response: Response,
    session: Session = Depends(get_session),
    account: Account = Depends(get_current_user),
):
    token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if token and account.active_refresh_token(token):
        account_service.revoke_token(session, token, _client_ip(request))
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return MessageOut(message="Logged out")


@router.post("/register", response_model=RegisterOut, status_code=201)
def register(payload: RegisterIn, session: Session = Depends(get_session)):
    account = account_service.register(session, payload)
    if account.is_verified:
        message = "Registration successful. You can now log in."
    else:
        message = "Registration successful, please check your email for verification instructions"
    return RegisterOut(message=message, user=AccountOut.model_validate(account))


@router.post("/verify-email", response_model=MessageOut)
def verify_email(payload: TokenIn, session: Session = Depends(get_session)):
    account_service.verify_email(session, payload.token)
    return MessageOut(message="Verification successful, you can now login")


@router.post("/resend-verification", response_model=MessageOut)
def resend_verification(payload: EmailIn, session: Session = Depends(get_session)):
    return MessageOut(message=account_service.resend_verification(session, payload.email))


@router.post("/forgot-password", response_model=MessageOut)
def forgot_password(payload: EmailIn, session: Session = Depends(get_session)):
    return MessageOut(message=account_service.forgot_password(session, payload.email))


@router.post("/validate-reset-token", response_model=MessageOut)
def validate_reset_token(payload: TokenIn, session: Session = Depends(get_session)):
    account_service.validate_reset_token(session, payload.token)
    return MessageOut(message="Token is valid")


@router.post("/reset-password", response_model=MessageOut)
def reset_password(payload: ResetPasswordIn, session: Session = Depends(get_session)):
    account_service.reset_password(session, payload.token, payload.password)
    return MessageOut(message="Password reset successful, you can now login")
