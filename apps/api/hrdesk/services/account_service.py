"""Accounts, credentials and refresh-token lifecycle."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import Conflict, Forbidden, InvalidCredentials, InvalidToken, NotFound, Unauthenticated
from ..core.roles import Role, STATUS_ACTIVE, STATUS_INACTIVE
from ..core.security import (
    as_utc,
    create_access_token,
    hash_password,
    random_token_string,
    utcnow,
    verify_password,
)
from ..models.account import Account
from ..models.refresh_token import RefreshToken
from ..schemas.account import AccountCreateIn, AccountUpdateIn
from ..schemas.auth import RegisterIn
from .mail_events import notify_password_reset, notify_verification

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "Please check your email for password reset instructions"
RESEND_VERIFICATION_MESSAGE = "If an unverified account exists with this email, a verification link will be sent."


@dataclass
class AuthResult:
    account: Account
    access_token: str
    refresh_token: str


def _issue_access_token(account: Account) -> str:
    return create_access_token(account.id, account.email, account.role, account.employee_pk)


def _new_refresh_token(account: Account, ip: str | None) -> RefreshToken:
    return RefreshToken(
        account_id=account.id,
        token=random_token_string(),
        expires=utcnow() + timedelta(days=settings.refresh_token_days),
        created_by_ip=ip,
    )


def _find_by_email(session: Session, email: str) -> Account | None:
    return session.scalar(select(Account).where(func.lower(Account.email) == email.lower()))


def _active_refresh_token(session: Session, token: str) -> RefreshToken:
    rt = session.scalar(select(RefreshToken).where(RefreshToken.token == token))
    if not rt or not rt.is_active:
        raise InvalidToken()
    return rt


def get_account(session: Session, account_id: int) -> Account:
    account = session.get(Account, account_id)
    if not account:
        raise NotFound("Account not found")
    return account


# --- authentication -------------------------------------------------------

def authenticate(session: Session, email: str, password: str, ip: str | None) -> AuthResult:
    account = _find_by_email(session, email)
    if not account:
        raise NotFound("Email does not exist")
    if not verify_password(password, account.password_hash):
        raise InvalidCredentials()
    if not account.is_verified:
        raise Unauthenticated("Your email is not verified. Please check your email for verification instructions.")
    if account.status != STATUS_ACTIVE:
        raise Forbidden("Your account is inactive or suspended. Please contact support for assistance.")

    rt = _new_refresh_token(account, ip)
    session.add(rt)
    session.commit()
    logger.info("account authenticated: id=%s", account.id)
    return AuthResult(account=account, access_token=_issue_access_token(account), refresh_token=rt.token)


def refresh_token(session: Session, token: str, ip: str | None) -> AuthResult:
    current = _active_refresh_token(session, token)
    account = current.account

    replacement = _new_refresh_token(account, ip)
    current.revoked = utcnow()
    current.revoked_by_ip = ip
    current.replaced_by_token = replacement.token
    session.add(replacement)
    session.commit()
    logger.info("refresh token rotated: account=%s", account.id)
    return AuthResult(account=account, access_token=_issue_access_token(account), refresh_token=replacement.token)


def find_refresh_token(session: Session, token: str) -> RefreshToken:
    return _active_refresh_token(session, token)


def revoke_token(session: Session, token: str, ip: str | None) -> None:
    rt = _active_refresh_token(session, token)
    rt.revoked = utcnow()
    rt.revoked_by_ip = ip
    session.commit()
    logger.info("refresh token revoked: account=%s", rt.account_id)


def list_refresh_tokens(session: Session, account_id: int) -> list[RefreshToken]:
    get_account(session, account_id)
    stmt = select(RefreshToken).where(RefreshToken.account_id == account_id).order_by(RefreshToken.id.desc())
    return list(session.scalars(stmt).all())


def revoke_all_refresh_tokens(session: Session, account_id: int, ip: str | None) -> int:
    get_account(session, account_id)
    stmt = select(RefreshToken).where(RefreshToken.account_id == account_id, RefreshToken.revoked.is_(None))
    now = utcnow()
    count = 0
    for rt in session.scalars(stmt).all():
        rt.revoked = now
        rt.revoked_by_ip = ip
        count += 1
    session.commit()
    return count


# --- registration & verification -----------------------------------------

def register(session: Session, params: RegisterIn) -> Account:
    if _find_by_email(session, params.email):
        raise Conflict("Email already registered")

    # The very first account bootstraps the system as a verified Admin.
    is_first = session.scalar(select(func.count(Account.id))) == 0

    account = Account(
        title=params.title,
        first_name=params.first_name,
        last_name=params.last_name,
        email=params.email,
        password_hash=hash_password(params.password),
    )
    if is_first:
        account.role = Role.Admin
        account.status = STATUS_ACTIVE
        account.verified = utcnow()
    else:
        account.role = Role.User
        account.status = STATUS_INACTIVE
        account.verification_token = random_token_string()

    session.add(account)
    session.commit()
    session.refresh(account)
    logger.info("account registered: id=%s role=%s", account.id, account.role)

    if not is_first:
        notify_verification(account)
    return account


def verify_email(session: Session, token: str) -> Account:
    account = session.scalar(select(Account).where(Account.verification_token == token))
    if not account:
        raise InvalidToken("Verification failed")
    account.verified = utcnow()
    account.verification_token = None
    account.status = STATUS_ACTIVE
    session.commit()
    return account


def resend_verification(session: Session, email: str) -> str:
    account = _find_by_email(session, email)
    if account and not account.is_verified:
        account.verification_token = random_token_string()
        session.commit()
        notify_verification(account)
    return RESEND_VERIFICATION_MESSAGE


# --- password reset -------------------------------------------------------

def forgot_password(session: Session, email: str) -> str:
    account = _find_by_email(session, email)
    if not account:
        return FORGOT_PASSWORD_MESSAGE

    account.reset_token = random_token_string()
    account.reset_token_expires = utcnow() + timedelta(hours=settings.reset_token_hours)
    session.commit()
    notify_password_reset(account)
    return FORGOT_PASSWORD_MESSAGE


def validate_reset_token(session: Session, token: str) -> Account:
    account = session.scalar(select(Account).where(Account.reset_token == token))
    if not account or not account.reset_token_expires or as_utc(account.reset_token_expires) <= utcnow():
        raise InvalidToken()
    return account


def reset_password(session: Session, token: str, password: str) -> None:
    account = validate_reset_token(session, token)
    account.password_hash = hash_password(password)
    account.password_reset = utcnow()
    account.reset_token = None
    account.reset_token_expires = None
    session.commit()
    logger.info("password reset: account=%s", account.id)


def change_password(session: Session, account: Account, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, account.password_hash):
        raise InvalidCredentials("Current password is incorrect")
    account.password_hash = hash_password(new_password)
    session.commit()


# --- CRUD -----------------------------------------------------------------

def get_all(session: Session) -> list[Account]:
    return list(session.scalars(select(Account).order_by(Account.id.asc())).all())


def create(session: Session, params: AccountCreateIn) -> Account:
    if _find_by_email(session, params.email):
        raise Conflict(f'Email "{params.email}" is already registered')

    account = Account(
        title=params.title,
        first_name=params.first_name,
        last_name=params.last_name,
        email=params.email,
        role=params.role,
        password_hash=hash_password(params.password),
    )
    if params.verified:
        account.verified = utcnow()
        account.status = STATUS_ACTIVE
    else:
        account.status = params.status or STATUS_INACTIVE
        account.verification_token = random_token_string()

    session.add(account)
    session.commit()
    session.refresh(account)
    logger.info("account created: id=%s role=%s", account.id, account.role)

    if not params.verified:
        notify_verification(account)
    return account


def update(session: Session, account_id: int, params: AccountUpdateIn) -> Account:
    account = get_account(session, account_id)
    data = params.model_dump(exclude_unset=True)
    data.pop("confirm_password", None)

    email = data.get("email")
    if email and email.lower() != account.email.lower() and _find_by_email(session, email):
        raise Conflict(f'Email "{email}" is already taken')

    password = data.pop("password", None)
    if password:
        account.password_hash = hash_password(password)

    for field, value in data.items():
        if value is None and field in ("first_name", "last_name", "email", "role", "status"):
            continue
        setattr(account, field, value)

    session.commit()
    session.refresh(account)
    return account


def toggle_status(session: Session, account_id: int) -> Account:
    account = get_account(session, account_id)
    account.status = STATUS_INACTIVE if account.status == STATUS_ACTIVE else STATUS_ACTIVE
    session.commit()
    session.refresh(account)
    return account


def delete(session: Session, account_id: int) -> None:
    account = get_account(session, account_id)
    session.delete(account)
    session.commit()
    logger.info("account deleted: id=%s", account_id)
