from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..core.current_user import get_current_user, require_admin
from ..core.errors import Forbidden
from ..core.roles import Role
from ..db import get_session
from ..models.account import Account
from ..schemas.account import (
    AccountCreateIn,
    AccountOut,
    AccountUpdateIn,
    RefreshTokenOut,
    ToggleStatusOut,
)
from ..schemas.auth import ChangePasswordIn
from ..schemas.base import MessageOut
from ..services import account_service

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


def require_owner_or_admin(account_id: int, user: Account) -> None:
    if account_id != user.id and user.role != Role.Admin:
        raise Forbidden()


@router.get("", response_model=list[AccountOut])
def list_accounts(session: Session = Depends(get_session), user: Account = Depends(require_admin)):
    return account_service.get_all(session)


@router.post("", response_model=AccountOut, status_code=201)
def create_account(
    payload: AccountCreateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    return account_service.create(session, payload)


@router.get("/{account_id}", response_model=AccountOut)
def get_account(
    account_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    require_owner_or_admin(account_id, user)
    return account_service.get_account(session, account_id)


@router.put("/{account_id}", response_model=AccountOut)
def update_account(
    account_id: int,
    payload: AccountUpdateIn,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    require_owner_or_admin(account_id, user)
    # Only admins may change role or status.
    if user.role != Role.Admin and (payload.role is not None or payload.status is not None):
        raise Forbidden("Only administrators can change role or status")
    return account_service.update(session, account_id, payload)


@router.delete("/{account_id}", response_model=MessageOut)
def delete_account(
    account_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    require_owner_or_admin(account_id, user)
    account_service.delete(session, account_id)
    return MessageOut(message="Account deleted successfully")


@router.put("/{account_id}/toggle-status", response_model=ToggleStatusOut)
def toggle_status(
    account_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(require_admin),
):
    account = account_service.toggle_status(session, account_id)
    return ToggleStatusOut(
        message=f"Account status changed to {account.status}",
        account=AccountOut.model_validate(account),
    )


@router.post("/{account_id}/change-password", response_model=MessageOut)
def change_password(
    account_id: int,
    payload: ChangePasswordIn,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    if account_id != user.id:
        raise Forbidden("You can only change your own password")
    account_service.change_password(session, user, payload.current_password, payload.password)
    return MessageOut(message="Password changed successfully")


@router.get("/{account_id}/refresh-tokens", response_model=list[RefreshTokenOut])
def list_refresh_tokens(
    account_id: int,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    require_owner_or_admin(account_id, user)
    return account_service.list_refresh_tokens(session, account_id)


@router.post("/{account_id}/revoke-all-tokens", response_model=MessageOut)
def revoke_all_tokens(
    account_id: int,
    request: Request,
    session: Session = Depends(get_session),
    user: Account = Depends(get_current_user),
):
    require_owner_or_admin(account_id, user)
    ip = request.client.host if request.client else None
    count = account_service.revoke_all_refresh_tokens(session, account_id, ip)
    return MessageOut(message=f"{count} token(s) revoked")
