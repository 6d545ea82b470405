from fastapi import APIRouter, Depends

from ..core.current_user import get_current_user
from ..models.account import Account
from ..schemas.account import AccountOut
from ..schemas.employee import EmployeeOut
from ..schemas.me import MeOut

router = APIRouter(prefix="/api", tags=["me"])


@router.get("/me", response_model=MeOut)
def me(account: Account = Depends(get_current_user)):
    employee = account.employee
    return MeOut(
        account=AccountOut.model_validate(account),
        employee=EmployeeOut.model_validate(employee) if employee else None,
    )
