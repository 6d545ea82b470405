from .account import AccountOut
from .base import CamelModel
from .employee import EmployeeOut


class MeOut(CamelModel):
    account: AccountOut
    employee: EmployeeOut | None = None
