from .account import Base, Account  # noqa: F401
from .refresh_token import RefreshToken  # noqa: F401
from .department import Department  # noqa: F401
from .employee import Employee  # noqa: F401
from .request import Request, RequestItem  # noqa: F401
from .workflow import Workflow  # noqa: F401
from .mail_log import MailLog  # noqa: F401
