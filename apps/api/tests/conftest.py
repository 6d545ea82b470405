import os
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TESTS_DIR = Path(__file__).resolve().parent

# Must be set before hrdesk is imported: config reads the environment at import time.
os.environ["DATABASE_URL"] = f"sqlite:///{TESTS_DIR / 'test_hrdesk.db'}"
os.environ.setdefault("JWT_SECRET", "ci-test-secret-with-at-least-32-bytes")
os.environ["SMTP_HOST"] = ""
os.environ["AUTH_DISABLED"] = "false"

from hrdesk.main import app  # noqa: E402
from hrdesk.db import SessionLocal, engine  # noqa: E402
from hrdesk.models import Account, Base, Department, Employee  # noqa: E402
from hrdesk.core.config import settings  # noqa: E402
from hrdesk.core.recent_submissions import RecentSubmissions  # noqa: E402
from hrdesk.core.roles import Role, STATUS_ACTIVE  # noqa: E402
from hrdesk.core.security import create_access_token, hash_password, utcnow  # noqa: E402

DEFAULT_PASSWORD = "secret123"


def make_auth_headers(account: Account) -> dict:
    token = create_access_token(account.id, account.email, account.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def prepare_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    app.state.recent_submissions = RecentSubmissions(settings.duplicate_window_seconds)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session():
    with SessionLocal() as s:
        yield s


@pytest.fixture
def make_account(session):
    counter = {"n": 0}

    def _make(role: str = Role.User, email: str | None = None, password: str = DEFAULT_PASSWORD,
              verified: bool = True, status: str = STATUS_ACTIVE) -> Account:
        counter["n"] += 1
        account = Account(
            title="Mr",
            first_name=f"First{counter['n']}",
            last_name="Tester",
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            role=role,
            status=status,
            verified=utcnow() if verified else None,
        )
        session.add(account)
        session.commit()
        session.refresh(account)
        return account

    return _make


@pytest.fixture
def admin(make_account):
    return make_account(role=Role.Admin, email="admin@example.com")


@pytest.fixture
def admin_headers(admin):
    return make_auth_headers(admin)


@pytest.fixture
def user(make_account):
    return make_account(role=Role.User, email="user@example.com")


@pytest.fixture
def user_headers(user):
    return make_auth_headers(user)


@pytest.fixture
def make_department(session):
    def _make(name: str = "Engineering") -> Department:
        department = Department(name=name, description=f"{name} department")
        session.add(department)
        session.commit()
        session.refresh(department)
        return department

    return _make


@pytest.fixture
def make_employee(session, make_account):
    counter = {"n": 0}

    def _make(account: Account | None = None, department: Department | None = None) -> Employee:
        counter["n"] += 1
        account = account or make_account()
        employee = Employee(
            employee_no=f"EMP{counter['n']:03d}",
            position="Developer",
            department_id=department.id if department else None,
            hire_date=date(2024, 1, 15),
            status=STATUS_ACTIVE,
            account_id=account.id,
        )
        session.add(employee)
        session.commit()
        session.refresh(employee)
        return employee

    return _make
