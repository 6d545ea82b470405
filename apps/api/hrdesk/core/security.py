from datetime import datetime, timedelta, timezone
import secrets

from passlib.context import CryptContext
import jwt

from .config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALGORITHM = "HS256"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def hash_password(pw: str) -> str:
    return pwd_context.hash(pw)


def verify_password(pw: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(pw, hashed)
    except (ValueError, TypeError):
        return False


def random_token_string() -> str:
    return secrets.token_hex(40)


def create_access_token(
    account_id: int,
    email: str,
    role: str,
    employee_id: int | None = None,
    expires_min: int | None = None,
) -> str:
    now = utcnow()
    minutes = settings.jwt_expires_min if expires_min is None else expires_min
    payload = {
        "sub": str(account_id),
        "id": account_id,
        "email": email,
        "role": role,
        "employeeId": employee_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Raises ``jwt.ExpiredSignatureError`` or ``jwt.InvalidTokenError``."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
