from pydantic import BaseModel
import os


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hrdesk.db")
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_expires_min: int = int(os.getenv("JWT_EXPIRES_MIN", "15"))
    refresh_token_days: int = int(os.getenv("REFRESH_TOKEN_DAYS", "7"))
    reset_token_hours: int = int(os.getenv("RESET_TOKEN_HOURS", "24"))
    duplicate_window_seconds: float = float(os.getenv("DUPLICATE_WINDOW_SECONDS", "5"))
    cookie_secure: bool = _flag("COOKIE_SECURE")
    # Disables every authorization check. Development only.
    auth_disabled: bool = _flag("AUTH_DISABLED")
    smtp_host: str = os.getenv("SMTP_HOST", "")
    smtp_port: int = int(os.getenv("SMTP_PORT", "25"))
    smtp_from: str = os.getenv("SMTP_FROM", "")
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASSWORD", "")
    app_base_url: str = os.getenv("APP_BASE_URL", "http://localhost:5173")

settings = Settings()
