from datetime import timedelta
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Deployment values, read from QUIZLY_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZLY_",
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SECRET_KEY: str = "change-me-in-production"
    DATABASE_URL: str = f"sqlite:///{BASE_DIR}/quizly.db"

    # set to true behind HTTPS so the session cookie is marked Secure
    COOKIE_SECURE: bool = False

    BCRYPT_ROUNDS: int = 12

    # Optional admin account created on startup (skipped when unset)
    FIRST_ADMIN_EMAIL: str | None = None
    FIRST_ADMIN_PASSWORD: str | None = None
    FIRST_ADMIN_NAME: str = "Administrator"


settings = Settings()

# Sessions
SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(days=30)
AUTH_COOKIE_NAME = "auth_token"
BCRYPT_ROUNDS = settings.BCRYPT_ROUNDS

# Users
ROLES = ("admin", "teacher", "student")
DEFAULT_ROLE = "student"
RESET_PASSWORD_VALUE = "123456789"  # admin "reset password" action, no forced rotation

# Quizzes
TIME_LIMIT_MAX_MINUTES = 300

# Submissions listing
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 10000

# Largest primary key SQLite (and BIGINT columns) can hold
MAX_ROW_ID = 2**63 - 1
