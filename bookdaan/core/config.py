import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bookdaan.db")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:5173"))

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Passwordless login by email, meant for local development only.
DEMO_LOGIN_ENABLED = _get_bool(os.getenv("DEMO_LOGIN_ENABLED"), default=True)
ADMIN_EMAILS = {email.lower() for email in _get_list(os.getenv("ADMIN_EMAILS"))}

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
MAX_PAGE = int(os.getenv("MAX_PAGE", "100000"))
RECOMMENDATION_LIMIT = int(os.getenv("RECOMMENDATION_LIMIT", "5"))
CO2_KG_PER_BOOK = float(os.getenv("CO2_KG_PER_BOOK", "2.1"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if DEMO_LOGIN_ENABLED:
        raise RuntimeError("DEMO_LOGIN_ENABLED must be off in production.")
