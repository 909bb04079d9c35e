import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8000"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sweets.db")

API_PREFIX = os.getenv("API_PREFIX", "/api").rstrip("/")
CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), default=["*"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(24 * 60)))

# Registration grants the admin role when this text appears in the email.
ADMIN_EMAIL_MARKER = os.getenv("ADMIN_EMAIL_MARKER", "admin")

SEED_ON_STARTUP = _get_bool(os.getenv("SEED_ON_STARTUP"), default=True)
SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@mithai.com")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if SEED_ON_STARTUP and SEED_ADMIN_PASSWORD == "admin123":
        raise RuntimeError("SEED_ADMIN_PASSWORD must be changed in production.")
