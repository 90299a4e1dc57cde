import os


def _bool_env(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    BASE_DIR = os.path.dirname(os.path.dirname(__file__))
    DATABASE_URL = os.environ.get("DATABASE_URL")
    DATABASE_DIR = None if DATABASE_URL else os.path.join(BASE_DIR, "database")
    DB_PATH = DATABASE_URL or os.path.join(DATABASE_DIR, "synqchain.db")
    DB_AUTO_INIT = _bool_env("DB_AUTO_INIT", False)
    DB_BUSY_TIMEOUT_SECONDS = _int_env("DB_BUSY_TIMEOUT_SECONDS", 30)

    ENV = os.environ.get("FLASK_ENV", "development")
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-synqchain")

    ERP_PROVIDER = os.environ.get("ERP_PROVIDER", "mock")
    MOCK_SEED = _bool_env("MOCK_SEED", False)

    APP_USERS = os.environ.get("APP_USERS", "demo@demo.com:demo:Demo User:admin")
    AUTH_COOKIE_NAME = os.environ.get("AUTH_COOKIE_NAME", "synqchain_auth")
    AUTH_COOKIE_MAX_AGE_SECONDS = _int_env("AUTH_COOKIE_MAX_AGE_SECONDS", 60 * 60 * 24)

    LOG_JSON = _bool_env("LOG_JSON", True)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    RATE_LIMIT_ENABLED = _bool_env("RATE_LIMIT_ENABLED", True)
    RATE_LIMIT_WINDOW_SECONDS = _int_env("RATE_LIMIT_WINDOW_SECONDS", 60)
    RATE_LIMIT_MAX_REQUESTS = _int_env("RATE_LIMIT_MAX_REQUESTS", 300)
    SECURITY_HEADERS_ENABLED = _bool_env("SECURITY_HEADERS_ENABLED", True)

    def __init__(self):
        env = os.environ.get("FLASK_ENV", "development").lower()
        if env == "production" and not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must be set in production.")
        if env == "production" and self.SECRET_KEY == "dev-secret-synqchain":
            raise RuntimeError("SECRET_KEY is not safe for production.")
