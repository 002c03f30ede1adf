import os
from dataclasses import dataclass
from datetime import timedelta

SESSION_LIFETIME = timedelta(days=1)


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    chat_model: str
    openai_api_key: str
    openai_base_url: str
    chat_timeout_seconds: float

    port: int
    web_workers: int
    web_timeout_seconds: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getint(name: str, default: int) -> int:
    raw = _getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///catalog.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        chat_model=_getenv("CHAT_MODEL", "gpt-4.1-nano"),
        openai_api_key=_getenv("OPENAI_API_KEY", ""),
        openai_base_url=_getenv("OPENAI_BASE_URL", ""),
        chat_timeout_seconds=float(_getenv("CHAT_TIMEOUT_SECONDS", "30")),
        port=_getint("PORT", 8080),
        web_workers=_getint("WEB_CONCURRENCY", 2),
        web_timeout_seconds=_getint("WEB_TIMEOUT_SECONDS", 60),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "CHAT_MODEL": s.chat_model,
        "OPENAI_API_KEY": s.openai_api_key,
        "OPENAI_BASE_URL": s.openai_base_url,
        "CHAT_TIMEOUT_SECONDS": s.chat_timeout_seconds,
        # session cookie
        "SESSION_COOKIE_NAME": "session",
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        "PERMANENT_SESSION_LIFETIME": SESSION_LIFETIME,
        "SESSION_REFRESH_EACH_REQUEST": False,
        # JSON bodies only; nothing large is accepted
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
