from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:5174"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    database_url: str
    db_create_all: bool
    access_token_secret: str
    refresh_token_secret: str
    access_token_ttl_minutes: int
    refresh_token_ttl_days: int
    login_max_attempts: int
    login_lock_minutes: int
    cors_origins: tuple[str, ...]
    google_client_id: str
    gemini_api_key: str
    gemini_model: str
    gemini_api_base: str
    gemini_timeout_seconds: float

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def refresh_cookie_max_age_seconds(self) -> int:
        return self.refresh_token_ttl_days * 24 * 60 * 60


def get_settings() -> Settings:
    settings = Settings(
        app_env=(_env("APP_ENV", "development") or "development").strip().lower(),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        database_url=_env("DATABASE_URL", "sqlite:///./mediscan.db") or "",
        db_create_all=_bool("DB_CREATE_ALL", True),
        access_token_secret=_env("ACCESS_TOKEN_SECRET", "") or "",
        refresh_token_secret=_env("REFRESH_TOKEN_SECRET", "") or "",
        access_token_ttl_minutes=int(_env("ACCESS_TOKEN_TTL_MINUTES", "15")),
        refresh_token_ttl_days=int(_env("REFRESH_TOKEN_TTL_DAYS", "7")),
        login_max_attempts=int(_env("LOGIN_MAX_ATTEMPTS", "5")),
        login_lock_minutes=int(_env("LOGIN_LOCK_MINUTES", "60")),
        cors_origins=_csv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        google_client_id=_env("GOOGLE_CLIENT_ID", "") or "",
        gemini_api_key=_env("GEMINI_API_KEY", "") or "",
        gemini_model=_env("GEMINI_MODEL", "gemini-2.0-flash") or "",
        gemini_api_base=_env(
            "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
        )
        or "",
        gemini_timeout_seconds=float(_env("GEMINI_TIMEOUT_SECONDS", "60")),
    )
    validate_settings(settings)
    return settings


def validate_settings(settings: Settings) -> None:
    if settings.app_env not in {"development", "production", "test"}:
        raise ValueError("APP_ENV must be one of: development, production, test.")
    if not settings.database_url:
        raise ValueError("DATABASE_URL is required.")
    if not settings.access_token_secret or not settings.refresh_token_secret:
        raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET are required.")
    if settings.access_token_secret == settings.refresh_token_secret:
        raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ.")
    if settings.access_token_ttl_minutes <= 0:
        raise ValueError("ACCESS_TOKEN_TTL_MINUTES must be positive.")
    if settings.refresh_token_ttl_days <= 0:
        raise ValueError("REFRESH_TOKEN_TTL_DAYS must be positive.")
    if settings.login_max_attempts <= 0:
        raise ValueError("LOGIN_MAX_ATTEMPTS must be positive.")
    if settings.login_lock_minutes <= 0:
        raise ValueError("LOGIN_LOCK_MINUTES must be positive.")
