from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_bytes: int
    document_db_path: str
    blob_storage_dir: str
    public_base_url: str
    strict_section_fidelity: bool
    ai_max_retries: int
    ai_retry_base_delay_s: float


def load_settings() -> Settings:
    return Settings(
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        max_upload_bytes=max(1, _get_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        document_db_path=_get_env("DOCUMENT_DB_PATH", "data/resumes.db") or "data/resumes.db",
        blob_storage_dir=_get_env("BLOB_STORAGE_DIR", "data/blobs") or "data/blobs",
        public_base_url=(_get_env("PUBLIC_BASE_URL", "http://localhost:8000") or "").rstrip("/"),
        strict_section_fidelity=_get_env_bool("STRICT_SECTION_FIDELITY", False),
        ai_max_retries=max(1, _get_env_int("AI_MAX_RETRIES", 3)),
        ai_retry_base_delay_s=max(0.0, _get_env_float("AI_RETRY_BASE_DELAY_S", 1.0)),
    )


settings = load_settings()
