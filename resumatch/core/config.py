# resumatch/core/config.py
from __future__ import annotations
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # API
    api_title: str = "ResuMatch API"
    api_version: str = "0.1.0"

    # DB
    database_url: str = "sqlite:///./resumatch.db"

    # Model
    # IMPORTANT: maps to env var GEMINI_API_KEY
    gemini_api_key: Optional[str] = None
    model_name: str = "gemini-2.0-flash"
    model_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    model_timeout_seconds: float = 60.0

    # Matching
    match_batch_size: int = 2                 # env: MATCH_BATCH_SIZE
    match_description_chars: int = 150        # env: MATCH_DESCRIPTION_CHARS
    match_concurrency: int = 1                # env: MATCH_CONCURRENCY

    # Auth / Sessions
    session_secret: str = "change-me"         # env: SESSION_SECRET
    min_password_length: int = 6              # env: MIN_PASSWORD_LENGTH
    admin_emails: List[str] = []              # env: ADMIN_EMAILS='["a@b.c"]'
    admin_email: Optional[str] = None         # env: ADMIN_EMAIL
    admin_password: Optional[str] = None      # env: ADMIN_PASSWORD

    # Uploads / limits
    max_upload_mb: int = 5                    # env: MAX_UPLOAD_MB
    daily_analysis_limit: int = 15            # env: DAILY_ANALYSIS_LIMIT
    unlimited_analyses: bool = False          # env: UNLIMITED_ANALYSES
    redis_url: Optional[str] = None           # env: REDIS_URL
    ip_daily_limit: int = 20                  # env: IP_DAILY_LIMIT

    # Observability
    log_level: str = "INFO"                   # env: LOG_LEVEL
    sentry_dsn: Optional[str] = None          # env: SENTRY_DSN
    posthog_key: Optional[str] = None         # env: POSTHOG_KEY
    posthog_host: str = "https://app.posthog.com"  # env: POSTHOG_HOST

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        protected_namespaces=(),
    )

settings = Settings()
