"""
Application configuration.
Values are read from environment variables / .env file through
pydantic-settings. Only DATABASE_URL and JWT_SECRET_KEY are mandatory;
every outbound provider (SendGrid, Twilio) degrades to log-only when its
credentials are blank.
"""
import os
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    DATABASE_URL: str

    # Database timeouts (seconds). Ignored for SQLite.
    DB_POOL_TIMEOUT_SECONDS: int = 10
    DB_CONNECT_TIMEOUT_SECONDS: int = 10
    DB_COMMAND_TIMEOUT_SECONDS: int = 30

    # SendGrid Email
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = "noreply@salonqueue.app"
    SENDGRID_FROM_NAME: str = "Salon Queue"
    EMAIL_TIMEOUT_SECONDS: int = 10

    # Twilio SMS (queue "you're up" messages)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""
    SMS_TIMEOUT_SECONDS: int = 10

    # Scheduled reminder trigger
    CRON_SECRET: str = ""
    REMINDER_WINDOW_START_HOURS: int = 23
    REMINDER_WINDOW_END_HOURS: int = 25

    # Scheduling
    SLOT_GRANULARITY_MINUTES: int = 30
    APPOINTMENT_LIST_DAYS_AHEAD: int = 7

    # Optional super admin created on startup
    SEED_ADMIN_EMAIL: str = ""
    SEED_ADMIN_PASSWORD: str = ""

    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. Export it as an environment variable or add it to .env. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )

if not settings.CRON_SECRET:
    logger.warning("CRON_SECRET not configured. Reminder endpoint will reject every request.")
