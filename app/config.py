import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _resolve_database_url() -> str:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    environment = os.getenv("ENVIRONMENT", "").strip().lower()
    if environment == "development":
        return "postgresql+psycopg://localhost:5434/dotmac_discipline"

    raise ValueError(
        "DATABASE_URL is not set. Set DATABASE_URL for non-development "
        "environments or set ENVIRONMENT=development for local defaults."
    )


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = _resolve_database_url()
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Discipline policy
    organization_timezone: str = os.getenv(
        "ORGANIZATION_TIMEZONE", "Africa/Johannesburg"
    )
    review_auto_satisfy_grace_days: int = int(
        os.getenv("REVIEW_AUTO_SATISFY_GRACE_DAYS", "7")
    )
    review_due_soon_days: int = int(os.getenv("REVIEW_DUE_SOON_DAYS", "7"))
    review_reminder_days: int = int(os.getenv("REVIEW_REMINDER_DAYS", "3"))
    default_validity_months: int = int(os.getenv("DEFAULT_VALIDITY_MONTHS", "6"))

    # Celery
    celery_broker_url: str = os.getenv(
        "CELERY_BROKER_URL", "redis://localhost:6379/0"
    )
    celery_result_backend: str = os.getenv(
        "CELERY_RESULT_BACKEND", "redis://localhost:6379/1"
    )
    celery_task_always_eager: bool = _env_bool("CELERY_TASK_ALWAYS_EAGER")
    review_check_hour: int = int(os.getenv("REVIEW_CHECK_HOUR", "8"))


settings = Settings()
