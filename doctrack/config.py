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
        return "postgresql+psycopg://localhost:5432/doctrack"

    raise ValueError(
        "DATABASE_URL is not set. Set DATABASE_URL for non-development "
        "environments or set ENVIRONMENT=development for local defaults."
    )


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = _resolve_database_url()
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    # Routing
    hub_office_name: str = os.getenv("HUB_OFFICE_NAME", "Records Section")
    tracking_number_prefix: str = os.getenv("TRACKING_NUMBER_PREFIX", "TDC")

    # Classification
    default_category: str = os.getenv("DEFAULT_CATEGORY", "General")
    default_priority: str = os.getenv("DEFAULT_PRIORITY", "Medium")
    classifier_url: str = os.getenv("CLASSIFIER_URL", "")
    classifier_api_key: str = os.getenv("CLASSIFIER_API_KEY", "")
    classifier_timeout: float = float(os.getenv("CLASSIFIER_TIMEOUT", "10"))
    classifier_min_description_length: int = int(
        os.getenv("CLASSIFIER_MIN_DESCRIPTION_LENGTH", "20")
    )

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    celery_result_backend: str = os.getenv(
        "CELERY_RESULT_BACKEND", "redis://localhost:6379/1"
    )
    celery_task_always_eager: bool = _env_bool("CELERY_TASK_ALWAYS_EAGER", "false")

    seed_on_startup: bool = _env_bool("SEED_ON_STARTUP", "true")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Branding
    brand_name: str = os.getenv("BRAND_NAME", "DocTrack")
    brand_tagline: str = os.getenv("BRAND_TAGLINE", "Document Tracking System")


settings = Settings()
