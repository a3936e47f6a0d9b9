from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str | None = None
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    SEED_DEMO_DATA: bool = False

    DRAFT_DATA_DIR: str = "./data/drafts"

    EMAIL_WEBHOOK_URL: str | None = None
    EMAIL_WEBHOOK_TIMEOUT_SECONDS: float = 10.0
    ADMIN_NOTIFICATION_EMAIL: str | None = None

    ADMIN_API_TOKEN: str | None = None

    DEFAULT_SLOT_INTERVAL_MINUTES: int = 30
    BOOKING_WINDOW_DAYS: int = 30
    FALLBACK_SERVICE_LABEL: str = "Nurse Service"


settings = Settings()
