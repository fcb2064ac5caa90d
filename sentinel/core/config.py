import json
from pathlib import Path
from typing import Annotated, Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    # App
    PROJECT_NAME: str = "Vital Sentinel"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"  # local, dev, prod (from .env)

    # CORS (from .env, comma-separated or a JSON list)
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    # Logging & Sentry
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str | None = None

    # Security (from .env)
    SECRET_KEY: str = "change-me-in-env"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Delivery channels; an unset relay disables that channel at send time
    EMAIL_RELAY_URL: str | None = None
    SMS_RELAY_URL: str | None = None
    DELIVERY_TIMEOUT_SECONDS: float = 10.0
    NOTIFICATION_CONFIG_PATH: Path | None = None

    # Simulated sample feed
    SIMULATOR_ENABLED: bool = False
    SIMULATOR_SUBJECT_ID: str = "default_user"
    SIMULATOR_DEVICE_ID: str = "apple_watch_1"
    SIMULATOR_CRITICAL_PROBABILITY: float = 0.0
    MONITOR_TICK_SECONDS: float = 2.0

    # Rolling history bounds
    SAMPLE_HISTORY_LIMIT: int = 50
    FINDING_HISTORY_LIMIT: int = 20
    ALERT_HISTORY_LIMIT: int = 10
    ROUND_HISTORY_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_cors_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


settings = Settings()
