from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    ENVIRONMENT: str = Field(default="production")
    FIRESTORE_PROJECT_ID: str = Field(default="")
    LOG_LEVEL: str = Field(default="INFO")

    # Firebase Authentication (ID token audience == Firebase project id)
    FIREBASE_PROJECT_ID: str = Field(default="")
    SESSION_TTL_SEC: int = Field(default=12 * 60 * 60)

    # Browser access
    CORS_ALLOW_ORIGINS: str = Field(default="*")  # comma-separated

    # Live view
    STREAM_KEEPALIVE_SEC: float = Field(default=15.0)
    SEARCH_MAX_RESULTS: int = Field(default=200)

    @property
    def auth_audience(self) -> str:
        return self.FIREBASE_PROJECT_ID or self.FIRESTORE_PROJECT_ID

    @property
    def cors_origins(self) -> list[str]:
        return [x.strip() for x in (self.CORS_ALLOW_ORIGINS or "").split(",") if x.strip()]


settings = Settings()
