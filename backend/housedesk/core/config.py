"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    APP_NAME: str = "Housing Requests Desk"
    ENV: str = "development"

    DATABASE_URL: str = "postgresql+psycopg://postgres@localhost:5432/housedesk"

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    COOKIE_NAME: str = "hd_access"
    LOG_LEVEL: str = "INFO"

    PASSWORD_CODE_EXPIRE_MINUTES: int = 60

    CORS_ORIGINS: str = "http://localhost:3000"
    # text classifier service
    CLASSIFIER_API_URL: str = "http://localhost:8081"
    CLASSIFIER_TIMEOUT_SECONDS: float = 5.0
    # fixed seed makes operator selection reproducible; unset in production
    ASSIGNMENT_RANDOM_SEED: int | None = None

    model_config = SettingsConfigDict(env_file=str(BASE_DIR / ".env"), env_file_encoding="utf-8")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def validate_runtime_security(self) -> None:
        if self.ENV != "development" and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set outside development")


settings = Settings()
