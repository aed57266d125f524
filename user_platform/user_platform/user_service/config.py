"""
Configuration management for the user service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

DEFAULT_SECRET_KEY = "change-this-secret-in-prod"


class Settings(BaseSettings):
    """User service configuration loaded from environment variables"""

    APP_ENV: str = "development"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"

    # Token signing
    JWT_SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Password hashing work factor
    PASSWORD_HASH_SCHEME: str = "pbkdf2_sha256"
    PASSWORD_HASH_ROUNDS: int = 29000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        frozen=True,
    )


def validate_runtime_config(config: Settings) -> None:
    if config.APP_ENV.lower() == "production" and config.JWT_SECRET_KEY == DEFAULT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")


# Global settings instance
settings = Settings()
