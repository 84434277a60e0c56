# performance_api/config/settings.py

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "performance-api"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8080"]

    # --- Security ---
    jwt_secret: str = Field(..., min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = Field(7 * 24 * 60, gt=0)
    encryption_key: str = Field(..., min_length=16)
    two_factor_issuer: str = "Brahmaputra Board"
    two_factor_valid_window: int = Field(2, ge=0)

    # --- Sensitive operations ---
    sensitive_window_seconds: int = Field(15 * 60, gt=0)
    sensitive_max_attempts: int = Field(5, gt=0)

    # --- Storage ---
    storage_backend: Literal["memory", "database"] = "memory"
    database_url: Optional[str] = None
    rate_limit_backend: Literal["memory", "redis"] = "memory"
    redis_url: Optional[str] = None
    seed_demo_users: bool = False

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @model_validator(mode="after")
    def check_backends(self) -> "AppSettings":
        if self.storage_backend == "database" and not self.database_url:
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=database")
        if self.rate_limit_backend == "redis" and not self.redis_url:
            raise ValueError("REDIS_URL is required when RATE_LIMIT_BACKEND=redis")
        if self.seed_demo_users and self.environment == "prod":
            raise ValueError("SEED_DEMO_USERS must not be enabled in prod")
        return self


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
