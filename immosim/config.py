"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("IMMOSIM_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Settings read from IMMOSIM_* environment variables or the env file."""

    # App settings
    app_name: str = "Immo Simulator"
    debug: bool = False
    log_level: str = "INFO"
    env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Calculations
    notary_fee_rate: float = 0.075

    class Config:
        env_prefix = "IMMOSIM_"
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
