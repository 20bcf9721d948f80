from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
import os
from functools import lru_cache
from typing import List
import secrets


class Settings(BaseSettings):
    # App settings
    APP_NAME: str = "Tendering API"
    API_PREFIX: str = "/api"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    VERSION: str = "0.1.0"

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tendering.db")
    DB_ECHO: bool = os.getenv("DB_ECHO", "False").lower() == "true"

    # Security settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", secrets.token_hex(32))
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))  # 24 hours
    ALGORITHM: str = "HS256"

    # CORS settings
    CORS_ORIGINS: List[str] = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment name
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    model_config = ConfigDict(
        # Later files win: .env.{ENVIRONMENT} overrides .env
        env_file = (".env", f".env.{os.getenv('ENVIRONMENT', 'development')}"),
        case_sensitive = True,
        extra = "ignore"
    )

    @field_validator('ENVIRONMENT', mode='before')
    def set_environment(cls, v):
        """Get environment from ENV variable or use default"""
        return os.getenv('ENVIRONMENT', v)

    @field_validator('LOG_LEVEL', mode='after')
    def normalize_log_level(cls, v):
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached settings instance to avoid loading .env file on each request
    """
    return Settings()


settings = get_settings()
