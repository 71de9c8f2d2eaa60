"""
Environment configuration for the Haven hostel operations core.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
import secrets
import string
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


def _generate_secret_key() -> str:
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(32))


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = Field(default="Haven Hostel Operations", alias="PROJECT_NAME")
    API_VERSION: str = "v1"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "haven"
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 5
    DB_ECHO: bool = False
    DB_CONNECT_ARGS: Dict[str, Any] = {}

    # Session credentials
    JWT_SECRET_KEY: str = Field(default_factory=_generate_secret_key)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    LOG_JSON: bool = False

    # Business configuration
    HOSTEL_BLOCKS: List[str] = Field(default=["A", "B", "C"])
    NOTICE_PREVIEW_LIMIT: int = 5
    PAYMENT_SIMULATION_DELAY_SECONDS: float = 2.0

    @field_validator('CORS_ORIGINS', 'HOSTEL_BLOCKS', mode='before')
    @classmethod
    def parse_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse comma separated or JSON list strings from the environment"""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
