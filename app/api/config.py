"""
API server settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """API settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # basics
    SERVICE_NAME: str = "fishspot-api"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 4000

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # create missing tables on startup
    AUTO_CREATE_TABLES: bool = True


settings = Settings()
