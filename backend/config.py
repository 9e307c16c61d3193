"""
Configuration management for the Tea Leaf Collection API
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Tea Leaf Collection API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = ""  # empty: DEBUG when DEBUG is on, else INFO

    # Database
    DATABASE_URL: str = "sqlite:///./leaf_collection.db"
    CREATE_TABLES: bool = True

    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # seconds

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Write-path defaults for rows coming from the mobile app
    MOBILE_SOURCE_MODE: str = "App"
    DEFAULT_HOST_ID: str = "MOBILE_APP"
    DEFAULT_USER_NAME: str = "mobile_user"

    # Reporting
    SUPPLIER_SEARCH_LIMIT: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
