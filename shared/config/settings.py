"""
Application settings and configuration.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import find_dotenv

from shared.utils.constants import TABLE_NAMES

# Find .env file automatically
ENV_FILE = find_dotenv(usecwd=True) or ".env"

class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    api_title: str = "Trainer Marketplace API"
    api_description: str = "Trainer signup, listing moderation and search alerts"
    api_version: str = "1.0"
    environment: str = "development"
    debug: bool = False

    #Logging Configuration
    log_level: str = "INFO"
    log_file: str = "logs/marketplace-api.log"
    log_to_console: bool = True

    repository_type: str = "azure_table_storage"  # Options: in_memory, azure_table_storage

    # Azure Storage (Tables)
    table_storage_account_url: str = ""
    trainers_table_name: str = TABLE_NAMES.TRAINERS
    listings_table_name: str = TABLE_NAMES.LISTINGS
    search_alerts_table_name: str = TABLE_NAMES.SEARCH_ALERTS

    # Email
    email_provider: str = "smtp"  # Options: smtp, in_memory
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: int = 30
    email_from: str = "alerts@trainer-marketplace.local"
    email_from_name: str = "Trainer Marketplace"

    # React dev servers
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance
    """
    return Settings()

settings = get_settings()
