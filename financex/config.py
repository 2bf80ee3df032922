"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./financex.db"
    auto_create_tables: bool = True

    # Service
    service_name: str = "financex-api"
    log_level: str = "INFO"

    # Debts
    nearly_paid_threshold: float = 80.0  # Percent paid from which a debt counts as nearly paid


settings = Settings()
