"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "backoffice-core"
    log_level: str = "INFO"

    # Fees
    base_currency: str = "GHS"  # currency of the default fee schedules and merchant financials

    # Risk
    max_batch_size: int = 500  # merchants per batch assessment request


settings = Settings()
