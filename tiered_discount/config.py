from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "INFO"

    # Storage
    data_dir: str = "sample_data"
    store_backend: Literal["csv", "memory"] = "csv"
    storage_lock_timeout: float = Field(default=10.0, gt=0)

    # Allocation
    max_commit_attempts: int = Field(default=3, ge=1)
    price_decimal_places: int = Field(default=2, ge=0)

    # Notifications
    site_name: str = "Tiered Discounts"
    admin_email: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
